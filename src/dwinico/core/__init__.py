#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dwinico 核心模块

提供二进制 I/O 封装、目录条目定义、JPEG 帧头扫描和批量操作工具。
"""

from .binary_io import BinaryReader, BinaryWriter, check_range, pack_u24, unpack_u24
from .jpeg import scan_dimensions, scan_bytes
from .schema import (
    IcoEntry, MAX_ENTRIES, ENTRY_SIZE, DIRECTORY_SIZE, RESERVED_SIZE, EMPTY_RECORD
)
from .batch import (
    IconItem, ProgressInfo, BatchResult, ProgressTracker,
    ErrorPolicy, scan_icon_dir
)

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "check_range",
    "pack_u24",
    "unpack_u24",
    "scan_dimensions",
    "scan_bytes",
    "IcoEntry",
    "MAX_ENTRIES",
    "ENTRY_SIZE",
    "DIRECTORY_SIZE",
    "RESERVED_SIZE",
    "EMPTY_RECORD",
    # 批量操作
    "IconItem",
    "ProgressInfo",
    "BatchResult",
    "ProgressTracker",
    "ErrorPolicy",
    "scan_icon_dir",
]
