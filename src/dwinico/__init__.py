#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dwinico - DWIN LCD 屏 .ICO 图标容器的解包与打包

容器由 4096 字节的固定目录区 (256 x 16 字节记录) 和随后连续存放的 JPEG 数据组成。
"""

__version__ = "0.1.0"

# 异常类
from .exceptions import (
    DwinIcoError,
    MalformedEntryError,
    FieldOverflowError,
    TruncatedDirectoryError,
    ShortReadError,
)

# 数据结构
from .core import IcoEntry, scan_dimensions, MAX_ENTRIES, DIRECTORY_SIZE

# 工具函数
from .utils import parse_index, icon_filename

# 容器读写
from .archive import (
    IcoBuilder,
    IcoReader,
    build_container,
    read_directory,
    extract_payload,
)

# 格式转换
from .converter import IcoJsonConverter

__all__ = [
    # 版本
    "__version__",
    # 异常
    "DwinIcoError",
    "MalformedEntryError",
    "FieldOverflowError",
    "TruncatedDirectoryError",
    "ShortReadError",
    # 数据结构
    "IcoEntry",
    "scan_dimensions",
    "MAX_ENTRIES",
    "DIRECTORY_SIZE",
    # 工具
    "parse_index",
    "icon_filename",
    # 读写
    "IcoBuilder",
    "IcoReader",
    "build_container",
    "read_directory",
    "extract_payload",
    # 格式转换
    "IcoJsonConverter",
]
