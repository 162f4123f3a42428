#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dwinico 容器读写

提供 ICO 容器的构建和读取功能。
"""

from .builder import IcoBuilder, build_container
from .reader import IcoReader, read_directory, extract_payload

__all__ = [
    "IcoBuilder",
    "IcoReader",
    "build_container",
    "read_directory",
    "extract_payload",
]
