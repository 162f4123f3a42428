#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
二进制 I/O 封装

提供 BinaryWriter 和 BinaryReader 类，封装所有底层文件操作，
使上层模块不需要直接操作文件指针。

DWIN ICO 容器的多字节字段全部为大端序 (Big-Endian)，
其中 length 字段为 3 字节 (24 位)，struct 没有对应的格式字符，
因此由 pack_u24 / unpack_u24 以移位和掩码实现。
"""

import os
from typing import BinaryIO

from ..exceptions import FieldOverflowError, ShortReadError


U16_BITS = 16
U24_BITS = 24
U32_BITS = 32


# ==================== 位宽工具函数 ====================

def check_range(field: str, value: int, bits: int) -> int:
    """
    检查值是否可用 bits 位无符号整数表示

    Args:
        field: 字段名 (用于错误信息)
        value: 待检查的值
        bits: 位宽

    Returns:
        原值

    Raises:
        FieldOverflowError: 值为负数或超出位宽
    """
    if value < 0 or value >> bits:
        raise FieldOverflowError(field, value, bits)
    return value


def pack_u24(value: int, field: str = 'u24') -> bytes:
    """
    序列化 24 位无符号整数 (Big-Endian, 3 bytes)

    Raises:
        FieldOverflowError: 值超出 [0, 2^24 - 1]
    """
    check_range(field, value, U24_BITS)
    return bytes(((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF))


def unpack_u24(data: bytes) -> int:
    """反序列化 24 位无符号整数 (Big-Endian, 恰好 3 bytes)"""
    if len(data) != 3:
        raise ValueError(f"u24 需要 3 字节, 实际 {len(data)} 字节")
    return data[0] << 16 | data[1] << 8 | data[2]


def stream_size(file: BinaryIO) -> int:
    """
    获取流的总大小

    不改变流的当前位置。
    """
    current = file.tell()
    size = file.seek(0, os.SEEK_END)
    file.seek(current)
    return size


class BinaryWriter:
    """
    二进制写入器

    封装底层写操作并跟踪写入位置。
    """

    def __init__(self, file: BinaryIO):
        """
        初始化写入器

        Args:
            file: 以 'wb' 模式打开的文件对象 (或 BytesIO)
        """
        self._file = file
        self._position = 0

    @property
    def position(self) -> int:
        """当前写入位置"""
        return self._position

    def write_bytes(self, data: bytes) -> int:
        """
        写入原始字节

        Args:
            data: 要写入的字节

        Returns:
            写入的字节数
        """
        written = self._file.write(data)
        self._position += written
        return written

    def reserve(self, size: int) -> int:
        """
        预留空间 (写入零字节)

        用于写入空目录槽位等全零区域。

        Args:
            size: 预留字节数

        Returns:
            预留区域的起始位置
        """
        start = self._position
        self.write_bytes(b'\x00' * size)
        return start


class BinaryReader:
    """
    二进制读取器

    封装底层读操作，读取不足时抛出 ShortReadError。
    """

    def __init__(self, file: BinaryIO):
        """
        初始化读取器

        Args:
            file: 以 'rb' 模式打开的文件对象 (或 BytesIO)
        """
        self._file = file
        self._position = file.tell()

    @property
    def position(self) -> int:
        """当前读取位置"""
        return self._position

    @property
    def size(self) -> int:
        """流的总大小"""
        return stream_size(self._file)

    def read_bytes(self, size: int) -> bytes:
        """
        读取指定字节数

        Args:
            size: 要读取的字节数

        Returns:
            读取的字节

        Raises:
            ShortReadError: 流中不足请求的字节数
        """
        data = self._file.read(size)
        self._position += len(data)
        if len(data) < size:
            raise ShortReadError(size, len(data))
        return data

    def seek(self, position: int):
        """
        移动到指定位置

        Args:
            position: 目标位置
        """
        self._file.seek(position)
        self._position = position
