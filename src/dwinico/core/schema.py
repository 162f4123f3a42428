#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dwinico 数据结构定义

定义 DWIN ICO 容器的格式常量和目录条目 IcoEntry。

容器布局 (多字节字段均为 Big-Endian):
    0x0000 - 0x0FFF  目录区: 256 条 16 字节记录
    0x1000 - EOF     数据区: 按索引升序连续存放的 JPEG 数据

目录记录结构:
    Offset Len  What
         0   2  width
         2   2  height
         4   4  数据在文件中的绝对位置
         8   3  数据长度
        11   5  保留字节 (含义未知，原样保留)
"""

import struct
from dataclasses import dataclass, field
from typing import ClassVar

from .binary_io import (
    U16_BITS, U24_BITS, U32_BITS,
    check_range, pack_u24, unpack_u24,
)
from .jpeg import scan_bytes
from ..exceptions import MalformedEntryError


# ==================== 常量定义 ====================

MAX_ENTRIES = 256
ENTRY_SIZE = 16
DIRECTORY_SIZE = MAX_ENTRIES * ENTRY_SIZE  # 4096
RESERVED_SIZE = 5

# 未使用槽位的记录
EMPTY_RECORD = b'\x00' * ENTRY_SIZE


# ==================== 目录条目 ====================

@dataclass
class IcoEntry:
    """
    目录条目 (16 bytes)

    payload 仅存在于内存中，不参与序列化和相等比较。
    """
    HEAD_FORMAT: ClassVar[str] = '>HHI'
    HEAD_SIZE: ClassVar[int] = 8
    SIZE: ClassVar[int] = ENTRY_SIZE

    width: int = 0          # 图像宽度 (u16)
    height: int = 0         # 图像高度 (u16)
    offset: int = 0         # 数据的绝对文件位置 (u32)，构建时由 IcoBuilder 分配
    length: int = 0         # 数据长度 (u24)，0 表示空槽位
    reserved: bytes = b'\x00' * RESERVED_SIZE
    payload: bytes = field(default=b'', repr=False, compare=False)

    @property
    def size(self) -> int:
        """像素数"""
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        """是否为空槽位"""
        return self.length == 0

    def set_offset(self, offset: int) -> None:
        """
        设置数据在文件中的位置

        条目构建完成后唯一允许的修改，仅由 IcoBuilder 调用。

        Raises:
            FieldOverflowError: offset 超出 32 位
        """
        self.offset = check_range('offset', offset, U32_BITS)

    def validate(self) -> None:
        """
        检查所有字段是否能放入各自的位宽

        Raises:
            FieldOverflowError: 数值字段越界
            MalformedEntryError: 保留字段不是 5 字节
        """
        check_range('width', self.width, U16_BITS)
        check_range('height', self.height, U16_BITS)
        check_range('offset', self.offset, U32_BITS)
        check_range('length', self.length, U24_BITS)
        if len(self.reserved) != RESERVED_SIZE:
            raise MalformedEntryError(
                "保留字段长度错误",
                expected=RESERVED_SIZE,
                actual=len(self.reserved)
            )

    def pack(self) -> bytes:
        """序列化为 16 字节目录记录"""
        self.validate()
        head = struct.pack(self.HEAD_FORMAT, self.width, self.height, self.offset)
        return head + pack_u24(self.length, 'length') + bytes(self.reserved)

    @classmethod
    def unpack(cls, data: bytes) -> 'IcoEntry':
        """
        从 16 字节目录记录反序列化

        Raises:
            MalformedEntryError: data 不是 16 字节
        """
        if len(data) != cls.SIZE:
            raise MalformedEntryError(
                "目录记录长度错误", expected=cls.SIZE, actual=len(data)
            )
        width, height, offset = struct.unpack_from(cls.HEAD_FORMAT, data, 0)
        return cls(
            width=width,
            height=height,
            offset=offset,
            length=unpack_u24(bytes(data[cls.HEAD_SIZE:cls.HEAD_SIZE + 3])),
            reserved=bytes(data[cls.HEAD_SIZE + 3:])
        )

    @classmethod
    def from_image(cls, data: bytes) -> 'IcoEntry':
        """
        从原始图像数据创建条目

        扫描 SOF0 帧头获得宽高，完整数据作为 payload；offset 稍后由构建器分配。

        Raises:
            FieldOverflowError: 数据超过 24 位长度上限
        """
        data = bytes(data)
        check_range('length', len(data), U24_BITS)
        width, height = scan_bytes(data)
        return cls(width=width, height=height, length=len(data), payload=data)

    def __str__(self) -> str:
        return (
            f"{self.width}x{self.height} - {self.length} bytes - "
            f"offset: {self.offset}"
        )
