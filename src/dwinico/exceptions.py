#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dwinico 异常定义

所有异常均继承自 DwinIcoError，便于统一捕获。

目录级错误 (MalformedEntryError, TruncatedDirectoryError) 意味着整个容器不可用；
条目级错误 (ShortReadError) 可以跳过该条目继续处理。
"""


class DwinIcoError(Exception):
    """dwinico 基础异常"""
    pass


class MalformedEntryError(DwinIcoError):
    """
    目录记录格式错误

    目录记录不是 16 字节，或保留字段不是 5 字节时抛出。
    """
    def __init__(self, message: str, expected: int = None, actual: int = None):
        self.expected = expected
        self.actual = actual
        if expected is not None and actual is not None:
            message = f"{message}: 期望 {expected} 字节, 实际 {actual} 字节"
        super().__init__(message)


class FieldOverflowError(DwinIcoError):
    """
    字段溢出异常

    字段值无法用其固定位宽表示时抛出 (不做截断)。
    """
    def __init__(self, field: str, value: int, bits: int):
        self.field = field
        self.value = value
        self.bits = bits
        super().__init__(
            f"字段 '{field}' 的值 {value} 超出 {bits} 位无符号整数范围 "
            f"[0, {(1 << bits) - 1}]"
        )


class TruncatedDirectoryError(DwinIcoError):
    """
    目录区截断异常

    可读取的字节不足 256 x 16 = 4096 字节时抛出。
    """
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"目录区不完整: 期望 {expected} 字节, 实际只有 {actual} 字节"
        )


class ShortReadError(DwinIcoError):
    """
    数据读取不足异常

    条目记录的长度超过文件中实际可读的字节数时抛出。
    """
    def __init__(self, expected: int, actual: int, index: int = None):
        self.expected = expected
        self.actual = actual
        self.index = index
        where = f"条目 {index}" if index is not None else "条目"
        super().__init__(
            f"{where} 数据不完整: 期望 {expected} 字节, 实际只有 {actual} 字节"
        )
