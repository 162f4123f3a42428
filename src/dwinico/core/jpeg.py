#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
JPEG 帧头扫描

只读取 SOF0 (Start Of Frame, Baseline) 段中的宽高，不校验 JPEG 的其余内容。

SOF0 段结构 (标记 0xFF 0xC0 之后):
    Offset Len  What
         0   2  段长度
         2   1  采样精度
         3   2  高度 (Big-Endian)
         5   2  宽度 (Big-Endian)
         7   1  分量数
"""

import io
from typing import BinaryIO, Tuple


SOF0_MARKER = b'\xff\xc0'
SOF_BLOCK_SIZE = 8


def scan_dimensions(stream: BinaryIO) -> Tuple[int, int]:
    """
    从流中扫描 SOF0 标记并读取图像尺寸

    从当前位置逐字节读取，找到 0xFF 0xC0 后读取紧随其后的 8 字节帧头，
    返回时流位置位于帧头之后。

    未找到标记时返回 (0, 0) 而不是抛出异常，以兼容非 JPEG 或无 SOF0 的文件。
    流不可读 (或已关闭) 时直接返回 (0, 0)，不消耗任何字节。

    Args:
        stream: 二进制可读流

    Returns:
        (width, height) 元组
    """
    if stream.closed or not stream.readable():
        return 0, 0

    prev_ff = False
    while True:
        byte = stream.read(1)
        if not byte:
            return 0, 0

        if prev_ff and byte == SOF0_MARKER[1:]:
            # EOF 截断的帧头按零补齐
            block = stream.read(SOF_BLOCK_SIZE).ljust(SOF_BLOCK_SIZE, b'\x00')
            height = block[3] << 8 | block[4]
            width = block[5] << 8 | block[6]
            return width, height

        # 连续的 0xFF 填充字节仍可作为标记前缀
        prev_ff = byte == SOF0_MARKER[:1]


def scan_bytes(data: bytes) -> Tuple[int, int]:
    """从内存中的图像数据扫描尺寸"""
    return scan_dimensions(io.BytesIO(data))
