#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
pytest 全局配置

提供共享 fixtures 和测试工具。
"""

import io
from typing import Dict

import pytest


# ==================== 测试数据工具 ====================

def _make_jpeg(width: int, height: int, body: bytes = b'') -> bytes:
    """
    生成最小的 JPEG 形数据

    SOI + APP0(JFIF) + SOF0 + body + EOI，只用于尺寸扫描，不是可解码的图像。
    """
    return (
        b'\xff\xd8'
        + b'\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        + b'\xff\xc0\x00\x11\x08'
        + height.to_bytes(2, 'big')
        + width.to_bytes(2, 'big')
        + b'\x03\x01\x22\x00\x02\x11\x01\x03\x11\x01'
        + body
        + b'\xff\xd9'
    )


class SpyStream(io.BytesIO):
    """记录 seek/read 调用的 BytesIO"""

    def __init__(self, data: bytes = b''):
        super().__init__(data)
        self.calls = []

    def seek(self, *args):
        self.calls.append(('seek',) + args)
        return super().seek(*args)

    def read(self, *args):
        self.calls.append(('read',) + args)
        return super().read(*args)


# ==================== 基础 Fixtures ====================

@pytest.fixture
def make_jpeg():
    """JPEG 形数据生成函数"""
    return _make_jpeg


@pytest.fixture
def spy_stream():
    """SpyStream 类"""
    return SpyStream


@pytest.fixture
def sample_icons(tmp_path) -> tuple:
    """
    创建按 "<index>_<name>.jpg" 命名的图标目录

    Returns:
        (目录路径, {index: 数据} 字典)
    """
    icons: Dict[int, bytes] = {
        0: _make_jpeg(130, 17, b'logo' * 10),
        1: _make_jpeg(100, 200, b'print'),
        9: _make_jpeg(24, 24, bytes(range(64))),
        40: _make_jpeg(48, 32, b'\x00' * 300),
    }

    icon_dir = tmp_path / "icons"
    icon_dir.mkdir()
    for index, data in icons.items():
        (icon_dir / f"{index}_ICON_{index}.jpg").write_bytes(data)

    # 没有索引前缀的文件应被忽略
    (icon_dir / "readme.txt").write_bytes(b"not an icon")

    return icon_dir, icons


@pytest.fixture
def ico_file(tmp_path, sample_icons) -> tuple:
    """
    创建一个预构建的 ICO 文件

    Returns:
        (ico路径, {index: 数据} 字典)
    """
    from dwinico import IcoBuilder

    icon_dir, icons = sample_icons
    ico_path = tmp_path / "9.ICO"

    builder = IcoBuilder(str(ico_path))
    builder.add_dir(str(icon_dir))
    builder.build()

    return ico_path, icons
