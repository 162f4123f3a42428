#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
dwinico 工具函数

提供槽位索引与文件名之间的映射。

解包时每个图标写为 "<index>_<name>.jpg"；
打包时从文件名前缀 "<index>_" (或 "<index>.jpg") 取回槽位索引。
"""

import json
import os
import re
from typing import Dict, Optional

from .core.schema import MAX_ENTRIES


_INDEX_RE = re.compile(r'[0-9]+')


def check_index(index: int) -> int:
    """
    检查槽位索引是否在 [0, 255]

    Raises:
        ValueError: 索引越界
    """
    if not 0 <= index < MAX_ENTRIES:
        raise ValueError(f"槽位索引 {index} 超出范围 [0, {MAX_ENTRIES - 1}]")
    return index


def parse_index(filename: str) -> Optional[int]:
    """
    从文件名前缀解析槽位索引

    Args:
        filename: 文件名 (可带目录)

    Returns:
        索引；没有数字前缀或越界时返回 None

    Examples:
        >>> parse_index("9_ICON_HotendTemp.jpg")
        9
        >>> parse_index("out/12.jpg")
        12
        >>> parse_index("logo.jpg") is None
        True
    """
    basename = os.path.basename(filename)
    if '_' in basename:
        head = basename.split('_', 1)[0]
    else:
        head = os.path.splitext(basename)[0]

    if not _INDEX_RE.fullmatch(head):
        return None

    index = int(head)
    if index >= MAX_ENTRIES:
        return None
    return index


def icon_name(index: int, name_table: Optional[Dict[int, str]] = None) -> str:
    """
    获取槽位名称

    名称表中没有的索引使用 "ICON_<index>"。
    """
    if name_table and index in name_table:
        return name_table[index]
    return f"ICON_{index}"


def icon_filename(
    index: int,
    name_table: Optional[Dict[int, str]] = None,
    ext: str = '.jpg'
) -> str:
    """
    生成解包输出文件名

    Examples:
        >>> icon_filename(9, {9: "ICON_HotendTemp"})
        '9_ICON_HotendTemp.jpg'
        >>> icon_filename(39)
        '39_ICON_39.jpg'
    """
    check_index(index)
    return f"{index}_{icon_name(index, name_table)}{ext}"


def load_name_table(json_path: str) -> Dict[int, str]:
    """
    从 JSON 文件加载名称表

    JSON 格式: {"0": "ICON_LOGO", "1": "ICON_Print_0", ...}

    Raises:
        ValueError: 键不是合法的槽位索引
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        raw = json.load(f)

    table = {}
    for key, name in raw.items():
        table[check_index(int(key))] = str(name)
    return table
