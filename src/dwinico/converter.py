#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
格式转换工具

提供 ICO 目录到 JSON 的导出，以及读-改-写方式的重新打包。
"""

import json
import logging
from typing import Optional, Dict, Any, Iterable

from .archive import IcoBuilder, IcoReader
from .core.schema import MAX_ENTRIES

logger = logging.getLogger(__name__)


class IcoJsonConverter:
    """
    ICO 和 JSON 互转

    JSON 格式:
    {
        "file_size": 123456,
        "entry_count": 2,
        "entries": [
            {"index": 0, "width": 130, "height": 17, "offset": 4096,
             "length": 4258, "reserved": "0000000000"},
            ...
        ]
    }
    """

    @staticmethod
    def ico_to_dict(ico_path: str) -> Dict[str, Any]:
        """
        读取 ICO 目录为字典

        只包含非空槽位，reserved 以十六进制字符串表示。
        """
        with IcoReader(ico_path) as reader:
            entries = []
            for index, entry in enumerate(reader.entries):
                if entry.is_empty:
                    continue
                entries.append({
                    'index': index,
                    'width': entry.width,
                    'height': entry.height,
                    'offset': entry.offset,
                    'length': entry.length,
                    'reserved': entry.reserved.hex(),
                })

            return {
                'file_size': reader.file_size,
                'entry_count': len(entries),
                'entries': entries,
            }

    @staticmethod
    def ico_to_json(ico_path: str, output_path: str, indent: int = 2) -> None:
        """
        将 ICO 目录导出为 JSON 文件

        Args:
            ico_path: ICO 文件路径
            output_path: 输出 JSON 文件路径
            indent: JSON 缩进
        """
        data = IcoJsonConverter.ico_to_dict(ico_path)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=indent)

    @staticmethod
    def repack(
        src_path: str,
        dst_path: str,
        replacements: Optional[Dict[int, bytes]] = None,
        removals: Optional[Iterable[int]] = None
    ) -> int:
        """
        重新打包 ICO 文件

        保留未改动条目的 reserved 字节，替换或移除指定槽位后重新计算 offset。
        src_path 和 dst_path 可以相同: 新文件在源文件关闭后才写出。

        Args:
            src_path: 源 ICO 文件
            dst_path: 输出 ICO 文件
            replacements: {index: JPEG 数据}，替换或新增槽位
            removals: 要移除的槽位索引

        Returns:
            输出文件中的图标数量
        """
        replacements = replacements or {}
        removed = set(removals or ())

        builder = IcoBuilder(dst_path)
        with IcoReader(src_path) as reader:
            for index in reader.list_indices():
                if index in removed or index in replacements:
                    continue
                builder.add_entry(index, reader.load_entry(index))

        for index in sorted(replacements):
            if index in removed:
                continue
            builder.add_image(index, replacements[index])

        logger.debug(
            "重新打包 %s -> %s: 保留 %d / %d 个槽位",
            src_path, dst_path, builder.entry_count, MAX_ENTRIES
        )
        builder.build()
        return builder.entry_count
