#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
ICO 容器构建器

用于从一组 JPEG 图标创建 DWIN ICO 容器。
"""

import dataclasses
import io
import logging
import os
from typing import Optional, List, Dict, Callable, Mapping, Iterable, Union

from ..core.binary_io import BinaryWriter
from ..core.batch import (
    IconItem, ProgressInfo, BatchResult, ProgressTracker,
    ErrorPolicy, resolve_policy, scan_icon_dir
)
from ..core.schema import (
    IcoEntry, MAX_ENTRIES, ENTRY_SIZE, DIRECTORY_SIZE, EMPTY_RECORD
)
from ..exceptions import DwinIcoError
from ..utils import check_index, parse_index

logger = logging.getLogger(__name__)


def _check_payload(index: int, entry: IcoEntry) -> None:
    if not entry.payload:
        raise ValueError(f"槽位 {index} 没有数据")
    if entry.length != len(entry.payload):
        raise ValueError(
            f"槽位 {index} 的 length ({entry.length}) 与数据长度 "
            f"({len(entry.payload)}) 不一致"
        )


def build_container(entries: Mapping[int, IcoEntry]) -> bytes:
    """
    构建完整的 ICO 容器

    两阶段构建:
    阶段 1: 按索引 0-255 依次分配 offset (紧跟 4096 字节目录区)，
            为每个槽位生成独立的目录记录
    阶段 2: 写出目录区 (缺失槽位写 16 个零字节)，再按相同顺序拼接数据

    布局在副本上计算，同一个 IcoEntry 可以出现在多个槽位。
    构建成功后才回写各条目的 offset (共享的条目保留最后一个槽位的 offset)；
    失败时传入的条目保持不变。

    Args:
        entries: {index: IcoEntry} 映射，每个条目须带有 payload

    Returns:
        容器字节

    Raises:
        ValueError: 索引越界或条目数据不一致
        FieldOverflowError: 字段或 offset 超出位宽
        MalformedEntryError: 保留字段不是 5 字节
    """
    slots: List[Optional[IcoEntry]] = [None] * MAX_ENTRIES
    for index, entry in entries.items():
        check_index(index)
        _check_payload(index, entry)
        entry.validate()
        slots[index] = entry

    # ===== 阶段 1: 计算布局 =====
    placed: List[Optional[IcoEntry]] = [None] * MAX_ENTRIES
    records: List[bytes] = [EMPTY_RECORD] * MAX_ENTRIES
    cursor = DIRECTORY_SIZE
    for index, entry in enumerate(slots):
        if entry is None:
            continue
        copy = dataclasses.replace(entry)
        copy.set_offset(cursor)
        placed[index] = copy
        records[index] = copy.pack()
        cursor += len(entry.payload)

    # ===== 阶段 2: 序列化 =====
    buffer = io.BytesIO()
    writer = BinaryWriter(buffer)

    for index, record in enumerate(records):
        if placed[index] is None:
            writer.reserve(ENTRY_SIZE)
        else:
            writer.write_bytes(record)

    for copy in placed:
        if copy is not None:
            writer.write_bytes(copy.payload)

    for entry, copy in zip(slots, placed):
        if entry is not None:
            entry.set_offset(copy.offset)

    return buffer.getvalue()


class IcoBuilder:
    """
    ICO 容器构建器

    收集各槽位的图标，build() 时一次性计算布局并写出文件。
    """

    def __init__(self, output_path: str):
        """
        初始化构建器

        Args:
            output_path: 输出文件路径
        """
        self._output_path = output_path
        self._entries: Dict[int, IcoEntry] = {}

    def add_entry(self, index: int, entry: IcoEntry) -> None:
        """
        添加已有条目

        保留条目的 reserved 字节，适用于读-改-写场景。
        同一索引重复添加时，后添加的条目替换之前的条目。

        Args:
            index: 槽位索引 (0-255)
            entry: 带 payload 的条目

        Raises:
            ValueError: 索引越界、没有数据或 length 与数据不一致
            FieldOverflowError: 字段超出位宽
        """
        check_index(index)
        _check_payload(index, entry)
        entry.validate()

        if index in self._entries:
            logger.warning("槽位 %d 已存在，替换为新条目", index)
        self._entries[index] = entry

    def add_image(self, index: int, data: bytes) -> IcoEntry:
        """
        添加原始图像数据

        扫描 SOF0 帧头获得宽高，未找到时宽高为 0。

        Args:
            index: 槽位索引 (0-255)
            data: JPEG 数据

        Returns:
            创建的条目
        """
        check_index(index)
        entry = IcoEntry.from_image(data)
        if entry.size == 0:
            logger.debug("槽位 %d 未找到 SOF0 帧头，宽高记为 0", index)
        self.add_entry(index, entry)
        return entry

    def add_file(self, local_path: str, index: Optional[int] = None) -> IcoEntry:
        """
        添加单个图标文件

        Args:
            local_path: 本地文件路径
            index: 槽位索引 (默认从文件名前缀 "<index>_" 解析)

        Raises:
            FileNotFoundError: 本地文件不存在
            ValueError: 无法确定槽位索引
        """
        if not os.path.isfile(local_path):
            raise FileNotFoundError(f"文件不存在: {local_path}")

        if index is None:
            index = parse_index(local_path)
            if index is None:
                raise ValueError(f"无法从文件名解析槽位索引: {local_path}")

        with open(local_path, 'rb') as f:
            data = f.read()

        return self.add_image(index, data)

    def add_dir(self, local_dir: str) -> int:
        """
        添加目录中所有带索引前缀的文件

        Args:
            local_dir: 本地目录路径

        Returns:
            添加的文件数量
        """
        if not os.path.isdir(local_dir):
            raise NotADirectoryError(f"不是目录: {local_dir}")

        count = 0
        for item in scan_icon_dir(local_dir):
            self.add_file(item.local_path, item.index)
            count += 1
        return count

    def remove(self, index: int) -> None:
        """移除槽位 (不存在时忽略)"""
        self._entries.pop(check_index(index), None)

    def build_bytes(self) -> bytes:
        """构建容器字节 (不写文件)"""
        return build_container(self._entries)

    def build(self) -> None:
        """
        构建并写入 ICO 文件

        先在内存中完成全部序列化，成功后才创建输出文件。
        """
        data = self.build_bytes()
        with open(self._output_path, 'wb') as f:
            f.write(data)

        logger.info(
            "已写入 %s: %d 个图标, %d 字节",
            self._output_path, len(self._entries), len(data)
        )

    @property
    def entry_count(self) -> int:
        """已添加的图标数量"""
        return len(self._entries)

    @property
    def indices(self) -> List[int]:
        """已占用的槽位索引 (升序)"""
        return sorted(self._entries)

    def get_entry(self, index: int) -> IcoEntry:
        """获取已添加的条目"""
        return self._entries[check_index(index)]

    # ==================== 批量操作 API ====================

    def add_files_batch(
        self,
        items: Iterable[IconItem],
        on_error: Union[str, ErrorPolicy] = 'raise',
        progress_callback: Optional[Callable[[ProgressInfo], None]] = None
    ) -> BatchResult:
        """
        批量添加图标文件

        Args:
            items: IconItem 列表或迭代器
            on_error: 错误处理策略 ('raise', 'skip', 'abort')
            progress_callback: 进度回调函数

        Returns:
            BatchResult 批量操作结果
        """
        policy = resolve_policy(on_error)

        # 转换为列表以获取总数 (如果是迭代器)
        if not isinstance(items, list):
            items = list(items)

        tracker = ProgressTracker(
            total=len(items),
            callback=progress_callback
        )

        result = BatchResult()

        for item in items:
            try:
                entry = self.add_file(item.local_path, item.index)
                result.success_count += 1
                result.total_bytes += entry.length
                tracker.update(item.local_path, entry.length)

            except (OSError, ValueError, DwinIcoError) as e:
                if policy is ErrorPolicy.RAISE:
                    raise
                logger.warning("添加 %s 失败: %s", item.local_path, e)
                result.failed_count += 1
                result.failed_items.append((item.local_path, e))
                if policy is ErrorPolicy.ABORT:
                    break
                tracker.update(item.local_path, 0)

        result.elapsed_time = tracker.finish()
        return result

    def add_dir_batch(
        self,
        local_dir: str,
        on_error: Union[str, ErrorPolicy] = 'raise',
        progress_callback: Optional[Callable[[ProgressInfo], None]] = None
    ) -> BatchResult:
        """
        批量添加目录 (带进度回调)

        Args:
            local_dir: 本地目录路径
            on_error: 错误处理策略
            progress_callback: 进度回调函数

        Returns:
            BatchResult 批量操作结果
        """
        if not os.path.isdir(local_dir):
            raise NotADirectoryError(f"不是目录: {local_dir}")

        items = list(scan_icon_dir(local_dir))
        return self.add_files_batch(items, on_error, progress_callback)
