#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
批量操作与进度回调

提供批量图标处理、进度回调和错误处理的通用工具。
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, List, Tuple, Iterator, Union

logger = logging.getLogger(__name__)


class ErrorPolicy(Enum):
    """错误处理策略"""
    RAISE = "raise"   # 立即抛出异常
    SKIP = "skip"     # 跳过失败条目，继续处理
    ABORT = "abort"   # 停止处理，保留已完成部分


def resolve_policy(on_error: Union[str, ErrorPolicy]) -> ErrorPolicy:
    """将字符串或 ErrorPolicy 统一为 ErrorPolicy"""
    if isinstance(on_error, ErrorPolicy):
        return on_error
    return ErrorPolicy(on_error)


@dataclass
class IconItem:
    """
    待打包的图标文件

    index 通常由文件名前缀 "<index>_" 得到。
    """
    local_path: str           # 本地文件路径
    index: int                # 目录槽位 (0-255)


@dataclass
class ProgressInfo:
    """
    进度信息

    传递给进度回调函数的数据结构。
    """
    current: int              # 当前已处理条目数
    total: int                # 总条目数
    current_item: str         # 当前正在处理的条目 (文件路径或索引)
    bytes_processed: int      # 已处理字节数
    elapsed_time: float       # 已耗时 (秒)

    @property
    def progress(self) -> float:
        """进度百分比 (0.0 - 1.0)"""
        if self.total == 0:
            return 0.0
        return self.current / self.total


@dataclass
class BatchResult:
    """
    批量操作结果

    包含成功/失败/跳过统计和详细信息。
    """
    success_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    total_bytes: int = 0
    elapsed_time: float = 0.0
    failed_items: List[Tuple[str, Exception]] = field(default_factory=list)
    skipped_items: List[str] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return self.success_count + self.failed_count + self.skipped_count

    @property
    def success_rate(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.success_count / self.total_count


# 进度回调函数类型
ProgressCallback = Callable[[ProgressInfo], None]


class ProgressTracker:
    """
    进度跟踪器

    封装进度计算和回调调用逻辑。
    """

    def __init__(
        self,
        total: int,
        callback: Optional[ProgressCallback] = None,
        callback_interval: float = 0.0  # 最小回调间隔 (秒)
    ):
        self._total = total
        self._callback = callback
        self._callback_interval = callback_interval

        self._current = 0
        self._processed_bytes = 0
        self._start_time = time.time()
        self._last_callback_time = 0.0

    def update(self, item: str, bytes_processed: int = 0) -> None:
        """
        更新进度

        Args:
            item: 当前处理的条目
            bytes_processed: 本次处理的字节数
        """
        self._current += 1
        self._processed_bytes += bytes_processed

        if self._callback:
            now = time.time()
            # 限制回调频率，最后一条总是回调
            if (now - self._last_callback_time >= self._callback_interval
                    or self._current == self._total):
                info = ProgressInfo(
                    current=self._current,
                    total=self._total,
                    current_item=item,
                    bytes_processed=self._processed_bytes,
                    elapsed_time=now - self._start_time
                )
                self._callback(info)
                self._last_callback_time = now

    def finish(self) -> float:
        """完成并返回总耗时"""
        return time.time() - self._start_time


def scan_icon_dir(directory: str) -> Iterator[IconItem]:
    """
    扫描目录生成 IconItem 迭代器

    只扫描顶层文件；文件名没有索引前缀或索引超出 0-255 的文件被忽略。
    结果按索引升序排列。

    Args:
        directory: 本地目录路径

    Yields:
        IconItem 对象
    """
    from ..utils import parse_index

    items = []
    for file_path in Path(directory).iterdir():
        if not file_path.is_file():
            continue
        index = parse_index(file_path.name)
        if index is None:
            logger.debug("忽略 %s: 文件名没有槽位前缀", file_path)
            continue
        items.append(IconItem(local_path=str(file_path), index=index))

    items.sort(key=lambda item: (item.index, item.local_path))
    yield from items

