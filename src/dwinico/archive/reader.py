#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
ICO 容器读取器

读取 256 条目录记录，并按记录的 offset/length 提取每个图标的 JPEG 数据。
"""

import dataclasses
import logging
import os
from typing import Optional, List, Dict, Callable, BinaryIO, Iterator, Tuple, Union

from ..core.binary_io import BinaryReader
from ..core.batch import (
    BatchResult, ErrorPolicy, ProgressTracker, ProgressInfo, resolve_policy
)
from ..core.schema import IcoEntry, MAX_ENTRIES, ENTRY_SIZE, DIRECTORY_SIZE
from ..exceptions import ShortReadError, TruncatedDirectoryError
from ..utils import check_index, icon_filename

logger = logging.getLogger(__name__)


def read_directory(stream: BinaryIO) -> List[IcoEntry]:
    """
    从流的开头读取完整目录

    Args:
        stream: 可 seek 的二进制流

    Returns:
        按文件顺序排列的 256 个 IcoEntry

    Raises:
        TruncatedDirectoryError: 不足 4096 字节
    """
    reader = BinaryReader(stream)
    reader.seek(0)
    try:
        data = reader.read_bytes(DIRECTORY_SIZE)
    except ShortReadError as e:
        raise TruncatedDirectoryError(DIRECTORY_SIZE, e.actual) from e

    return [
        IcoEntry.unpack(data[i * ENTRY_SIZE:(i + 1) * ENTRY_SIZE])
        for i in range(MAX_ENTRIES)
    ]


def extract_payload(
    stream: BinaryIO,
    entry: IcoEntry,
    index: Optional[int] = None
) -> Optional[bytes]:
    """
    提取单个条目的数据

    空槽位 (length == 0) 不触碰流；length 不小于整个流的大小时视为垃圾记录。
    两种情况都返回 None 表示跳过。

    Args:
        stream: 可 seek 的二进制流
        entry: 目录条目
        index: 槽位索引 (仅用于错误信息)

    Returns:
        数据字节，或 None (跳过)

    Raises:
        ShortReadError: 流中剩余字节不足 length
    """
    if entry.length == 0:
        return None

    reader = BinaryReader(stream)
    if entry.length >= reader.size:
        return None

    reader.seek(entry.offset)
    try:
        return reader.read_bytes(entry.length)
    except ShortReadError as e:
        raise ShortReadError(entry.length, e.actual, index) from e


class IcoReader:
    """
    ICO 容器读取器

    打开时读取完整目录；目录损坏时抛出异常并关闭文件。
    数据按需读取。
    """

    def __init__(self, file_path: str):
        """
        初始化读取器

        Args:
            file_path: ICO 文件路径

        Raises:
            TruncatedDirectoryError: 目录区不完整
        """
        self._file_path = file_path

        # 内部状态
        self._file: Optional[BinaryIO] = None
        self._file_size: int = 0
        self._entries: List[IcoEntry] = []

        # 加载文件
        self._load()

    def _load(self) -> None:
        """加载目录区"""
        self._file = open(self._file_path, 'rb')
        try:
            self._entries = read_directory(self._file)
            self._file_size = BinaryReader(self._file).size
        except BaseException:
            self.close()
            raise

        logger.debug(
            "已加载 %s: %d 个非空槽位, %d 字节",
            self._file_path, self.entry_count, self._file_size
        )

    def _extract(self, index: int) -> Optional[bytes]:
        return extract_payload(self._file, self._entries[index], index)

    def get_entry(self, index: int) -> IcoEntry:
        """获取指定槽位的目录条目 (不含数据)"""
        return self._entries[check_index(index)]

    def exists(self, index: int) -> bool:
        """槽位是否有可提取的数据"""
        entry = self.get_entry(index)
        return not entry.is_empty and entry.length < self._file_size

    def read(self, index: int) -> bytes:
        """
        读取指定槽位的数据

        Raises:
            FileNotFoundError: 槽位为空或记录无效
            ShortReadError: 数据不完整
        """
        check_index(index)
        data = self._extract(index)
        if data is None:
            raise FileNotFoundError(f"槽位 {index} 为空或记录无效")
        return data

    def load_entry(self, index: int) -> IcoEntry:
        """
        读取条目及其数据

        返回副本，payload 已填充，可直接交给 IcoBuilder.add_entry()。
        """
        data = self.read(index)
        return dataclasses.replace(self.get_entry(index), payload=data)

    def list_indices(self) -> List[int]:
        """列出所有可提取的槽位索引 (升序)"""
        return [i for i in range(MAX_ENTRIES) if self.exists(i)]

    def iter_payloads(
        self,
        on_error: Union[str, ErrorPolicy] = 'skip'
    ) -> Iterator[Tuple[int, bytes]]:
        """
        按索引升序迭代所有数据

        Args:
            on_error: 单个条目读取失败时的策略 ('raise', 'skip', 'abort')

        Yields:
            (index, data) 元组
        """
        policy = resolve_policy(on_error)

        for index, entry in enumerate(self._entries):
            if entry.is_empty:
                continue
            try:
                data = self._extract(index)
            except ShortReadError as e:
                if policy is ErrorPolicy.RAISE:
                    raise
                logger.warning("跳过槽位 %d: %s", index, e)
                if policy is ErrorPolicy.ABORT:
                    return
                continue

            if data is None:
                logger.debug("跳过槽位 %d: 长度 %d 无效", index, entry.length)
                continue
            yield index, data

    def read_batch(
        self,
        indices: List[int],
        on_error: Union[str, ErrorPolicy] = 'raise'
    ) -> Dict[int, bytes]:
        """
        批量读取多个槽位

        Args:
            indices: 槽位索引列表
            on_error: 错误处理策略 ('raise', 'skip')

        Returns:
            {index: data} 字典
        """
        policy = resolve_policy(on_error)
        result = {}

        for index in indices:
            try:
                result[index] = self.read(index)
            except (FileNotFoundError, ShortReadError):
                if policy is ErrorPolicy.RAISE:
                    raise
                if policy is ErrorPolicy.ABORT:
                    break

        return result

    def extract_all(
        self,
        output_dir: str,
        name_table: Optional[Dict[int, str]] = None,
        on_error: Union[str, ErrorPolicy] = 'skip',
        progress_callback: Optional[Callable[[ProgressInfo], None]] = None
    ) -> BatchResult:
        """
        解包所有图标到指定目录

        每个图标写为 "<index>_<name>.jpg"。

        Args:
            output_dir: 输出目录路径
            name_table: 索引到名称的映射 (可选)
            on_error: 错误处理策略
            progress_callback: 进度回调函数

        Returns:
            BatchResult 批量操作结果
        """
        policy = resolve_policy(on_error)
        candidates = [i for i, e in enumerate(self._entries) if not e.is_empty]

        tracker = ProgressTracker(
            total=len(candidates),
            callback=progress_callback
        )

        result = BatchResult()
        os.makedirs(output_dir, exist_ok=True)

        for index in candidates:
            entry = self._entries[index]
            try:
                data = self._extract(index)
                if data is None:
                    logger.debug("跳过槽位 %d: 长度 %d 无效", index, entry.length)
                    result.skipped_count += 1
                    result.skipped_items.append(str(index))
                    tracker.update(str(index), 0)
                    continue

                local_path = os.path.join(output_dir, icon_filename(index, name_table))
                with open(local_path, 'wb') as f:
                    f.write(data)

                logger.info("Index: %d - %s", index, entry)
                result.success_count += 1
                result.total_bytes += len(data)
                tracker.update(local_path, len(data))

            except (ShortReadError, OSError) as e:
                if policy is ErrorPolicy.RAISE:
                    raise
                logger.warning("槽位 %d 解包失败: %s", index, e)
                result.failed_count += 1
                result.failed_items.append((str(index), e))
                if policy is ErrorPolicy.ABORT:
                    break
                tracker.update(str(index), 0)

        result.elapsed_time = tracker.finish()
        return result

    @property
    def entries(self) -> List[IcoEntry]:
        """全部 256 个目录条目 (副本列表)"""
        return list(self._entries)

    @property
    def entry_count(self) -> int:
        """非空槽位数量"""
        return sum(1 for e in self._entries if not e.is_empty)

    @property
    def file_size(self) -> int:
        return self._file_size

    def close(self) -> None:
        """关闭文件"""
        if self._file:
            self._file.close()
            self._file = None

    def __enter__(self) -> 'IcoReader':
        return self

    def __exit__(self, *args) -> None:
        self.close()
