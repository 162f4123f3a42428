#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Core Schema 模块测试

测试目录条目的序列化/反序列化。
"""

import random

import pytest

from dwinico.core.schema import (
    IcoEntry,
    MAX_ENTRIES,
    ENTRY_SIZE,
    DIRECTORY_SIZE,
    RESERVED_SIZE,
    EMPTY_RECORD,
)
from dwinico.exceptions import FieldOverflowError, MalformedEntryError


# ==================== 常量测试 ====================

class TestConstants:
    """格式常量测试"""

    def test_directory_size(self):
        """目录区固定 4096 字节"""
        assert MAX_ENTRIES == 256
        assert ENTRY_SIZE == 16
        assert DIRECTORY_SIZE == 4096

    def test_empty_record(self):
        """空记录为 16 个零字节"""
        assert EMPTY_RECORD == b'\x00' * 16
        assert IcoEntry().pack() == EMPTY_RECORD


# ==================== IcoEntry 测试 ====================

class TestIcoEntryCodec:
    """IcoEntry pack/unpack 测试"""

    def test_field_layout(self):
        """字段位置与大端序"""
        entry = IcoEntry(
            width=0x0102,
            height=0x0304,
            offset=0x05060708,
            length=0x090A0B,
            reserved=b'\x0c\x0d\x0e\x0f\x10'
        )

        assert entry.pack() == bytes(range(1, 17))

    def test_unpack_field_layout(self):
        """从字节解析各字段"""
        entry = IcoEntry.unpack(bytes(range(1, 17)))

        assert entry.width == 0x0102
        assert entry.height == 0x0304
        assert entry.offset == 0x05060708
        assert entry.length == 0x090A0B
        assert entry.reserved == b'\x0c\x0d\x0e\x0f\x10'

    def test_header_example(self):
        """典型记录: offset 0x1000, length 0x10a2"""
        data = bytes.fromhex("0082 0011 00001000 0010a2 0000000000")
        entry = IcoEntry.unpack(data)

        assert (entry.width, entry.height) == (130, 17)
        assert entry.offset == 4096
        assert entry.length == 0x10a2
        assert entry.pack() == data

    def test_roundtrip_entry(self):
        """unpack(pack(e)) == e"""
        original = IcoEntry(
            width=65535,
            height=1,
            offset=0xFFFFFFFF,
            length=0xFFFFFF,
            reserved=b'\xff\x00\xaa\x55\x01'
        )

        assert IcoEntry.unpack(original.pack()) == original

    def test_roundtrip_ignores_payload(self):
        """payload 不参与序列化和比较"""
        entry = IcoEntry(width=10, height=10, length=3, payload=b'abc')
        decoded = IcoEntry.unpack(entry.pack())

        assert decoded == entry
        assert decoded.payload == b''

    def test_roundtrip_random_records(self):
        """pack(unpack(b)) == b 对任意 16 字节成立"""
        rng = random.Random(0x1C0)
        for _ in range(500):
            data = bytes(rng.getrandbits(8) for _ in range(16))
            assert IcoEntry.unpack(data).pack() == data

    def test_unpack_accepts_bytearray(self):
        """bytearray 输入"""
        data = bytearray(range(16))
        entry = IcoEntry.unpack(data)

        assert entry.pack() == bytes(data)
        assert isinstance(entry.reserved, bytes)

    @pytest.mark.parametrize("size", [0, 1, 15, 17, 32])
    def test_unpack_invalid_size(self, size):
        """非 16 字节输入"""
        with pytest.raises(MalformedEntryError) as exc_info:
            IcoEntry.unpack(b'\x00' * size)

        assert exc_info.value.expected == 16
        assert exc_info.value.actual == size


class TestIcoEntryOverflow:
    """字段越界测试"""

    @pytest.mark.parametrize("field,value,bits", [
        ("width", 0x10000, 16),
        ("height", 0x10000, 16),
        ("offset", 0x100000000, 32),
        ("length", 0x1000000, 24),
        ("width", -1, 16),
        ("length", -1, 24),
    ])
    def test_pack_rejects_overflow(self, field, value, bits):
        """越界值拒绝而不是截断"""
        entry = IcoEntry(**{field: value})

        with pytest.raises(FieldOverflowError) as exc_info:
            entry.pack()

        assert exc_info.value.field == field
        assert exc_info.value.value == value
        assert exc_info.value.bits == bits

    def test_max_values_accepted(self):
        """边界最大值可以序列化"""
        entry = IcoEntry(width=0xFFFF, height=0xFFFF, offset=0xFFFFFFFF, length=0xFFFFFF)

        assert entry.pack() == b'\xff' * 11 + b'\x00' * RESERVED_SIZE

    @pytest.mark.parametrize("reserved", [b'', b'\x00' * 4, b'\x00' * 6])
    def test_reserved_must_be_five_bytes(self, reserved):
        """保留字段长度错误"""
        with pytest.raises(MalformedEntryError):
            IcoEntry(reserved=reserved).pack()

    def test_set_offset_overflow(self):
        """set_offset 越界"""
        entry = IcoEntry()

        with pytest.raises(FieldOverflowError):
            entry.set_offset(1 << 32)
        assert entry.offset == 0


class TestIcoEntryFromImage:
    """IcoEntry.from_image 测试"""

    def test_dimensions_from_sof0(self, make_jpeg):
        """从 SOF0 读取宽高"""
        data = make_jpeg(130, 17, b'payload')
        entry = IcoEntry.from_image(data)

        assert (entry.width, entry.height) == (130, 17)
        assert entry.length == len(data)
        assert entry.payload == data
        assert entry.offset == 0
        assert entry.reserved == b'\x00' * RESERVED_SIZE

    def test_no_marker(self):
        """没有 SOF0 时宽高为 0"""
        entry = IcoEntry.from_image(b'\x89PNG not a jpeg')

        assert (entry.width, entry.height) == (0, 0)
        assert entry.length == 15

    def test_too_large(self):
        """超过 24 位长度的数据"""
        with pytest.raises(FieldOverflowError):
            IcoEntry.from_image(b'\x00' * (1 << 24))


class TestIcoEntryProperties:
    """属性测试"""

    def test_size(self):
        assert IcoEntry(width=10, height=20).size == 200

    def test_is_empty(self):
        assert IcoEntry().is_empty
        assert not IcoEntry(length=1).is_empty

    def test_str(self):
        entry = IcoEntry(width=130, height=17, offset=4096, length=4258)

        assert str(entry) == "130x17 - 4258 bytes - offset: 4096"
