#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Utils 模块测试

测试槽位索引与文件名映射。
"""

import json

import pytest

from dwinico.utils import (
    check_index,
    parse_index,
    icon_name,
    icon_filename,
    load_name_table,
)


class TestParseIndex:
    """parse_index 测试"""

    @pytest.mark.parametrize("filename,expected", [
        ("0_ICON_LOGO.jpg", 0),
        ("9_ICON_HotendTemp.jpg", 9),
        ("255_last.jpg", 255),
        ("12.jpg", 12),
        ("out/39_ICON_39.jpg", 39),
        ("007_padded.jpg", 7),
        # 无效
        ("logo.jpg", None),
        ("x_3.jpg", None),
        ("_3.jpg", None),
        ("256_overflow.jpg", None),
        ("-1_neg.jpg", None),
        ("1a_mixed.jpg", None),
    ])
    def test_parse(self, filename, expected):
        assert parse_index(filename) == expected


class TestIconFilename:
    """icon_filename / icon_name 测试"""

    def test_with_table(self):
        assert icon_filename(9, {9: "ICON_HotendTemp"}) == "9_ICON_HotendTemp.jpg"

    def test_default_name(self):
        assert icon_name(39) == "ICON_39"
        assert icon_filename(39, {9: "x"}) == "39_ICON_39.jpg"

    def test_ext(self):
        assert icon_filename(1, ext=".jpeg") == "1_ICON_1.jpeg"

    def test_roundtrip_with_parse(self):
        for index in (0, 1, 127, 255):
            assert parse_index(icon_filename(index)) == index

    @pytest.mark.parametrize("index", [-1, 256])
    def test_out_of_range(self, index):
        with pytest.raises(ValueError):
            icon_filename(index)


class TestCheckIndex:

    def test_valid(self):
        assert check_index(0) == 0
        assert check_index(255) == 255

    @pytest.mark.parametrize("index", [-1, 256])
    def test_invalid(self, index):
        with pytest.raises(ValueError):
            check_index(index)


class TestLoadNameTable:
    """load_name_table 测试"""

    def test_load(self, tmp_path):
        path = tmp_path / "names.json"
        path.write_text(json.dumps({"0": "ICON_LOGO", "9": "ICON_HotendTemp"}))

        assert load_name_table(str(path)) == {0: "ICON_LOGO", 9: "ICON_HotendTemp"}

    def test_invalid_key(self, tmp_path):
        path = tmp_path / "names.json"
        path.write_text(json.dumps({"300": "x"}))

        with pytest.raises(ValueError):
            load_name_table(str(path))
