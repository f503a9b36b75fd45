# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for CSS class-name parsing and validation."""

import pytest

from genro_tags.css import is_json_class_name, is_valid_class_name, parse_class_names


class TestValidClassNames:
    """Test the class-name syntax."""

    @pytest.mark.parametrize(
        "name",
        ["a", "btn", "btn-primary", "_private", "-webkit-thing", "col_12", "x1", r"sm\:hidden"],
    )
    def test_valid(self, name):
        assert is_valid_class_name(name)

    @pytest.mark.parametrize("name", ["1col", "not!", "a.b", "--x", "", "-1"])
    def test_invalid(self, name):
        assert not is_valid_class_name(name)

    def test_allow_invalid_bypasses_check(self):
        assert is_valid_class_name("not!", allow_invalid=True)


class TestJsonClassNames:
    """Test JSON literal detection."""

    def test_object_and_array(self):
        assert is_json_class_name('{"a": 1}')
        assert is_json_class_name("[1, 2]")

    def test_plain_name(self):
        assert not is_json_class_name("btn")
        assert not is_json_class_name("{unclosed")

    def test_json_is_always_valid(self):
        assert is_valid_class_name("{validate: {required: true}}")


class TestParseClassNames:
    """Test splitting of class strings."""

    def test_split_on_whitespace_runs(self):
        assert parse_class_names("a  b\tc ") == ["a", "b", "c"]

    def test_json_kept_whole(self):
        assert parse_class_names("{a: 1, b: 2}") == ["{a: 1, b: 2}"]

    def test_blank(self):
        assert parse_class_names("   ") == []
