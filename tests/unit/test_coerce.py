"""Tests for lenient value coercion."""

import pytest

from trackside.models.coerce import as_bool, as_float, as_int, as_str_list, first_of


class TestFirstOf:
    def test_camel_case_first(self):
        assert first_of({"isScratched": True, "is_scratched": False}, "isScratched", "is_scratched") is True

    def test_none_skipped(self):
        assert first_of({"a": None, "b": 2}, "a", "b") == 2

    def test_default(self):
        assert first_of({}, "a", default=7) == 7


class TestAsBool:
    @pytest.mark.parametrize("value,expected", [
        ("false", False),
        (" FALSE ", False),
        ("no", False),
        ("true", True),
        ("Yes", True),
        ("1", True),
        (1, True),
        (None, False),
    ])
    def test_values(self, value, expected):
        assert as_bool(value) is expected


class TestNumbers:
    def test_int_clamped(self):
        assert as_int(-3) == 0
        assert as_int(-3, minimum=None) == -3

    def test_int_fallback(self):
        assert as_int("x", default=5) == 5

    def test_float_fallback(self):
        assert as_float("1.5") == 1.5
        assert as_float(None, default=2.0) == 2.0


class TestStrList:
    def test_bare_string(self):
        assert as_str_list(" Class rise ") == ["Class rise"]

    def test_blanks_dropped(self):
        assert as_str_list(["a", " ", None, 3]) == ["a", "3"]

    def test_not_a_list(self):
        assert as_str_list({"a": 1}) == []
