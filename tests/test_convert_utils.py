"""
Tests for byte-unit conversions used by the CLI and GUI.
"""
import pytest
from treesize.utils.convert_utils import ConvertUtils


class TestBytesToHuman:
    @pytest.mark.parametrize("size, expected", [
        (0, "0B"),
        (1, "1B"),
        (1023, "1023B"),
        (1024, "1.00KB"),
        (1536, "1.50KB"),
        (1024 ** 2, "1.00MB"),
        (5 * 1024 ** 3, "5.00GB"),
        (1024 ** 4, "1.00TB"),
    ])
    def test_formats(self, size, expected):
        assert ConvertUtils.bytes_to_human(size) == expected

    def test_negative_is_zero(self):
        assert ConvertUtils.bytes_to_human(-5) == "0B"


class TestHumanToBytes:
    @pytest.mark.parametrize("text, expected", [
        ("0", 0),
        ("1000", 1000),
        ("1K", 1024),
        ("1kb", 1024),
        ("1.5MB", int(1.5 * 1024 ** 2)),
        (" 2G ", 2 * 1024 ** 3),
        ("10B", 10),
    ])
    def test_parses(self, text, expected):
        assert ConvertUtils.human_to_bytes(text) == expected

    @pytest.mark.parametrize("text", ["abc", "1.2.3MB", "-5", "-1KB", ""])
    def test_rejects_invalid(self, text):
        with pytest.raises(ValueError):
            ConvertUtils.human_to_bytes(text)
