"""
Tests for size and duration formatting used in the run summary.
"""
import pytest
from crossdedup.utils.convert_utils import ConvertUtils


class TestBytesToHuman:
    @pytest.mark.parametrize("size, expected", [
        (0, "0.00B"),
        (1023, "1023.00B"),
        (1024, "1.00KB"),
        (1500, "1.46KB"),
        (int(1.5 * 1024 * 1024), "1.50MB"),
        (500 * 1024 ** 3, "500.00GB"),
        (2 * 1024 ** 4, "2.00TB"),
        (3 * 1024 ** 6, "3.00EB"),
    ])
    def test_formats_with_binary_units(self, size, expected):
        assert ConvertUtils.bytes_to_human(size) == expected

    def test_negative_size_is_zero(self):
        assert ConvertUtils.bytes_to_human(-5) == "0.00B"


class TestSecondsToHuman:
    @pytest.mark.parametrize("seconds, expected", [
        (0, "0.00s"),
        (2.5, "2.50s"),
        (60, "1m 00s"),
        (125.9, "2m 05s"),
        (3725, "1h 02m 05s"),
    ])
    def test_formats(self, seconds, expected):
        assert ConvertUtils.seconds_to_human(seconds) == expected
