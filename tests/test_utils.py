"""Unit tests for utility functions."""

import csv

import pytest

from pycivic.exceptions import CivicFileError
from pycivic.utils import format_kb, format_size, write_csv


class TestFormatSize:
    """Tests for format_size."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (1023, "1023 B"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (1024**2, "1.0 MB"),
            (5 * 1024**3, "5.0 GB"),
            (1024**5, "1.0 PB"),
        ],
    )
    def test_units(self, size, expected):
        """Test the largest convenient unit is used."""
        assert format_size(size) == expected

    @pytest.mark.parametrize("size", [-1, float("nan"), float("inf")])
    def test_invalid(self, size):
        """Test that negative and non-finite sizes are rejected."""
        with pytest.raises(ValueError):
            format_size(size)

    def test_format_kb(self):
        """Test that vendor kilobytes are 1024 bytes."""
        assert format_kb(1.5) == "1.5 KB"
        assert format_kb(1024) == "1.0 MB"
        assert format_kb(0.25) == "256 B"


class TestWriteCsv:
    """Tests for write_csv."""

    def test_header_and_rows(self, tmp_path):
        """Test the column order and that extra keys are ignored."""
        path = write_csv(
            [{"b": 2, "a": 1, "extra": "x"}], tmp_path / "out.csv", ["a", "b"]
        )

        with open(path, newline="") as f:
            assert list(csv.reader(f)) == [["a", "b"], ["1", "2"]]

    def test_empty_rows(self, tmp_path):
        """Test that only the header is written for no rows."""
        path = write_csv([], str(tmp_path / "out.csv"), ["a"])
        assert path.read_text().splitlines() == ["a"]

    def test_unwritable_path(self, tmp_path):
        """Test that a missing parent directory raises CivicFileError."""
        with pytest.raises(CivicFileError, match="Cannot write"):
            write_csv([{"a": 1}], tmp_path / "missing" / "out.csv", ["a"])
