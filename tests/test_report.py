"""Unit tests for the storage report."""

import csv

import pytest

from pycivic.exceptions import CivicReportError
from pycivic.report import FolderSize, FolderSizes, ReportItem, ReportItems


class TestFolderSizes:
    """Tests for FolderSizes."""

    def test_size_sums_records(self):
        """Test the total of all samples."""
        sizes = FolderSizes([FolderSize("A", 1.5), FolderSize("B", 2.5)])
        assert sizes.size() == 4.0

    def test_add(self):
        """Test appending samples."""
        sizes = FolderSizes()
        sizes.add("A", 3.0)
        assert sizes.records == [FolderSize("A", 3.0)]
        assert FolderSizes().size() == 0.0


class TestReportItems:
    """Tests for building report rows."""

    def test_percent_of_max(self):
        """Test that percentages are relative to the largest sample."""
        report = ReportItems.from_folder_sizes(
            FolderSizes([FolderSize("X", 50), FolderSize("Y", 100)])
        )

        by_name = {item.folder: item for item in report.records}
        assert by_name["X"].percent == 0.5
        assert by_name["Y"].percent == 1.0

    def test_keeps_sample_order(self):
        """Test that rows follow the sample order."""
        report = ReportItems.from_folder_sizes(
            FolderSizes([FolderSize("B", 1), FolderSize("A", 2)])
        )
        assert [item.folder for item in report.records] == ["B", "A"]

    def test_readable_size_from_kilobytes(self):
        """Test that sizes are shown in the largest convenient unit."""
        report = ReportItems.from_folder_sizes(
            FolderSizes([FolderSize("A", 2048), FolderSize("B", 0.5)])
        )
        assert report.records[0].size == "2.0 MB"
        assert report.records[1].size == "512 B"

    def test_empty_samples(self):
        """Test that an empty sample set cannot be reported."""
        with pytest.raises(CivicReportError):
            ReportItems.from_folder_sizes(FolderSizes())

    def test_negative_size_aborts_report(self):
        """Test that an invalid row fails the whole report."""
        with pytest.raises(CivicReportError, match="B"):
            ReportItems.from_folder_sizes(
                FolderSizes([FolderSize("A", 10), FolderSize("B", -1)])
            )

    def test_all_zero_sizes(self):
        """Test that a zero maximum gives zero percentages."""
        report = ReportItems.from_folder_sizes(FolderSizes([FolderSize("A", 0)]))
        assert report.records[0].percent == 0.0
        assert report.records[0].size == "0 B"

    def test_item_new(self):
        """Test a single row."""
        item = ReportItem.new("A", 1, 4)
        assert item == ReportItem(folder="A", size="1.0 KB", percent=0.25)

    def test_to_csv(self, tmp_path):
        """Test the CSV columns and values."""
        report = ReportItems.from_folder_sizes(
            FolderSizes([FolderSize("X", 50), FolderSize("Y", 100)])
        )
        path = report.to_csv(tmp_path / "report.csv")

        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))

        assert [row["folder"] for row in rows] == ["X", "Y"]
        assert rows[0]["percent"] == "0.5"
        assert set(rows[0]) == {"folder", "size", "percent"}
