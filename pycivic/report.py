"""Storage report for Document Center folders."""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Union

from .exceptions import CivicReportError
from .utils import format_kb, write_csv

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ("folder", "size", "percent")


@dataclass
class FolderSize:
    """Total size of one folder, in kilobytes."""

    folder: str
    size: float


@dataclass
class FolderSizes:
    records: list[FolderSize] = field(default_factory=list)

    def add(self, folder: str, size: float) -> None:
        self.records.append(FolderSize(folder, size))

    def size(self) -> float:
        """Sum of all sizes, in kilobytes."""
        return sum((record.size for record in self.records), 0.0)


@dataclass
class ReportItem:
    """One report row: folder name, readable size and share of the largest."""

    folder: str
    size: str
    percent: float

    @classmethod
    def new(cls, folder: str, size: float, max_size: float) -> "ReportItem":
        """Create a report row.

        Args:
            folder: Folder name
            size: Folder size in kilobytes
            max_size: Largest size in the report, in kilobytes

        Raises:
            CivicReportError: If the size cannot be converted
        """
        try:
            readable = format_kb(size)
        except ValueError as e:
            raise CivicReportError(f"Cannot convert size of {folder}: {e}") from e
        percent = size / max_size if max_size else 0.0
        return cls(folder=folder, size=readable, percent=percent)


@dataclass
class ReportItems:
    records: list[ReportItem] = field(default_factory=list)

    @classmethod
    def from_folder_sizes(cls, folder_sizes: FolderSizes) -> "ReportItems":
        """Build report rows relative to the largest sample.

        Either every row converts or no report is produced.

        Raises:
            CivicReportError: If there are no samples or a size is invalid
        """
        if not folder_sizes.records:
            raise CivicReportError("Cannot build a report without folder sizes")
        max_size = max(record.size for record in folder_sizes.records)
        records = [
            ReportItem.new(record.folder, record.size, max_size)
            for record in folder_sizes.records
        ]
        return cls(records)

    def to_csv(self, path: Union[str, Path]) -> Path:
        written = write_csv((asdict(item) for item in self.records), path, REPORT_COLUMNS)
        logger.info(f"Report output to path: {written}")
        return written
