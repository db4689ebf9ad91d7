"""Utility functions and constants for pycivic."""

import csv
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Union

from .exceptions import CivicFileError

# =============================================================================
# Vendor constants
# =============================================================================

# Numeric document status codes used by the Document Center
STATUS_DRAFT: int = 10
STATUS_PUBLISHED: int = 30

# The "Fee in Lieu" folder is listed under a stale id by the vendor, so its
# lookup is pinned to the id that actually holds the documents.
FEE_IN_LIEU_FOLDER: str = "Fee in Lieu"
FEE_IN_LIEU_FOLDER_ID: int = 1884

# Folders exported by the get-links command, with their CSV file stems
LINK_FOLDERS: tuple[tuple[str, str], ...] = (
    ("Fee in Lieu", "fila_links"),
    ("Unrecorded Parcels", "unrecorded_parcels_links"),
    ("Service and Annexation", "service_annexation_links"),
    ("Deferred Development Agreements", "deferred_development_links"),
    ("Advance Finance Districts", "advance_finance_links"),
)

# Folders sized by the report command
REPORT_FOLDERS: tuple[str, ...] = (
    "GIS",
    "Address Notifications",
    "Images",
    "Advance Finance Districts",
    "Deferred Development Agreements",
    "Fee in Lieu",
    "Service and Annexation",
    "Unrecorded Parcels",
)

# Vendor file sizes are reported in kilobytes of 1024 bytes
BYTES_PER_KB: int = 1024


# =============================================================================
# Size formatting utilities
# =============================================================================

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_size(size_bytes: Union[int, float]) -> str:
    """Format a byte count using the largest convenient unit.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")

    Raises:
        ValueError: If the size is negative or not a finite number

    Examples:
        >>> format_size(256)
        '256 B'
        >>> format_size(1536)
        '1.5 KB'
    """
    if size_bytes != size_bytes or size_bytes in (float("inf"), float("-inf")):
        raise ValueError(f"Invalid size: {size_bytes}")
    if size_bytes < 0:
        raise ValueError(f"Size cannot be negative: {size_bytes}")

    if size_bytes < 1024:
        return f"{size_bytes:g} B"

    value = float(size_bytes)
    unit = _SIZE_UNITS[0]
    for unit in _SIZE_UNITS[1:]:
        value /= 1024
        if value < 1024:
            break
    return f"{value:.1f} {unit}"


def format_kb(size_kb: Union[int, float]) -> str:
    """Format a vendor size given in kilobytes.

    Args:
        size_kb: Size in kilobytes as reported by the Document Center

    Returns:
        Formatted size string
    """
    return format_size(size_kb * BYTES_PER_KB)


# =============================================================================
# CSV output
# =============================================================================


def write_csv(
    rows: Iterable[dict[str, Any]],
    path: Union[str, Path],
    fieldnames: Sequence[str],
) -> Path:
    """Write dictionaries to a CSV file with a header row.

    Args:
        rows: Row dictionaries keyed by column name
        path: Destination file
        fieldnames: Column order

    Returns:
        Path of the written file

    Raises:
        CivicFileError: If the file cannot be written
    """
    path = Path(path)
    try:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(
                f, fieldnames=list(fieldnames), extrasaction="ignore"
            )
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
    except OSError as e:
        raise CivicFileError(f"Cannot write {path}: {e}") from e
    return path
