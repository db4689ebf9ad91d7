"""Index of local files available for upload."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from .exceptions import CivicFileError
from .models import DocumentLinks

logger = logging.getLogger(__name__)


@dataclass
class LocalFileIndex:
    """Local files keyed by name without extension."""

    files: dict[str, Path] = field(default_factory=dict)

    @classmethod
    def from_path(cls, directory: Union[str, Path]) -> "LocalFileIndex":
        """Index the files directly inside ``directory``.

        Subdirectories are not scanned. If two files share a stem, the one
        that sorts last wins.

        Args:
            directory: Directory to scan

        Returns:
            LocalFileIndex instance

        Raises:
            CivicFileError: If the directory cannot be read
        """
        directory = Path(directory)
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise CivicFileError(f"Cannot read directory {directory}: {e}") from e

        files = {}
        for item in entries:
            if item.is_file():
                files[item.stem] = item
        logger.debug(f"Indexed {len(files)} files in {directory}")
        return cls(files)

    def names(self) -> set[str]:
        return set(self.files)

    def not_in(self, links: DocumentLinks) -> "LocalFileIndex":
        """Files whose name has no document in ``links``."""
        remote = links.names()
        return LocalFileIndex(
            {name: path for name, path in self.files.items() if name not in remote}
        )

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self):
        return iter(self.files.items())
