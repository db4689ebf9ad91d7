"""Data models for Document Center API responses."""

import dataclasses
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional, TypeVar

from .exceptions import CivicInvalidResponseError
from .utils import (
    FEE_IN_LIEU_FOLDER,
    FEE_IN_LIEU_FOLDER_ID,
    STATUS_DRAFT,
    STATUS_PUBLISHED,
)

logger = logging.getLogger(__name__)

# Fields whose wire name is not the plain PascalCase form of the attribute
_WIRE_NAMES = {
    "url": "URL",
    "parent_id": "ParentID",
    "archived_folder_id": "ArchivedFolderID",
}


def _wire_name(attr: str) -> str:
    """Map a snake_case attribute name to the vendor's PascalCase key."""
    if attr in _WIRE_NAMES:
        return _WIRE_NAMES[attr]
    return "".join(part.capitalize() for part in attr.split("_"))


_R = TypeVar("_R", bound="_Record")


@dataclass
class _Record:
    """Base for vendor records serialized with PascalCase keys."""

    @classmethod
    def from_api_response(cls: type[_R], data: Any) -> _R:
        if not isinstance(data, dict):
            raise CivicInvalidResponseError(
                f"Expected an object for {cls.__name__}, got {type(data).__name__}"
            )
        values = {}
        for f in dataclasses.fields(cls):
            key = _wire_name(f.name)
            if key in data:
                values[f.name] = data[key]
        try:
            return cls(**values)
        except TypeError as e:
            raise CivicInvalidResponseError(
                f"Incomplete {cls.__name__} record: {e}"
            ) from e

    def to_api_dict(self) -> dict[str, Any]:
        """Serialize the record with the vendor's field names."""
        return {
            _wire_name(f.name): getattr(self, f.name) for f in dataclasses.fields(self)
        }


class DocumentStatus(IntEnum):
    """Publication status codes of a document."""

    DRAFT = STATUS_DRAFT
    PUBLISHED = STATUS_PUBLISHED


class UpdateCommand:
    """Commands understood by :meth:`Document.with_command`."""

    ARCHIVE = "archive"
    DRAFT = "draft"


@dataclass
class Folder(_Record):
    """A folder in the Document Center."""

    name: str
    id: Optional[int] = None
    description: Optional[str] = None
    status: Optional[int] = None
    path: Optional[str] = None
    parent_id: Optional[int] = None
    created_date: Optional[str] = None
    created_by: Optional[int] = None
    last_modified_date: Optional[str] = None
    modified_by: Optional[int] = None
    is_archived: Optional[bool] = None
    show_archive: Optional[bool] = None
    last_archived_date: Optional[str] = None
    update_integration_hub: Optional[bool] = None
    archived_by: Optional[int] = None
    archived_reason: Optional[int] = None
    archived_folder_id: Optional[int] = None
    total_folder_size: Optional[int] = None
    children_exist: Optional[bool] = None
    url: Optional[str] = None
    folder_root: Optional[int] = None
    department_header_id: Optional[int] = None
    show_archives: Optional[bool] = None
    permissions: Optional[list[str]] = None
    item_count: Optional[int] = None

    @property
    def is_active(self) -> bool:
        """True only when the vendor explicitly reports the folder as not archived."""
        return self.is_archived is False


@dataclass
class Document(_Record):
    """A document in the Document Center. ``file_size`` is in kilobytes."""

    id: int
    name: str
    description: Optional[str] = None
    status: Optional[int] = None
    file_size: Optional[float] = None
    created_date: Optional[str] = None
    created_by: Optional[int] = None
    file_uploaded_date: Optional[str] = None
    file_uploaded_by: Optional[int] = None
    is_visible: Optional[bool] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    file_type: Optional[str] = None
    url: Optional[str] = None
    alt_text: Optional[str] = None
    folder_id: Optional[int] = None
    convert_to_pdf: Optional[bool] = None
    file: Optional[str] = None
    file_name: Optional[str] = None
    is_archived: Optional[bool] = None
    is_chunked: Optional[bool] = None
    is_last_chunk: Optional[bool] = None
    upload_id: Optional[str] = None
    last_modified_by: Optional[int] = None
    last_modified_on: Optional[str] = None
    show_archives: Optional[bool] = None
    show_in_rss_feed: Optional[bool] = None

    def with_command(self, command: str) -> "Document":
        """Return a copy of the document changed according to ``command``.

        ``"archive"`` marks the copy archived and ``"draft"`` sets its status
        to Draft. Any other command leaves the copy unchanged.
        """
        if command == UpdateCommand.ARCHIVE:
            return dataclasses.replace(self, is_archived=True)
        if command == UpdateCommand.DRAFT:
            return dataclasses.replace(self, status=int(DocumentStatus.DRAFT))
        logger.debug(f"Ignoring unknown update command '{command}'")
        return dataclasses.replace(self)

    @property
    def is_published(self) -> bool:
        return self.status == DocumentStatus.PUBLISHED


@dataclass
class _Page:
    """Pagination envelope shared by folder and document listings."""

    current_page: Optional[int] = None
    page_size: Optional[int] = None
    total_count: Optional[int] = None
    total_pages: Optional[int] = None
    sort_by: Optional[str] = None
    filter: Optional[str] = None
    has_previous_page: Optional[bool] = None
    has_next_page: Optional[bool] = None

    @staticmethod
    def _page_values(data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise CivicInvalidResponseError(
                f"Expected a paginated object, got {type(data).__name__}"
            )
        return {
            f.name: data.get(_wire_name(f.name)) for f in dataclasses.fields(_Page)
        }

    @staticmethod
    def _source(data: dict[str, Any]) -> Optional[list[Any]]:
        source = data.get("Source")
        if source is not None and not isinstance(source, list):
            raise CivicInvalidResponseError("Source must be a list")
        return source

    @property
    def is_truncated(self) -> bool:
        """True when the server holds more records than this page carries."""
        if self.total_count is None or self.page_size is None:
            return bool(self.has_next_page)
        return self.total_count > self.page_size


@dataclass
class Folders(_Page):
    """One page of folders."""

    source: Optional[list[Folder]] = None

    @classmethod
    def from_api_response(cls, data: Any) -> "Folders":
        values = cls._page_values(data)
        source = cls._source(data)
        if source is not None:
            values["source"] = [Folder.from_api_response(item) for item in source]
        return cls(**values)

    def __iter__(self) -> Iterator[Folder]:
        return iter(self.source or [])

    def __len__(self) -> int:
        return len(self.source or [])

    def get_id(self, name: str) -> Optional[int]:
        """Resolve a folder name to its id.

        Scans the page in order and keeps the id of the last active folder
        whose name matches exactly. The Fee in Lieu folder always resolves to
        its pinned id, whatever the page contains.

        Args:
            name: Exact folder name

        Returns:
            Folder id, or None if no active folder has that name
        """
        folder_id = None
        for folder in self:
            if folder.name == name and folder.is_active:
                folder_id = folder.id
        if name == FEE_IN_LIEU_FOLDER:
            folder_id = FEE_IN_LIEU_FOLDER_ID
        return folder_id

    def find(self, folder_id: int) -> Optional[Folder]:
        """Return the first folder on the page with the given id."""
        for folder in self:
            if folder.id == folder_id:
                return folder
        return None

    def active(self) -> list[Folder]:
        """Folders that are not archived."""
        return [folder for folder in self if folder.is_active]


@dataclass
class Documents(_Page):
    """One page of documents."""

    source: Optional[list[Document]] = None

    @classmethod
    def from_api_response(cls, data: Any) -> "Documents":
        values = cls._page_values(data)
        source = cls._source(data)
        if source is not None:
            values["source"] = [Document.from_api_response(item) for item in source]
        return cls(**values)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.source or [])

    def __len__(self) -> int:
        return len(self.source or [])

    def total_size(self) -> float:
        """Sum of ``file_size`` over the documents on this page, in kilobytes.

        Documents without a size count as zero.
        """
        return sum(
            (doc.file_size for doc in self if doc.file_size is not None), 0.0
        )

    def links(self) -> "DocumentLinks":
        return DocumentLinks.from_documents(self)


@dataclass
class DocumentLinks:
    """Mapping of document name to document URL.

    Documents without a URL are left out. When two documents share a name
    the later one wins.
    """

    links: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_documents(cls, documents: Documents) -> "DocumentLinks":
        links = {}
        for doc in documents:
            if doc.url is not None:
                links[doc.name] = doc.url
        return cls(links)

    def names(self) -> set[str]:
        return set(self.links)

    def get(self, name: str) -> Optional[str]:
        return self.links.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.links

    def __len__(self) -> int:
        return len(self.links)


@dataclass
class OperationResult:
    """Outcome of a single upload, update or delete call.

    ``data`` holds the decoded JSON body of a successful call. A call the
    server refused keeps its raw response text in ``body`` instead.
    """

    name: str
    success: bool
    status_code: Optional[int] = None
    data: Any = None
    body: str = ""
    document_id: Optional[int] = None


@dataclass
class BatchResult:
    """Results of a batch operation, in the order items were processed."""

    succeeded: list[OperationResult] = field(default_factory=list)
    failed: list[OperationResult] = field(default_factory=list)

    def add(self, result: OperationResult) -> None:
        if result.success:
            self.succeeded.append(result)
        else:
            self.failed.append(result)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)
