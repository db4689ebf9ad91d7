"""Export of document links to CSV files."""

import csv
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional, Union

from .api import DocumentCenterClient
from .auth import AuthorizedSession
from .exceptions import CivicConfigError, CivicFileError, CivicMissingLinkError
from .models import DocumentLinks, Folders
from .query import DocInfo, DocQuery, DocumentHeaders
from .utils import write_csv

logger = logging.getLogger(__name__)

WEB_LINK_COLUMNS = ("field", "web_link")
INSTRUMENT_LINK_COLUMNS = ("object_id", "instrument", "global_id", "web_link")


@dataclass
class WebLink:
    """Document name and its URL."""

    field: str
    web_link: str


@dataclass
class WebLinks:
    records: list[WebLink] = field(default_factory=list)

    @classmethod
    def from_links(cls, links: DocumentLinks) -> "WebLinks":
        return cls([WebLink(name, links.links[name]) for name in sorted(links.links)])

    def to_csv(self, path: Union[str, Path]) -> Path:
        return write_csv((asdict(r) for r in self.records), path, WEB_LINK_COLUMNS)


@dataclass
class InstrumentRecord:
    """A row of an instrument table exported from the GIS layer."""

    object_id: int
    instrument: str
    global_id: str


@dataclass
class InstrumentRecords:
    records: list[InstrumentRecord] = field(default_factory=list)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "InstrumentRecords":
        """Read instrument rows from a CSV file.

        The file needs the columns ``OID_``, ``INSTRUMENT`` and ``GlobalID``.

        Raises:
            CivicFileError: If the file cannot be read or a column is missing
        """
        records = []
        try:
            with open(path, newline="", encoding="utf-8-sig") as f:
                for line, row in enumerate(csv.DictReader(f), start=2):
                    try:
                        records.append(
                            InstrumentRecord(
                                object_id=int(row["OID_"]),
                                instrument=row["INSTRUMENT"],
                                global_id=row["GlobalID"],
                            )
                        )
                    except (KeyError, TypeError, ValueError) as e:
                        raise CivicFileError(
                            f"Invalid instrument row at {path}:{line}: {e}"
                        ) from e
        except OSError as e:
            raise CivicFileError(f"Cannot read {path}: {e}") from e
        return cls(records)

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class InstrumentLink:
    object_id: int
    instrument: str
    global_id: str
    web_link: str

    @classmethod
    def from_links(
        cls, record: InstrumentRecord, links: DocumentLinks
    ) -> "InstrumentLink":
        """Find the document URL for an instrument.

        Raises:
            CivicMissingLinkError: If no document is named after the instrument
        """
        url = links.get(record.instrument)
        if url is None:
            raise CivicMissingLinkError(record.instrument)
        return cls(record.object_id, record.instrument, record.global_id, url)


@dataclass
class InstrumentLinks:
    records: list[InstrumentLink] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @classmethod
    def from_links(
        cls, instruments: InstrumentRecords, links: DocumentLinks
    ) -> "InstrumentLinks":
        """Match every instrument to its document URL.

        Instruments without a document are skipped and listed in ``missing``.
        """
        result = cls()
        for record in instruments.records:
            try:
                result.records.append(InstrumentLink.from_links(record, links))
            except CivicMissingLinkError as e:
                logger.warning(str(e))
                result.missing.append(record.instrument)
        return result

    def to_csv(self, path: Union[str, Path]) -> Path:
        return write_csv(
            (asdict(r) for r in self.records), path, INSTRUMENT_LINK_COLUMNS
        )


class LinkExporter:
    """Writes the document links of named folders to CSV files."""

    def __init__(
        self,
        client: DocumentCenterClient,
        folders: Folders,
        headers: DocumentHeaders,
        args: DocQuery,
        url: str,
        session: AuthorizedSession,
        output: Optional[Union[str, Path]],
    ):
        """Initialize the exporter.

        Args:
            client: Document Center client
            folders: Folder listing used to resolve names
            headers: Header names for document calls
            args: Base query; the folder filter is added per folder
            url: Document endpoint
            session: Authorized session
            output: Directory receiving the CSV files

        Raises:
            CivicConfigError: If no output directory is given
        """
        if output is None:
            logger.warning("Missing output parameter.")
            raise CivicConfigError("An output directory is required to export links")
        self.client = client
        self.folders = folders
        self.headers = headers
        self.args = args.copy()
        self.url = url
        self.session = session
        self.output = Path(output)

    def links_for(self, folder: str) -> Optional[DocumentLinks]:
        """Query the document links of a folder, or None if it is not found."""
        folder_id = self.folders.get_id(folder)
        if folder_id is None:
            logger.warning(f"Folder name {folder} not found.")
            return None
        logger.debug(f"Folder id: {folder_id}")
        info = DocInfo(self.headers, self.args, self.url).with_filter(
            f"FolderId eq {folder_id}"
        )
        return self.client.query_documents(info, self.session).links()

    def get_links(self, folder: str, file: str) -> Optional[Path]:
        """Write the links of ``folder`` to ``<output>/<file>.csv``.

        Returns:
            Path of the written file, or None if the folder was not found
        """
        links = self.links_for(folder)
        if links is None:
            return None
        path = WebLinks.from_links(links).to_csv(self.output / f"{file}.csv")
        logger.info(f"Links printed to {path}")
        return path
