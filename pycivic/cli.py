"""CLI interface for the CivicEngage Document Center."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from .api import DocumentCenterClient, load_session
from .auth import AuthorizedSession
from .batch import DocumentBatch
from .config import Config
from .exceptions import CivicAPIError, CivicAuthenticationError
from .export import InstrumentLinks, InstrumentRecords, LinkExporter, WebLinks
from .files import LocalFileIndex
from .models import Documents, Folders, UpdateCommand
from .output import OutputFormatter
from .progress import BatchProgressDisplay
from .query import DocInfo, DocQuery, DocumentHeaders
from .report import FolderSizes, ReportItems
from .utils import LINK_FOLDERS, REPORT_FOLDERS

logger = logging.getLogger(__name__)


class _Connection:
    """Authenticated client plus the settings every command needs."""

    def __init__(self, ctx: Any):
        self.out: OutputFormatter = ctx.obj["out"]
        self.args: DocQuery = ctx.obj["query"]
        self.headers = DocumentHeaders()
        self.config = Config.from_env(ctx.obj.get("env_file"))
        self.client = DocumentCenterClient()
        self._session: Optional[AuthorizedSession] = None

    def __enter__(self) -> "_Connection":
        self.out.info("Authorizing user...")
        try:
            self._session = load_session(self.client, self.config)
        except CivicAPIError:
            self.client.close()
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.client.close()

    @property
    def session(self) -> AuthorizedSession:
        """Session obtained on entering the connection."""
        if self._session is None:
            raise CivicAuthenticationError("Not authorized: connection not opened")
        return self._session

    def folder_info(self) -> DocInfo:
        return DocInfo(self.headers, self.args, self.config.require("folder_url"))

    def document_info(self, folder_id: Optional[int] = None) -> DocInfo:
        info = DocInfo(self.headers, self.args, self.config.require("document_url"))
        if folder_id is not None:
            return info.with_filter(f"FolderId eq {folder_id}")
        return info

    def folders(self) -> Folders:
        return self.client.query_folders(self.folder_info(), self.session)

    def documents(self, folder_id: Optional[int] = None) -> Documents:
        return self.client.query_documents(self.document_info(folder_id), self.session)

    def resolve(self, folders: Folders, name: str) -> Optional[int]:
        folder_id = folders.get_id(name)
        if folder_id is None:
            self.out.warning(f"Folder not present: {name}")
        else:
            logger.debug(f"Folder '{name}' resolved to id {folder_id}")
        return folder_id

    def exporter(self, folders: Folders, output: Optional[Path]) -> LinkExporter:
        return LinkExporter(
            client=self.client,
            folders=folders,
            headers=self.headers,
            args=self.args,
            url=self.config.require("document_url"),
            session=self.session,
            output=output,
        )


def _fail(ctx: Any, error: Exception) -> None:
    out: OutputFormatter = ctx.obj["out"]
    out.error(str(error))
    ctx.exit(1)


@click.group()
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a .env file (default: search from the current directory)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.option("--top", type=int, default=None, help="Maximum number of records")
@click.option("--skip", type=int, default=None, help="Number of records to skip")
@click.option("--orderby", default=None, help="OData sort expression")
@click.version_option(package_name="pycivic")
@click.pass_context
def main(
    ctx: Any,
    env_file: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
    top: Optional[int],
    skip: Optional[int],
    orderby: Optional[str],
) -> None:
    """PyCivic - Manage documents in a CivicEngage Document Center."""
    ctx.ensure_object(dict)
    ctx.obj["env_file"] = env_file
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)

    # Return all matches on the server
    query = DocQuery().inlinecount("allpages")
    if top is not None:
        query.top(top)
    if skip is not None:
        query.skip(skip)
    if orderby is not None:
        query.orderby(orderby)
    ctx.obj["query"] = query

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pycivic").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.pass_context
def status(ctx: Any) -> None:
    """Check the credential and show the logged-in user."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        config = Config.from_env(ctx.obj.get("env_file"))
        credential = config.credential()
        client = DocumentCenterClient()
        try:
            token = client.authenticate(config.require("authenticate_url"), credential)
        finally:
            client.close()

        if out.json_output:
            out.output_json(
                {
                    "success": token.success,
                    "user_id": token.user_id,
                    "message": token.message,
                    "additional_info": token.additional_info,
                }
            )
            return

        out.print_summary(
            "Authorization successful",
            [
                ("User", credential.username),
                ("User ID", token.user_id),
                ("Message", token.message or ""),
            ],
        )
    except CivicAPIError as e:
        _fail(ctx, e)


@main.command()
@click.option("--all", "show_all", is_flag=True, help="Include archived folders")
@click.pass_context
def folders(ctx: Any, show_all: bool) -> None:
    """List folders."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        with _Connection(ctx) as conn:
            listing = conn.folders()

        items = list(listing) if show_all else listing.active()
        rows = [
            {"name": f.name, "id": f.id, "parent_id": f.parent_id, "archived": f.is_archived}
            for f in items
        ]
        if out.json_output:
            out.output_json(rows)
            return
        if not rows:
            out.warning("No folders found")
            return
        out.output_table(
            rows,
            ["name", "id", "parent_id", "archived"],
            ["Name", "ID", "Parent ID", "Archived"],
        )
    except CivicAPIError as e:
        _fail(ctx, e)


@main.command("inspect-folder")
@click.argument("name")
@click.pass_context
def inspect_folder(ctx: Any, name: str) -> None:
    """Show the full record of a folder.

    NAME: Exact folder name
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        with _Connection(ctx) as conn:
            listing = conn.folders()
            folder_id = conn.resolve(listing, name)

        folder = listing.find(folder_id) if folder_id is not None else None
        if folder is None:
            out.error(f"Folder not present: {name}")
            ctx.exit(1)
        out.output_json(folder.to_api_dict())
    except CivicAPIError as e:
        _fail(ctx, e)


@main.command("folder-count")
@click.argument("name")
@click.pass_context
def folder_count(ctx: Any, name: str) -> None:
    """Count the documents in a folder and show their size.

    NAME: Exact folder name
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        with _Connection(ctx) as conn:
            folder_id = conn.resolve(conn.folders(), name)
            if folder_id is None:
                ctx.exit(1)
            docs = conn.documents(folder_id)

        rows = [
            {
                "name": doc.name,
                "size": out.format_size(doc.file_size) if doc.file_size is not None else "",
                "url": doc.url or "",
                "published": doc.is_published,
            }
            for doc in docs
        ]
        if out.json_output:
            out.output_json(
                {
                    "folder_id": folder_id,
                    "total_count": docs.total_count,
                    "total_size_kb": docs.total_size(),
                    "documents": rows,
                }
            )
            return

        out.print_summary(
            f"Folder: {name} (ID: {folder_id})",
            [
                ("Total count", docs.total_count if docs.total_count is not None else len(docs)),
                ("Total size", out.format_size(docs.total_size())),
            ],
        )
        if rows:
            out.output_table(
                rows,
                ["name", "size", "url", "published"],
                ["Name", "Size", "URL", "Published"],
            )
    except CivicAPIError as e:
        _fail(ctx, e)


@main.command()
@click.argument("name")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="CSV file to write",
)
@click.pass_context
def links(ctx: Any, name: str, output: Path) -> None:
    """Write the document links of a folder to a CSV file.

    NAME: Exact folder name
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        with _Connection(ctx) as conn:
            exporter = conn.exporter(conn.folders(), output.parent)
            found = exporter.links_for(name)
        if found is None:
            out.error(f"Folder not present: {name}")
            ctx.exit(1)
        WebLinks.from_links(found).to_csv(output)
        out.success(f"{len(found)} links written to {output}")
    except CivicAPIError as e:
        _fail(ctx, e)


@main.command("get-links")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    required=True,
    help="Directory receiving one CSV file per folder",
)
@click.pass_context
def get_links(ctx: Any, output: Path) -> None:
    """Write link CSV files for the standard link folders."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        written = []
        with _Connection(ctx) as conn:
            exporter = conn.exporter(conn.folders(), output)
            for folder, file in LINK_FOLDERS:
                path = exporter.get_links(folder, file)
                if path is None:
                    out.warning(f"{folder} folder not found.")
                else:
                    out.info(f"Links printed to {path}")
                    written.append((folder, str(path)))
        out.print_summary("Link export complete", written)
    except CivicAPIError as e:
        _fail(ctx, e)


@main.command("match-links")
@click.argument("name")
@click.option(
    "--source",
    "-s",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="CSV file with OID_, INSTRUMENT and GlobalID columns",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="CSV file to write",
)
@click.pass_context
def match_links(ctx: Any, name: str, source: Path, output: Path) -> None:
    """Match instruments from a CSV file to document links in a folder.

    NAME: Exact folder name
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        instruments = InstrumentRecords.from_path(source)
        with _Connection(ctx) as conn:
            found = conn.exporter(conn.folders(), output.parent).links_for(name)
        if found is None:
            out.error(f"Folder not present: {name}")
            ctx.exit(1)
        matched = InstrumentLinks.from_links(instruments, found)
        matched.to_csv(output)
        out.print_summary(
            "Instrument links",
            [
                ("Matched", len(matched.records)),
                ("Missing", len(matched.missing)),
                ("Output", str(output)),
            ],
        )
    except CivicAPIError as e:
        _fail(ctx, e)


@main.command("sync-folder")
@click.argument("name")
@click.option(
    "--source",
    "-s",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    required=True,
    help="Local directory with the files to upload",
)
@click.option("--draft", is_flag=True, help="Upload as Draft instead of Published")
@click.option("--no-progress", is_flag=True, help="Disable progress bars")
@click.pass_context
def sync_folder(
    ctx: Any, name: str, source: Path, draft: bool, no_progress: bool
) -> None:
    """Upload local files that are missing from a folder.

    NAME: Exact folder name
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        local = LocalFileIndex.from_path(source)
        logger.debug(f"Names read: {len(local)}")
        with _Connection(ctx) as conn:
            folder_id = conn.resolve(conn.folders(), name)
            if folder_id is None:
                ctx.exit(1)
            info = conn.document_info(folder_id)
            docs = conn.client.query_documents(info, conn.session)
            remote = docs.links()
            pending = local.not_in(remote)
            out.info(
                f"{len(remote)} documents in folder, "
                f"{len(pending)} local files to upload"
            )

            show_progress = not (no_progress or out.quiet or out.json_output)
            with BatchProgressDisplay(enabled=show_progress) as display:
                result = DocumentBatch(conn.client).upload(
                    pending,
                    info,
                    conn.session,
                    folder_id,
                    publish=not draft,
                    progress_callback=display.callback("Uploading files"),
                )

        out.print_summary(
            "Upload complete",
            [
                ("Uploaded", len(result.succeeded)),
                ("Failed", len(result.failed)),
            ],
        )
    except CivicAPIError as e:
        _fail(ctx, e)


@main.command("update-folder-content")
@click.argument("name")
@click.option(
    "--action",
    "-a",
    type=click.Choice([UpdateCommand.ARCHIVE, UpdateCommand.DRAFT]),
    required=True,
    help="Archive the documents or move them to Draft",
)
@click.option("--no-progress", is_flag=True, help="Disable progress bars")
@click.pass_context
def update_folder_content(
    ctx: Any, name: str, action: str, no_progress: bool
) -> None:
    """Archive every document of a folder or move it to Draft.

    NAME: Exact folder name
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        with _Connection(ctx) as conn:
            folder_id = conn.resolve(conn.folders(), name)
            if folder_id is None:
                ctx.exit(1)
            info = conn.document_info(folder_id)
            docs = conn.client.query_documents(info, conn.session)

            show_progress = not (no_progress or out.quiet or out.json_output)
            with BatchProgressDisplay(enabled=show_progress) as display:
                result = DocumentBatch(conn.client).update(
                    docs,
                    info,
                    conn.session,
                    action,
                    progress_callback=display.callback("Updating files"),
                )

        out.print_summary(
            "Update complete",
            [("Updated", len(result.succeeded)), ("Failed", len(result.failed))],
        )
    except CivicAPIError as e:
        _fail(ctx, e)


@main.command("delete-folder-content")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.option("--no-progress", is_flag=True, help="Disable progress bars")
@click.pass_context
def delete_folder_content(ctx: Any, name: str, yes: bool, no_progress: bool) -> None:
    """Delete every document of a folder.

    Documents are moved to Draft first, since published documents cannot
    be deleted.

    NAME: Exact folder name
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        with _Connection(ctx) as conn:
            folder_id = conn.resolve(conn.folders(), name)
            if folder_id is None:
                ctx.exit(1)
            info = conn.document_info(folder_id)
            docs = conn.client.query_documents(info, conn.session)
            if len(docs) == 0:
                out.warning(f"No documents in {name}")
                return

            if not yes and not click.confirm(
                f"Delete {len(docs)} documents from '{name}'?", default=False
            ):
                out.warning("Deletion cancelled.")
                return

            show_progress = not (no_progress or out.quiet or out.json_output)
            with BatchProgressDisplay(enabled=show_progress) as display:
                updated, deleted = DocumentBatch(conn.client).draft_and_delete(
                    docs,
                    info,
                    conn.session,
                    update_callback=display.callback("Updating files"),
                    delete_callback=display.callback("Deleting files"),
                )

        out.print_summary(
            "Deletion complete",
            [
                ("Moved to Draft", len(updated.succeeded)),
                ("Deleted", len(deleted.succeeded)),
                ("Failed", len(deleted.failed)),
            ],
        )
    except CivicAPIError as e:
        _fail(ctx, e)


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="CSV file to write",
)
@click.pass_context
def report(ctx: Any, output: Path) -> None:
    """Report the storage used by the standard folders."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        sizes = FolderSizes()
        with _Connection(ctx) as conn:
            out.info("Preparing report.")
            total = conn.documents()
            listing = conn.folders()
            for folder in REPORT_FOLDERS:
                folder_id = listing.get_id(folder)
                if folder_id is None:
                    out.info(f"Could not find folder: {folder}.")
                    continue
                sizes.add(folder, conn.documents(folder_id).total_size())

        sizes.add("Subtotal", sizes.size())
        sizes.add("Total", total.total_size())
        items = ReportItems.from_folder_sizes(sizes)
        items.to_csv(output)

        rows = [
            {"folder": i.folder, "size": i.size, "percent": f"{i.percent:.1%}"}
            for i in items.records
        ]
        if out.json_output:
            out.output_json(rows)
            return
        if not out.quiet:
            out.output_table(rows, ["folder", "size", "percent"], ["Folder", "Size", "Percent"])
        out.success(f"Report output to path: {output}")
    except CivicAPIError as e:
        _fail(ctx, e)


if __name__ == "__main__":
    main()
