"""Batch upload, update and delete of documents."""

import logging
from collections.abc import Iterable
from typing import Callable, Optional

from .api import DocumentCenterClient
from .auth import AuthorizedSession
from .exceptions import CivicAPIError
from .files import LocalFileIndex
from .models import (
    BatchResult,
    Document,
    Documents,
    OperationResult,
    UpdateCommand,
)
from .query import DocInfo

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class DocumentBatch:
    """Applies one operation to every item of a collection.

    Items are processed one at a time in collection order. A failing item is
    logged and recorded in ``BatchResult.failed``; the batch always runs to
    the end.
    """

    def __init__(self, client: DocumentCenterClient):
        """Initialize the batch operator.

        Args:
            client: Document Center client
        """
        self.client = client

    def _run(
        self,
        items: list,
        action: Callable[..., OperationResult],
        label: Callable[..., str],
        progress_callback: Optional[ProgressCallback],
    ) -> BatchResult:
        result = BatchResult()
        total = len(items)
        for done, item in enumerate(items, start=1):
            name = label(item)
            try:
                outcome = action(item)
            except CivicAPIError as e:
                logger.warning(f"{name}: {e}")
                outcome = OperationResult(name=name, success=False, body=str(e))
            else:
                if not outcome.success:
                    logger.warning(f"{name}: server answered {outcome.status_code}")
            result.add(outcome)
            if progress_callback:
                progress_callback(done, total)
        return result

    def upload(
        self,
        files: LocalFileIndex,
        info: DocInfo,
        session: AuthorizedSession,
        folder_id: int,
        publish: bool = True,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """Upload every file of the index into a folder.

        Args:
            files: Files to upload, usually ``local.not_in(remote_links)``
            info: Request context of the document endpoint
            session: Authorized session
            folder_id: Target folder id
            publish: Create the documents as Published
            progress_callback: Optional function(done, total) called after
                each file

        Returns:
            BatchResult with one entry per file
        """
        return self._run(
            list(files),
            lambda item: self.client.upload_document(
                info, session, item[0], item[1], folder_id, publish=publish
            ),
            lambda item: item[0],
            progress_callback,
        )

    def update(
        self,
        documents: Iterable[Document],
        info: DocInfo,
        session: AuthorizedSession,
        command: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """Apply an update command to every document.

        Args:
            documents: Documents to update
            info: Request context of the document endpoint
            session: Authorized session
            command: ``"archive"`` or ``"draft"``
            progress_callback: Optional function(done, total)

        Returns:
            BatchResult with one entry per document
        """
        return self._run(
            list(documents),
            lambda doc: self.client.update_document(info, session, doc, command),
            lambda doc: doc.name,
            progress_callback,
        )

    def delete(
        self,
        documents: Iterable[Document],
        info: DocInfo,
        session: AuthorizedSession,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """Delete every document.

        Published documents must be updated to Draft first, see
        :meth:`draft_and_delete`.
        """
        return self._run(
            list(documents),
            lambda doc: self.client.delete_document(info, session, doc),
            lambda doc: doc.name,
            progress_callback,
        )

    def draft_and_delete(
        self,
        documents: Documents,
        info: DocInfo,
        session: AuthorizedSession,
        update_callback: Optional[ProgressCallback] = None,
        delete_callback: Optional[ProgressCallback] = None,
    ) -> tuple[BatchResult, BatchResult]:
        """Move every document to Draft, then delete them all.

        Every update completes before the first delete is sent.

        Args:
            documents: Documents to remove
            info: Document endpoint context
            session: Authorized session
            update_callback: Progress of the Draft updates
            delete_callback: Progress of the deletes

        Returns:
            Tuple of (update result, delete result)
        """
        updated = self.update(
            documents,
            info,
            session,
            UpdateCommand.DRAFT,
            progress_callback=update_callback,
        )
        deleted = self.delete(
            documents, info, session, progress_callback=delete_callback
        )
        return updated, deleted
