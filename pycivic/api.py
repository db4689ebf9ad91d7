"""API client for the CivicEngage Document Center."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from .auth import AuthorizedSession, AuthorizeHeaders, Credential, SessionToken
from .exceptions import (
    CivicAuthenticationError,
    CivicAuthorizationError,
    CivicFileError,
    CivicInvalidResponseError,
    CivicNetworkError,
)
from .models import Document, Documents, Folders, OperationResult
from .query import DocInfo

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)

# Status codes accepted for a new document
UPLOAD_OK = (httpx.codes.OK, httpx.codes.CREATED)


class DocumentCenterClient:
    """Client for the Document Center REST API.

    Every method issues exactly one HTTP request and waits for its response.
    Errors are not retried.
    """

    def __init__(self, timeout: float = 30.0):
        """Initialize the client.

        Args:
            timeout: Request timeout in seconds (default: 30.0)
        """
        self.timeout = timeout
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> DocumentCenterClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request.

        Args:
            method: HTTP method
            url: Full request URL
            **kwargs: Additional arguments passed to httpx

        Returns:
            The response, whatever its status code

        Raises:
            CivicNetworkError: If the request could not be sent
        """
        logger.debug(f"{method} {url}")
        try:
            response = self._get_client().request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise CivicNetworkError(f"Network error: {e}") from e
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decode a JSON response body. An empty body decodes to an empty dict."""
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise CivicInvalidResponseError(
                f"Invalid JSON response from server (status {response.status_code})"
            ) from e

    # =========================
    # Authentication
    # =========================

    def authenticate(
        self,
        url: str,
        credential: Credential,
        headers: AuthorizeHeaders | None = None,
    ) -> SessionToken:
        """Exchange a credential for a session token.

        Args:
            url: Authentication endpoint
            credential: Validated credential
            headers: Header names to use (defaults to the vendor's)

        Returns:
            SessionToken for this login

        Raises:
            CivicAuthenticationError: If the endpoint does not answer 200
        """
        headers = headers or AuthorizeHeaders()
        body = {"Username": credential.username, "Password": credential.password}
        response = self._request(
            "POST", url, headers=headers.for_credential(credential), json=body
        )
        if response.status_code != httpx.codes.OK:
            logger.warning(f"Authentication failed with status {response.status_code}")
            raise CivicAuthenticationError(
                f"Authorization failed (status {response.status_code})",
                status_code=response.status_code,
            )
        token = SessionToken.from_api_response(self._decode(response))
        logger.info(f"Authorization successful for user {token.user_id}.")
        return token

    # =========================
    # Queries
    # =========================

    def _query(self, info: DocInfo, session: AuthorizedSession) -> Any:
        response = self._request(
            "GET",
            info.query(),
            headers=info.headers.for_session(session, content_type=False),
        )
        if response.status_code != httpx.codes.OK:
            logger.warning(f"Query {info.url} failed with status {response.status_code}")
            raise CivicAuthorizationError(
                f"Request to {info.url} was rejected (status {response.status_code})",
                status_code=response.status_code,
            )
        return self._decode(response)

    def query_folders(self, info: DocInfo, session: AuthorizedSession) -> Folders:
        """Get the first page of folders matching the query in ``info``.

        Raises:
            CivicAuthorizationError: If the server does not answer 200
        """
        folders = Folders.from_api_response(self._query(info, session))
        if folders.is_truncated:
            logger.debug(
                f"Folder listing holds {folders.total_count} records, "
                f"only {len(folders)} returned"
            )
        return folders

    def query_documents(self, info: DocInfo, session: AuthorizedSession) -> Documents:
        """Get the first page of documents matching the query in ``info``.

        Raises:
            CivicAuthorizationError: If the server does not answer 200
        """
        documents = Documents.from_api_response(self._query(info, session))
        if documents.is_truncated:
            logger.debug(
                f"Document listing holds {documents.total_count} records, "
                f"only {len(documents)} returned"
            )
        return documents

    # =========================
    # Document operations
    # =========================

    def upload_document(
        self,
        info: DocInfo,
        session: AuthorizedSession,
        name: str,
        file_path: Path,
        folder_id: int,
        publish: bool = True,
    ) -> OperationResult:
        """Upload a local file as a new document.

        The file is sent base64-encoded under ``<name>.pdf``.

        Args:
            info: Request context of the document endpoint
            session: Authorized session
            name: Document name
            file_path: Local file to upload
            folder_id: Target folder id
            publish: Publish the document (otherwise it is created as Draft)

        Returns:
            OperationResult; successful when the server answers 200 or 201

        Raises:
            CivicFileError: If the local file cannot be read
        """
        try:
            data = Path(file_path).read_bytes()
        except OSError as e:
            raise CivicFileError(f"Cannot read {file_path}: {e}") from e

        body = {
            "Name": name,
            "FileName": f"{name}.pdf",
            "File": base64.b64encode(data).decode("ascii"),
            "FolderId": folder_id,
            "Status": "Published" if publish else "Draft",
            "ConvertToPdf": False,
            "IsVisible": False,
        }
        response = self._request(
            "POST", info.url, headers=info.headers.for_session(session), json=body
        )
        if response.status_code in UPLOAD_OK:
            return OperationResult(
                name=name,
                success=True,
                status_code=response.status_code,
                data=self._decode(response),
            )
        logger.info(f"Response: {response.text}")
        return OperationResult(
            name=name,
            success=False,
            status_code=response.status_code,
            body=response.text,
        )

    def update_document(
        self,
        info: DocInfo,
        session: AuthorizedSession,
        document: Document,
        command: str,
    ) -> OperationResult:
        """Apply an update command to a document and PUT it back.

        Args:
            info: Request context of the document endpoint
            session: Authorized session
            document: Document to update (left unchanged)
            command: ``"archive"`` or ``"draft"``; anything else sends the
                document as it is

        Returns:
            OperationResult; successful only when the server answers 200
        """
        logger.debug(f"Updating document {document.id} ({document.name}): {command}")
        updated = document.with_command(command)
        response = self._request(
            "PUT",
            info.item_url(document.id),
            headers=info.headers.for_session(session),
            json=updated.to_api_dict(),
        )
        return self._item_result(document, response)

    def delete_document(
        self,
        info: DocInfo,
        session: AuthorizedSession,
        document: Document,
    ) -> OperationResult:
        """Delete a document.

        The server refuses to delete a published document; update it to
        Draft first.
        """
        logger.debug(f"Deleting document {document.id} ({document.name})")
        response = self._request(
            "DELETE",
            info.item_url(document.id),
            headers=info.headers.for_session(session),
        )
        return self._item_result(document, response)

    def _item_result(
        self, document: Document, response: httpx.Response
    ) -> OperationResult:
        if response.status_code == httpx.codes.OK:
            return OperationResult(
                name=document.name,
                success=True,
                status_code=response.status_code,
                data=self._decode(response),
                document_id=document.id,
            )
        return OperationResult(
            name=document.name,
            success=False,
            status_code=response.status_code,
            body=response.text,
            document_id=document.id,
        )


def load_session(
    client: DocumentCenterClient,
    config: Config,
    headers: AuthorizeHeaders | None = None,
) -> AuthorizedSession:
    """Authenticate with the credential and endpoint held by ``config``.

    Args:
        client: Document Center client
        config: Loaded configuration
        headers: Header names for the authentication call

    Returns:
        AuthorizedSession for subsequent calls

    Raises:
        CivicCredentialError: If credential values are missing
        CivicConfigError: If the authentication URL is missing
        CivicAuthenticationError: If the server rejects the login
    """
    credential = config.credential()
    url = config.require("authenticate_url")
    token = client.authenticate(url, credential, headers)
    return AuthorizedSession.from_token(credential, token)
