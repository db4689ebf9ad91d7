"""Unit tests for the Document Center API client."""

import base64
from unittest.mock import patch

import httpx
import pytest
from payloads import AUTH_URL, DOCUMENT_URL, document_payload, folder_payload, page_payload

from pycivic.api import DocumentCenterClient, load_session
from pycivic.config import Config
from pycivic.exceptions import (
    CivicAuthenticationError,
    CivicAuthorizationError,
    CivicConfigError,
    CivicCredentialError,
    CivicFileError,
    CivicInvalidResponseError,
    CivicNetworkError,
)
from pycivic.models import Document

AUTH_BODY = {
    "AdditionalInfo": "",
    "Success": True,
    "APIKey": "sess-1",
    "UserId": 17,
    "Message": "Welcome",
}


class TestClientLifecycle:
    """Tests for client creation and cleanup."""

    def test_lazy_client(self):
        """Test that the httpx client is created on first use."""
        client = DocumentCenterClient(timeout=5.0)
        assert client._client is None

        http = client._get_client()
        assert isinstance(http, httpx.Client)
        assert client._get_client() is http

        client.close()
        assert client._client is None

    def test_context_manager_closes(self):
        """Test that leaving the context closes the client."""
        with DocumentCenterClient() as client:
            client._get_client()
        assert client._client is None


class TestRequest:
    """Tests for the _request and _decode helpers."""

    @patch("pycivic.api.httpx.Client.request")
    def test_network_error(self, mock_request):
        """Test that transport failures become CivicNetworkError."""
        mock_request.side_effect = httpx.ConnectError("Connection failed")

        client = DocumentCenterClient()
        with pytest.raises(CivicNetworkError, match="Network error"):
            client._request("GET", DOCUMENT_URL)

    def test_decode_empty_body(self):
        """Test that an empty body decodes to an empty dict."""
        assert DocumentCenterClient._decode(httpx.Response(200)) == {}

    def test_decode_invalid_json(self):
        """Test that a non-JSON body raises CivicInvalidResponseError."""
        with pytest.raises(CivicInvalidResponseError):
            DocumentCenterClient._decode(httpx.Response(200, text="<html></html>"))


class TestAuthenticate:
    """Tests for the authentication call."""

    @patch("pycivic.api.httpx.Client.request")
    def test_successful_authentication(self, mock_request, credential):
        """Test the request sent and the token returned."""
        mock_request.return_value = httpx.Response(200, json=AUTH_BODY)

        token = DocumentCenterClient().authenticate(AUTH_URL, credential)

        assert token.session_id == "sess-1"
        assert token.user_id == 17
        args, kwargs = mock_request.call_args
        assert args == ("POST", AUTH_URL)
        assert kwargs["json"] == {"Username": "clerk@example.gov", "Password": "secret"}
        assert kwargs["headers"]["apikey"] == "partition-key"
        assert kwargs["headers"]["partition"] == "city"
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["headers"]["Accept"] == "application/json"

    @pytest.mark.parametrize("status", [400, 401, 403, 500])
    @patch("pycivic.api.httpx.Client.request")
    def test_rejected_authentication(self, mock_request, status, credential):
        """Test that any non-200 status fails with the status preserved."""
        mock_request.return_value = httpx.Response(status, text="denied")

        with pytest.raises(CivicAuthenticationError) as exc_info:
            DocumentCenterClient().authenticate(AUTH_URL, credential)

        assert exc_info.value.status_code == status
        assert mock_request.call_count == 1

    @patch("pycivic.api.httpx.Client.request")
    def test_load_session(self, mock_request):
        """Test authentication from configuration values."""
        mock_request.return_value = httpx.Response(200, json=AUTH_BODY)
        config = Config(
            api_key="partition-key",
            partition="city",
            username="clerk",
            password="secret",
            host="example.gov",
            authenticate_url=AUTH_URL,
        )

        session = load_session(DocumentCenterClient(), config)

        assert session.api_key == "partition-key"
        assert session.partition == "city"
        assert session.session_id == "sess-1"

    @patch("pycivic.api.httpx.Client.request")
    def test_load_session_missing_credential(self, mock_request):
        """Test that missing credential values fail before any request."""
        config = Config(api_key="k", host="h", authenticate_url=AUTH_URL)

        with pytest.raises(CivicCredentialError) as exc_info:
            load_session(DocumentCenterClient(), config)

        assert exc_info.value.missing == ["partition", "name", "password"]
        mock_request.assert_not_called()

    @patch("pycivic.api.httpx.Client.request")
    def test_load_session_missing_url(self, mock_request):
        """Test that a missing endpoint fails before any request."""
        config = Config(
            api_key="k", partition="p", username="u", password="pw", host="h"
        )

        with pytest.raises(CivicConfigError, match="AUTHENTICATE"):
            load_session(DocumentCenterClient(), config)
        mock_request.assert_not_called()


class TestQueries:
    """Tests for folder and document queries."""

    @patch("pycivic.api.httpx.Client.request")
    def test_query_folders(self, mock_request, folder_info, session):
        """Test the GET request and parsed folder page."""
        mock_request.return_value = httpx.Response(
            200, json=page_payload([folder_payload("Test", 42)])
        )

        folders = DocumentCenterClient().query_folders(folder_info, session)

        assert folders.get_id("Test") == 42
        args, kwargs = mock_request.call_args
        assert args == ("GET", folder_info.query())
        assert kwargs["headers"]["userapikey"] == "sess-1"
        assert "Content-Type" not in kwargs["headers"]

    @patch("pycivic.api.httpx.Client.request")
    def test_query_documents_uses_filter(self, mock_request, document_info, session):
        """Test that the query string carries the folder filter."""
        mock_request.return_value = httpx.Response(
            200, json=page_payload([document_payload("a", 1, size=2.0)])
        )
        info = document_info.with_filter("FolderId eq 42")

        docs = DocumentCenterClient().query_documents(info, session)

        assert docs.total_size() == 2.0
        assert mock_request.call_args[0][1] == (
            f"{DOCUMENT_URL}?%24filter=FolderId eq 42"
        )

    @pytest.mark.parametrize("status", [401, 404, 500])
    @patch("pycivic.api.httpx.Client.request")
    def test_rejected_query(self, mock_request, status, document_info, session):
        """Test that non-200 queries fail with the status preserved."""
        mock_request.return_value = httpx.Response(status)

        with pytest.raises(CivicAuthorizationError) as exc_info:
            DocumentCenterClient().query_documents(document_info, session)

        assert exc_info.value.status_code == status
        assert isinstance(exc_info.value, CivicAuthenticationError)

    @patch("pycivic.api.httpx.Client.request")
    def test_invalid_page(self, mock_request, document_info, session):
        """Test that a malformed page is rejected."""
        mock_request.return_value = httpx.Response(200, json=["not", "a", "page"])

        with pytest.raises(CivicInvalidResponseError):
            DocumentCenterClient().query_documents(document_info, session)


class TestUpload:
    """Tests for document upload."""

    @pytest.mark.parametrize("status", [200, 201])
    @patch("pycivic.api.httpx.Client.request")
    def test_upload_success(self, mock_request, status, tmp_path, document_info, session):
        """Test the upload body and a successful result."""
        path = tmp_path / "deed.pdf"
        path.write_bytes(b"%PDF-1.4 data")
        mock_request.return_value = httpx.Response(status, json={"Id": 9})

        result = DocumentCenterClient().upload_document(
            document_info, session, "deed", path, folder_id=42
        )

        assert result.success
        assert result.status_code == status
        assert result.data == {"Id": 9}
        args, kwargs = mock_request.call_args
        assert args == ("POST", DOCUMENT_URL)
        body = kwargs["json"]
        assert body["Name"] == "deed"
        assert body["FileName"] == "deed.pdf"
        assert base64.b64decode(body["File"]) == b"%PDF-1.4 data"
        assert body["FolderId"] == 42
        assert body["Status"] == "Published"
        assert body["ConvertToPdf"] is False
        assert body["IsVisible"] is False

    @patch("pycivic.api.httpx.Client.request")
    def test_upload_as_draft(self, mock_request, tmp_path, document_info, session):
        """Test that publish=False uploads a Draft."""
        path = tmp_path / "deed.pdf"
        path.write_bytes(b"x")
        mock_request.return_value = httpx.Response(201, json={})

        DocumentCenterClient().upload_document(
            document_info, session, "deed", path, folder_id=1, publish=False
        )

        assert mock_request.call_args[1]["json"]["Status"] == "Draft"

    @patch("pycivic.api.httpx.Client.request")
    def test_upload_rejected(self, mock_request, tmp_path, document_info, session):
        """Test that other statuses give a failed result with the body."""
        path = tmp_path / "deed.pdf"
        path.write_bytes(b"x")
        mock_request.return_value = httpx.Response(500, text="server error")

        result = DocumentCenterClient().upload_document(
            document_info, session, "deed", path, folder_id=1
        )

        assert not result.success
        assert result.status_code == 500
        assert result.body == "server error"
        assert result.data is None

    @patch("pycivic.api.httpx.Client.request")
    def test_upload_missing_file(self, mock_request, tmp_path, document_info, session):
        """Test that an unreadable file fails before the request."""
        with pytest.raises(CivicFileError):
            DocumentCenterClient().upload_document(
                document_info, session, "gone", tmp_path / "gone.pdf", folder_id=1
            )
        mock_request.assert_not_called()


class TestUpdateAndDelete:
    """Tests for document update and delete."""

    @patch("pycivic.api.httpx.Client.request")
    def test_update_draft(self, mock_request, document_info, session):
        """Test that the PUT carries the modified document."""
        mock_request.return_value = httpx.Response(200, json={"Status": 10})
        doc = Document(id=7, name="deed", status=30)

        result = DocumentCenterClient().update_document(
            document_info, session, doc, "draft"
        )

        assert result.success
        assert result.document_id == 7
        args, kwargs = mock_request.call_args
        assert args == ("PUT", f"{DOCUMENT_URL}/7")
        assert kwargs["json"]["Status"] == 10
        assert kwargs["json"]["Id"] == 7
        assert doc.status == 30

    @patch("pycivic.api.httpx.Client.request")
    def test_update_rejected_keeps_body(self, mock_request, document_info, session):
        """Test that a refused update is not reported as a success."""
        mock_request.return_value = httpx.Response(400, text="bad request")

        result = DocumentCenterClient().update_document(
            document_info, session, Document(id=7, name="deed"), "archive"
        )

        assert not result.success
        assert result.status_code == 400
        assert result.body == "bad request"

    @patch("pycivic.api.httpx.Client.request")
    def test_delete(self, mock_request, document_info, session):
        """Test the DELETE request."""
        mock_request.return_value = httpx.Response(200, json={"Success": True})

        result = DocumentCenterClient().delete_document(
            document_info, session, Document(id=7, name="deed")
        )

        assert result.success
        assert result.data == {"Success": True}
        args, kwargs = mock_request.call_args
        assert args == ("DELETE", f"{DOCUMENT_URL}/7")
        assert kwargs["headers"]["userapikey"] == "sess-1"

    @patch("pycivic.api.httpx.Client.request")
    def test_delete_published_refused(self, mock_request, document_info, session):
        """Test that a refused delete keeps the raw response text."""
        mock_request.return_value = httpx.Response(
            409, text="Document must be in draft"
        )

        result = DocumentCenterClient().delete_document(
            document_info, session, Document(id=7, name="deed", status=30)
        )

        assert not result.success
        assert result.body == "Document must be in draft"
