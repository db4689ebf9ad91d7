"""PyCivic - CLI tool for managing documents in a CivicEngage Document Center."""

from .api import DocumentCenterClient, load_session
from .auth import (
    AuthorizedSession,
    AuthorizeHeaders,
    Credential,
    CredentialBuilder,
    SessionToken,
)
from .batch import DocumentBatch
from .config import Config
from .exceptions import (
    CivicAPIError,
    CivicAuthenticationError,
    CivicAuthorizationError,
    CivicConfigError,
    CivicCredentialError,
    CivicFileError,
    CivicInvalidResponseError,
    CivicMissingLinkError,
    CivicNetworkError,
    CivicReportError,
)
from .files import LocalFileIndex
from .models import (
    BatchResult,
    Document,
    DocumentLinks,
    Documents,
    DocumentStatus,
    Folder,
    Folders,
    OperationResult,
)
from .query import DocInfo, DocQuery, DocumentHeaders
from .report import FolderSize, FolderSizes, ReportItem, ReportItems

__all__ = [
    "AuthorizedSession",
    "AuthorizeHeaders",
    "BatchResult",
    "CivicAPIError",
    "CivicAuthenticationError",
    "CivicAuthorizationError",
    "CivicConfigError",
    "CivicCredentialError",
    "CivicFileError",
    "CivicInvalidResponseError",
    "CivicMissingLinkError",
    "CivicNetworkError",
    "CivicReportError",
    "Config",
    "Credential",
    "CredentialBuilder",
    "DocInfo",
    "DocQuery",
    "Document",
    "DocumentBatch",
    "DocumentCenterClient",
    "DocumentHeaders",
    "DocumentLinks",
    "DocumentStatus",
    "Documents",
    "Folder",
    "FolderSize",
    "FolderSizes",
    "Folders",
    "LocalFileIndex",
    "OperationResult",
    "ReportItem",
    "ReportItems",
    "SessionToken",
    "load_session",
]
