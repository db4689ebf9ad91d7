"""Exceptions raised by the Document Center client."""

from typing import Optional


class CivicAPIError(Exception):
    """Base exception for all pycivic errors."""


class CivicCredentialError(CivicAPIError):
    """Raised when a credential is built with missing fields."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Value not provided for {self.missing}.")


class CivicConfigError(CivicAPIError):
    """Raised when a required setting is not configured."""


class CivicAuthenticationError(CivicAPIError):
    """Raised when the authentication endpoint rejects the credential."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class CivicAuthorizationError(CivicAuthenticationError):
    """Raised when a folder or document query is rejected.

    The vendor does not distinguish between an expired session and a server
    failure here, so the HTTP status code is kept for diagnostics.
    """


class CivicNetworkError(CivicAPIError):
    """Raised when the HTTP transport fails."""


class CivicInvalidResponseError(CivicAPIError):
    """Raised when the server returns a body that cannot be interpreted."""


class CivicFileError(CivicAPIError):
    """Raised when a local file or directory cannot be read."""


class CivicMissingLinkError(CivicAPIError):
    """Raised when no document URL exists for a requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No link for {name}.")


class CivicReportError(CivicAPIError):
    """Raised when a storage report cannot be computed."""
