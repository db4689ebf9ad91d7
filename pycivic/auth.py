"""Credentials and session tokens for the Document Center API."""

from dataclasses import dataclass, field
from typing import Any, Optional

from .exceptions import CivicCredentialError, CivicInvalidResponseError

CREDENTIAL_FIELDS: tuple[str, ...] = ("api_key", "partition", "name", "password", "host")


@dataclass(frozen=True)
class Credential:
    """Login credential for a Document Center partition.

    Use :class:`CredentialBuilder` to create one; the builder checks that
    every field is present before the credential exists.
    """

    api_key: str
    partition: str
    name: str
    password: str = field(repr=False)
    host: str

    @property
    def username(self) -> str:
        """User name in the ``name@host`` form expected by the vendor."""
        return f"{self.name}@{self.host}"

    @classmethod
    def builder(cls) -> "CredentialBuilder":
        return CredentialBuilder()


class CredentialBuilder:
    """Accumulates credential fields and validates them all at once."""

    def __init__(self) -> None:
        self._values: dict[str, Optional[str]] = dict.fromkeys(CREDENTIAL_FIELDS)

    def api_key(self, value: str) -> "CredentialBuilder":
        self._values["api_key"] = value
        return self

    def partition(self, value: str) -> "CredentialBuilder":
        self._values["partition"] = value
        return self

    def name(self, value: str) -> "CredentialBuilder":
        self._values["name"] = value
        return self

    def password(self, value: str) -> "CredentialBuilder":
        self._values["password"] = value
        return self

    def host(self, value: str) -> "CredentialBuilder":
        self._values["host"] = value
        return self

    def build(self) -> Credential:
        """Create the credential.

        Returns:
            Immutable Credential

        Raises:
            CivicCredentialError: If any field is unset. ``missing`` lists
                every unset field in the order api_key, partition, name,
                password, host.
        """
        missing = [name for name in CREDENTIAL_FIELDS if self._values[name] is None]
        if missing:
            raise CivicCredentialError(missing)
        return Credential(**self._values)  # type: ignore[arg-type]


@dataclass(frozen=True)
class AuthorizeHeaders:
    """Wire names of the headers sent to the authentication endpoint."""

    api_key: str = "apikey"
    partition: str = "partition"

    def for_credential(self, credential: Credential) -> dict[str, str]:
        """Build the request headers for an authentication call."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            self.api_key: credential.api_key,
            self.partition: credential.partition,
        }


@dataclass(frozen=True)
class SessionToken:
    """Response of the authentication endpoint.

    ``session_id`` is the per-login key the vendor calls ``APIKey``. It is
    not the partition API key held by the credential.
    """

    additional_info: Optional[str]
    success: bool
    session_id: str = field(repr=False)
    user_id: Optional[int]
    message: Optional[str]

    @classmethod
    def from_api_response(cls, data: Any) -> "SessionToken":
        """Create a SessionToken from the vendor's JSON body.

        Args:
            data: Decoded JSON response

        Returns:
            SessionToken instance

        Raises:
            CivicInvalidResponseError: If the body has no session id
        """
        if not isinstance(data, dict) or not data.get("APIKey"):
            raise CivicInvalidResponseError(
                "Authentication response does not contain a session id"
            )
        return cls(
            additional_info=data.get("AdditionalInfo"),
            success=bool(data.get("Success", False)),
            session_id=data["APIKey"],
            user_id=data.get("UserId"),
            message=data.get("Message"),
        )


@dataclass(frozen=True)
class AuthorizedSession:
    """Headers values carried on every call after authentication."""

    api_key: str
    partition: str
    session_id: str = field(repr=False)

    @classmethod
    def from_token(cls, credential: Credential, token: SessionToken) -> "AuthorizedSession":
        return cls(
            api_key=credential.api_key,
            partition=credential.partition,
            session_id=token.session_id,
        )
