"""Configuration loaded from the environment or a .env file."""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv

from .auth import Credential, CredentialBuilder
from .exceptions import CivicConfigError

logger = logging.getLogger(__name__)

# Environment variable read for each configuration field
ENV_VARS = {
    "api_key": "API_KEY",
    "partition": "PARTITION",
    "username": "USERNAME",
    "password": "PASSWORD",
    "host": "HOST",
    "authenticate_url": "AUTHENTICATE",
    "folder_url": "FOLDER",
    "document_url": "DOCUMENT",
}


@dataclass(frozen=True)
class Config:
    """Credential values and endpoint URLs for one Document Center site."""

    api_key: Optional[str] = None
    partition: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    authenticate_url: Optional[str] = None
    folder_url: Optional[str] = None
    document_url: Optional[str] = None

    def __repr__(self) -> str:
        shown = ", ".join(
            f"{f.name}={getattr(self, f.name)!r}"
            for f in fields(self)
            if f.name not in ("api_key", "password")
        )
        return f"Config({shown})"

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "Config":
        """Load configuration from the process environment.

        Values from ``env_file`` (or a ``.env`` file found from the working
        directory) are added first; variables already set in the
        environment take precedence.

        Args:
            env_file: Optional path to a .env file

        Returns:
            Config instance
        """
        if env_file is not None:
            if not Path(env_file).is_file():
                raise CivicConfigError(f"Environment file not found: {env_file}")
            load_dotenv(env_file)
        else:
            load_dotenv(find_dotenv(usecwd=True))
        values = {name: os.environ.get(var) for name, var in ENV_VARS.items()}
        logger.debug(
            "Loaded configuration for: "
            + ", ".join(ENV_VARS[name] for name, value in values.items() if value)
        )
        return cls(**values)

    def credential(self) -> Credential:
        """Build the credential from the configured values.

        Raises:
            CivicCredentialError: Listing every missing credential field
        """
        builder = CredentialBuilder()
        if self.api_key is not None:
            builder.api_key(self.api_key)
        if self.partition is not None:
            builder.partition(self.partition)
        if self.username is not None:
            builder.name(self.username)
        if self.password is not None:
            builder.password(self.password)
        if self.host is not None:
            builder.host(self.host)
        return builder.build()

    def require(self, name: str) -> str:
        """Return a configured value or fail with the variable to set.

        Args:
            name: Field name, e.g. ``"folder_url"``

        Raises:
            CivicConfigError: If the value is not set
        """
        value = getattr(self, name)
        if not value:
            raise CivicConfigError(
                f"{ENV_VARS[name]} not configured. "
                f"Please set the {ENV_VARS[name]} environment variable."
            )
        return value
