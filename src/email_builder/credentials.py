"""SMTP credentials configuration module."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from .errors import ConfigFormatError, ConfigReadError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.email/email-config.json"

# JSON key -> dataclass field
_FIELDS = {
    "username": ("Username", str),
    "password": ("Password", str),
    "server": ("EmailServer", str),
    "port": ("Port", int),
}


@dataclass(frozen=True)
class EmailCredentials:
    """
    SMTP account credentials.

    This class holds the login and server information used to
    deliver messages. It is loaded once and never changes afterwards.

    A credentials file looks like::

        {
            "Username": "yourname@gmail.com",
            "Password": "yourpassword",
            "EmailServer": "smtp.gmail.com",
            "Port": 587
        }

    Attributes:
        username: Login name (e.g., "you@yourdomain.com")
        password: Account password or app-specific password
        server: SMTP server hostname (e.g., "smtp.gmail.com")
        port: SMTP server port (e.g., 587)
    """

    username: str
    password: str
    server: str
    port: int

    def __post_init__(self):
        """Validate credentials after initialization."""
        if not isinstance(self.username, str):
            raise ValueError("Username must be a string")

        if not isinstance(self.password, str):
            raise ValueError("Password must be a string")

        if not isinstance(self.server, str) or not self.server:
            raise ValueError("Email server cannot be empty")

        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"Invalid port: {self.port!r}")

        if not 0 < self.port < 65536:
            raise ValueError(f"Port out of range: {self.port}")

    @property
    def address(self) -> str:
        """Server address in ``host:port`` form."""
        return f"{self.server}:{self.port}"

    def __repr__(self) -> str:
        return (
            f"EmailCredentials(username={self.username!r}, "
            f"password='***', server={self.server!r}, port={self.port})"
        )

    @classmethod
    def from_dict(
        cls,
        data: Any,
        path: Optional[str] = None
    ) -> "EmailCredentials":
        """
        Build credentials from a decoded JSON object.

        Keys are matched case-insensitively and unknown keys are
        ignored.

        Args:
            data: Decoded JSON value
            path: Source file, used in error messages only

        Returns:
            EmailCredentials instance

        Raises:
            ConfigFormatError: If a key is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigFormatError(
                f"expected a JSON object, got {type(data).__name__}", path
            )

        folded = {str(key).lower(): value for key, value in data.items()}

        values = {}
        for field_name, (key, expected) in _FIELDS.items():
            if key.lower() not in folded:
                raise ConfigFormatError(f"missing key {key!r}", path)

            value = folded[key.lower()]
            if isinstance(value, bool) or not isinstance(value, expected):
                raise ConfigFormatError(
                    f"key {key!r} must be of type {expected.__name__}, "
                    f"got {type(value).__name__}",
                    path,
                )
            values[field_name] = value

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigFormatError(str(e), path) from e


def resolve_config_path(
    path: Union[str, Path],
    home: Optional[Union[str, Path]] = None,
    cwd: Optional[Union[str, Path]] = None
) -> Path:
    """
    Resolve a credentials file path.

    A leading ``/`` is absolute, a leading ``~/`` is relative to the
    home directory, anything else is relative to the working directory.

    Args:
        path: Path as given by the caller
        home: Home directory (default: the current user's home)
        cwd: Working directory (default: the process working directory)

    Returns:
        Resolved path
    """
    text = str(path)

    if text.startswith("/"):
        return Path(text)

    if text.startswith("~/"):
        base = Path(home) if home is not None else Path.home()
        return base / text[2:]

    base = Path(cwd) if cwd is not None else Path.cwd()
    return base / text


def load_credentials(
    path: Union[str, Path] = DEFAULT_CONFIG_PATH,
    home: Optional[Union[str, Path]] = None,
    cwd: Optional[Union[str, Path]] = None
) -> EmailCredentials:
    """
    Load SMTP credentials from a JSON file.

    Args:
        path: Credentials file (absolute, ``~/``-relative or relative)
        home: Home directory used for ``~/`` paths
        cwd: Working directory used for relative paths

    Returns:
        EmailCredentials instance

    Raises:
        ConfigReadError: If the file is missing or unreadable
        ConfigFormatError: If the file is not valid JSON of the
                           expected shape
    """
    resolved = resolve_config_path(path, home=home, cwd=cwd)
    logger.debug(f"Loading credentials from {resolved}")

    try:
        with open(resolved, "r", encoding="utf-8") as f:
            data = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(str(resolved), str(e)) from e

    try:
        decoded = json.loads(data)
    except json.JSONDecodeError as e:
        raise ConfigFormatError(str(e), str(resolved)) from e

    credentials = EmailCredentials.from_dict(decoded, str(resolved))
    logger.info(
        f"Credentials loaded for {credentials.username} "
        f"({credentials.address})"
    )
    return credentials
