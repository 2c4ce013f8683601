"""Error types raised by email-builder.

Every error carries a stable numeric code so callers can tell failures
apart without matching on message text.
"""

from typing import Any, Optional

CONFIG_READ_ERROR = 12023
CONFIG_FORMAT_ERROR = 12002
NO_BODY_ERROR = 12022
TRANSPORT_ERROR = 12021
ATTACHMENT_READ_ERROR = 12024
MESSAGE_FORMAT_ERROR = 12025


class EmailBuilderError(Exception):
    """
    Base exception for all email-builder errors.

    Attributes:
        message: Human-readable error message
        code: Stable numeric error code
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        *,
        code: int,
        details: Optional[dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"Error({self.code}): {self.message}"


class ConfigError(EmailBuilderError):
    """Base class for credentials file errors."""


class ConfigReadError(ConfigError):
    """Raised when the credentials file is missing or unreadable."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"File ({path}) missing or unreadable error: {reason}",
            code=CONFIG_READ_ERROR,
            details={"path": path, "reason": reason},
        )
        self.path = path
        self.reason = reason


class ConfigFormatError(ConfigError):
    """Raised when the credentials file does not have the expected shape."""

    def __init__(self, reason: str, path: Optional[str] = None):
        super().__init__(
            f"Invalid format - {reason}",
            code=CONFIG_FORMAT_ERROR,
            details={"path": path, "reason": reason},
        )
        self.path = path
        self.reason = reason


class NoBodyError(EmailBuilderError):
    """Raised when sending a message that has no body or attachments."""

    def __init__(self):
        super().__init__(
            "Can not send an email without a body or attachments.",
            code=NO_BODY_ERROR,
        )


class TransportError(EmailBuilderError):
    """
    Raised when the SMTP transport fails to deliver a message.

    The underlying transport exception is available as ``__cause__``.
    """

    def __init__(self, reason: str, address: Optional[str] = None):
        super().__init__(
            f"SMTP Send Error: {reason}",
            code=TRANSPORT_ERROR,
            details={"address": address, "reason": reason},
        )
        self.address = address
        self.reason = reason


class AttachmentReadError(EmailBuilderError):
    """Raised when an attachment file cannot be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Attachment ({path}) missing or unreadable error: {reason}",
            code=ATTACHMENT_READ_ERROR,
            details={"path": path, "reason": reason},
        )
        self.path = path
        self.reason = reason


class MessageFormatError(EmailBuilderError):
    """
    Raised when the message cannot be serialized.

    Typical causes are non-ASCII addresses and header values that
    contain line breaks. The underlying exception is available as
    ``__cause__``.
    """

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid message - {reason}",
            code=MESSAGE_FORMAT_ERROR,
            details={"reason": reason},
        )
        self.reason = reason
