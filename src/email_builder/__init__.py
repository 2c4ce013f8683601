"""
email-builder: Fluent construction and SMTP delivery of multipart email.

This library provides a small chained API for composing an email with
plain text, HTML and file attachments and sending it through an SMTP
server. Credentials come from a JSON file or are passed in directly.

Key Features:
    - Chained builder API (to/cc/bcc/from_/subject/text_body/...)
    - multipart/mixed messages with a multipart/alternative body
    - Base64 attachments with a configurable line width
    - Stable numeric error codes

Credentials file (default location ``~/.email/email-config.json``)::

    {
        "Username": "yourname@gmail.com",
        "Password": "yourpassword",
        "EmailServer": "smtp.gmail.com",
        "Port": 587
    }

Basic Usage:
    >>> from email_builder import MessageBuilder
    >>>
    >>> builder = MessageBuilder.from_file("~/.email/email-config.json")
    >>> (builder.from_("me@example.com", "Me")
    ...     .to("you@example.com", "You")
    ...     .cc("boss@example.com", "Boss")
    ...     .subject("Monthly report")
    ...     .text_body("The report is attached.")
    ...     .html_body("<p>The report is <b>attached</b>.</p>")
    ...     .attach("report.pdf")
    ...     .send())
"""

__version__ = "1.0.0"
__license__ = "MIT"

# Public API exports
from .builder import BodyState, MessageBuilder
from .credentials import (
    DEFAULT_CONFIG_PATH,
    EmailCredentials,
    load_credentials,
    resolve_config_path,
)
from .errors import (
    AttachmentReadError,
    ConfigError,
    ConfigFormatError,
    ConfigReadError,
    EmailBuilderError,
    MessageFormatError,
    NoBodyError,
    TransportError,
)
from .message import Address, Message, MultiPart, SimplePart
from .transport import SMTPTransport, Transport

__all__ = [
    "Address",
    "AttachmentReadError",
    "BodyState",
    "ConfigError",
    "ConfigFormatError",
    "ConfigReadError",
    "DEFAULT_CONFIG_PATH",
    "EmailBuilderError",
    "EmailCredentials",
    "Message",
    "MessageBuilder",
    "MessageFormatError",
    "MultiPart",
    "NoBodyError",
    "SMTPTransport",
    "SimplePart",
    "Transport",
    "TransportError",
    "load_credentials",
    "resolve_config_path",
]
