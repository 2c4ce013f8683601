"""Fluent message builder module."""

import enum
import logging
import sys
from email.errors import MessageError
from pathlib import Path
from threading import Lock
from typing import Optional, Union

from .attachment import DEFAULT_LINE_LENGTH, build_attachment
from .credentials import DEFAULT_CONFIG_PATH, EmailCredentials, load_credentials
from .errors import (
    EmailBuilderError,
    MessageFormatError,
    NoBodyError,
    TransportError,
)
from .message import Address, Message, MultiPart, SimplePart
from .transport import SMTPTransport, Transport

logger = logging.getLogger(__name__)

TEXT_CONTENT_TYPE = "text/plain; charset=us-ascii"
HTML_CONTENT_TYPE = "text/html; charset=us-ascii"


class BodyState(enum.Enum):
    """Whether the body containers of the current message exist yet."""

    EMPTY = "empty"
    INITIALIZED = "initialized"


class MessageBuilder:
    """
    Fluent builder for multipart email messages.

    Mutating methods return the builder so calls can be chained. The
    body is a ``multipart/mixed`` container whose first child is a
    ``multipart/alternative`` container holding the text and HTML
    parts; attachments follow it as siblings. Both containers are
    created on the first call that adds a body part.

    After every delivery attempt the builder starts over with an empty
    message, so one builder can send many independent messages.

    The builder serializes access to its own state, but a message is
    meant to be built by one caller at a time.

    Example:
        >>> builder = MessageBuilder.from_file("~/.email/email-config.json")
        >>> (builder.from_("me@example.com", "Me")
        ...     .to("you@example.com", "You")
        ...     .subject("Hello")
        ...     .text_body("Hi there")
        ...     .attach("report.pdf")
        ...     .send())
    """

    def __init__(
        self,
        credentials: EmailCredentials,
        *,
        transport: Optional[Transport] = None,
        print_errors: bool = True,
        line_max_length: int = DEFAULT_LINE_LENGTH,
        config_path: Optional[str] = None
    ):
        """
        Initialize the builder.

        Args:
            credentials: SMTP account used for delivery
            transport: Delivery backend (default: SMTPTransport)
            print_errors: Also write errors to stderr
            line_max_length: Line width for base64 attachment content
            config_path: Credentials file the builder was loaded from

        Raises:
            ValueError: If line_max_length is not positive
        """
        if line_max_length <= 0:
            raise ValueError(
                f"Line length must be positive, got {line_max_length}"
            )

        self._credentials = credentials
        self._transport = transport if transport is not None else SMTPTransport()
        self._print_errors = print_errors
        self._line_max_length = line_max_length
        self.config_path = config_path
        self.last_error: Optional[Exception] = None

        self._lock = Lock()
        self._reset()

        logger.info(
            f"MessageBuilder initialized for {credentials.username} "
            f"({credentials.address})"
        )

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path] = DEFAULT_CONFIG_PATH,
        print_errors: bool = True,
        *,
        home: Optional[Union[str, Path]] = None,
        cwd: Optional[Union[str, Path]] = None,
        transport: Optional[Transport] = None
    ) -> "MessageBuilder":
        """
        Create a builder from a JSON credentials file.

        Args:
            path: Credentials file (absolute, ``~/``-relative or relative)
            print_errors: Also write errors to stderr
            home: Home directory used for ``~/`` paths
            cwd: Working directory used for relative paths
            transport: Delivery backend (default: SMTPTransport)

        Returns:
            MessageBuilder instance

        Raises:
            ConfigReadError: If the file is missing or unreadable
            ConfigFormatError: If the file content is invalid
        """
        try:
            credentials = load_credentials(path, home=home, cwd=cwd)
        except EmailBuilderError as e:
            if print_errors:
                print(e, file=sys.stderr)
            raise

        return cls(
            credentials,
            transport=transport,
            print_errors=print_errors,
            config_path=str(path),
        )

    @property
    def credentials(self) -> EmailCredentials:
        return self._credentials

    @property
    def message(self) -> Message:
        """The message under construction."""
        return self._message

    @property
    def body(self) -> Optional[MultiPart]:
        """The multipart/mixed body root, or None before any body part."""
        return self._mixed

    @property
    def body_state(self) -> BodyState:
        return self._body_state

    @property
    def line_max_length(self) -> int:
        return self._line_max_length

    @property
    def print_errors(self) -> bool:
        return self._print_errors

    def set_max_line_length(self, n: int) -> "MessageBuilder":
        """
        Set the line width used for base64 attachment content.

        The default is 500. Only attachments added afterwards use
        the new width.

        Raises:
            ValueError: If n is not positive
        """
        if n <= 0:
            raise ValueError(f"Line length must be positive, got {n}")

        with self._lock:
            self._line_max_length = n
        return self

    def set_print_errors(self, flag: bool) -> "MessageBuilder":
        """Choose whether errors are also written to stderr."""
        with self._lock:
            self._print_errors = flag
        return self

    def to(self, email: str, name: str = "") -> "MessageBuilder":
        """Add a destination address; may be called more than once."""
        with self._lock:
            self._message.add_to(Address(email, name))
        return self

    def cc(self, email: str, name: str = "") -> "MessageBuilder":
        """Add a CC address; may be called more than once."""
        with self._lock:
            self._message.add_cc(Address(email, name))
        return self

    def bcc(self, email: str, name: str = "") -> "MessageBuilder":
        """Add a BCC address; may be called more than once."""
        with self._lock:
            self._message.add_bcc(Address(email, name))
        return self

    def from_(self, email: str, name: str = "") -> "MessageBuilder":
        """Set the sender of the message."""
        with self._lock:
            self._message.from_ = Address(email, name)
        return self

    sender = from_

    def subject(self, text: str) -> "MessageBuilder":
        with self._lock:
            self._message.subject = text
        return self

    def text_body(self, text: str) -> "MessageBuilder":
        """Add a plain text rendering of the body."""
        return self._add_alternative(TEXT_CONTENT_TYPE, text)

    def html_body(self, html: str) -> "MessageBuilder":
        """Add an HTML rendering of the body."""
        return self._add_alternative(HTML_CONTENT_TYPE, html)

    def attach(self, path: Union[str, Path]) -> "MessageBuilder":
        """
        Attach a file to the message.

        The path may be relative. The name sent in the message is the
        base file name.

        Raises:
            AttachmentReadError: If the file cannot be read
        """
        with self._lock:
            try:
                part = build_attachment(path, self._line_max_length)
            except EmailBuilderError as e:
                self._record_error(e)
                raise

            self._ensure_containers()
            self._mixed.add_part(part)
            logger.debug(f"Attachment added: {Path(path).name}")
        return self

    def recipients(self) -> list[str]:
        """Flattened recipient list (to + cc + bcc) of the current message."""
        with self._lock:
            return self._message.recipients()

    def send(self) -> None:
        """
        Send the message. This is the last call of a chain.

        Raises:
            NoBodyError: If no text, HTML or attachment was added
            MessageFormatError: If the message cannot be serialized
            TransportError: If delivery fails
        """
        with self._lock:
            if self._body_state is BodyState.EMPTY:
                error = NoBodyError()
                self._record_error(error)
                raise error

            message = self._message
            message.set_body(self._mixed)
            from_addr = message.from_.email if message.from_ else ""
            recipients = message.recipients()
            address = self._credentials.address

            logger.info(
                f"Sending email from {from_addr} to "
                f"{len(recipients)} recipient(s): {message.subject[:50]}"
            )

            # A message that cannot be serialized is kept for correction.
            try:
                payload = message.as_bytes()
            except (UnicodeError, MessageError, ValueError) as e:
                error = MessageFormatError(str(e))
                self._record_error(error)
                raise error from e

            try:
                self._transport.send(
                    address,
                    self._credentials,
                    from_addr,
                    recipients,
                    payload,
                )
            except Exception as e:
                logger.error(f"Failed to send email: {e}", exc_info=True)
                error = TransportError(str(e), address)
                self._record_error(error)
                raise error from e
            finally:
                self._reset()

            self.last_error = None
            logger.info("Email sent successfully")

    def _add_alternative(self, content_type: str, content: str) -> "MessageBuilder":
        with self._lock:
            self._ensure_containers()

            part = SimplePart()
            part.add_header("Content-Type", content_type)
            part.content = content
            self._alt.add_part(part)
            logger.debug(f"Body part added: {content_type}")
        return self

    def _ensure_containers(self) -> None:
        if self._body_state is BodyState.EMPTY:
            self._alt = MultiPart("multipart/alternative")
            self._mixed = MultiPart("multipart/mixed")
            self._mixed.add_part(self._alt)
            self._body_state = BodyState.INITIALIZED

    def _reset(self) -> None:
        # Message and containers always start over together.
        self._message = Message()
        self._alt: Optional[MultiPart] = None
        self._mixed: Optional[MultiPart] = None
        self._body_state = BodyState.EMPTY

    def _record_error(self, error: Exception) -> None:
        self.last_error = error
        if self._print_errors:
            print(error, file=sys.stderr)
