"""Shared pytest fixtures for the email-builder test suite."""

from __future__ import annotations

import email
from email.message import Message as MIMEMessage
from typing import Any

import pytest

from email_builder import EmailCredentials, MessageBuilder

# pylint: disable=redefined-outer-name


class FakeTransport:
    """In-memory transport used for assertions in tests."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []

    def send(
        self,
        address: str,
        credentials: EmailCredentials,
        from_addr: str,
        recipients: list[str],
        message: bytes,
    ) -> None:
        """Store the call arguments in the sent list."""
        self.sent.append(
            {
                "address": address,
                "credentials": credentials,
                "from_addr": from_addr,
                "recipients": recipients,
                "message": message,
            }
        )

    @property
    def last_mime(self) -> MIMEMessage:
        """Parse the last delivered message."""
        return email.message_from_bytes(self.sent[-1]["message"])


class ErrorTransport:
    """Transport double that raises on send."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or ConnectionRefusedError("connection refused")
        self.calls = 0

    def send(self, *args: Any) -> None:
        """Raise the configured error unconditionally."""
        self.calls += 1
        raise self.error


@pytest.fixture
def credentials() -> EmailCredentials:
    """Provide credentials pointing at a fake server."""
    return EmailCredentials(
        username="user",
        password="pass",
        server="smtp.example.com",
        port=587,
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def builder(credentials: EmailCredentials, transport: FakeTransport) -> MessageBuilder:
    """Provide a quiet builder wired to the in-memory transport."""
    return MessageBuilder(credentials, transport=transport, print_errors=False)


def text_payloads(message: MIMEMessage, content_type: str) -> list[str]:
    """Return the payloads of all leaves with the given content type."""
    return [
        part.get_payload()
        for part in message.walk()
        if not part.is_multipart() and part.get_content_type() == content_type
    ]
