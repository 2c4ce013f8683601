"""Tests for the message data model."""

from __future__ import annotations

import email
from email.header import decode_header

import pytest

from email_builder import Address, Message, MultiPart, SimplePart


def _text_part(content: str) -> SimplePart:
    return SimplePart({"Content-Type": "text/plain; charset=us-ascii"}, content)


class TestAddress:
    def test_format_with_name(self) -> None:
        assert Address("a@x.com", "Alice").format() == "Alice <a@x.com>"

    def test_format_without_name(self) -> None:
        assert Address("a@x.com").format() == "a@x.com"

    def test_format_non_ascii_name(self) -> None:
        formatted = Address("a@x.com", "Zoë").format()
        assert formatted.startswith("=?utf-8?")
        assert formatted.endswith("<a@x.com>")


class TestMultiPart:
    def test_rejects_non_multipart_type(self) -> None:
        with pytest.raises(ValueError):
            MultiPart("text/plain")

    def test_keeps_part_order(self) -> None:
        container = MultiPart("multipart/alternative")
        first, second = _text_part("1"), _text_part("2")
        container.add_part(first)
        container.add_part(second)
        assert container.parts == [first, second]


class TestMessage:
    def test_recipients_flattened_in_order(self) -> None:
        message = Message()
        message.add_cc(Address("c@x.com"))
        message.add_to(Address("a@x.com"))
        message.add_bcc(Address("d@x.com"))
        message.add_to(Address("b@x.com"))
        assert message.recipients() == ["a@x.com", "b@x.com", "c@x.com", "d@x.com"]

    def test_to_mime_requires_body(self) -> None:
        with pytest.raises(ValueError):
            Message().to_mime()

    def test_serializes_tree(self) -> None:
        alternative = MultiPart("multipart/alternative", [_text_part("hello")])
        mixed = MultiPart("multipart/mixed", [alternative])
        message = Message(from_=Address("a@x.com", "A"), subject="Hi", body=mixed)
        message.add_to(Address("b@x.com", "B"))

        parsed = email.message_from_bytes(message.as_bytes())

        assert parsed.get_content_type() == "multipart/mixed"
        assert parsed["From"] == "A <a@x.com>"
        assert parsed["To"] == "B <b@x.com>"
        assert parsed["Subject"] == "Hi"
        inner = parsed.get_payload()[0]
        assert inner.get_content_type() == "multipart/alternative"
        leaf = inner.get_payload()[0]
        assert leaf["Content-Type"] == "text/plain; charset=us-ascii"
        assert leaf.get_payload() == "hello"

    def test_non_ascii_subject_is_encoded(self) -> None:
        body = MultiPart("multipart/mixed", [_text_part("x")])
        raw = Message(subject="Café", body=body).as_bytes()

        assert b"Caf\xc3\xa9" not in raw
        header = decode_header(email.message_from_bytes(raw)["Subject"])
        assert header[0][0].decode(header[0][1]) == "Café"

    def test_uses_crlf(self) -> None:
        body = MultiPart("multipart/mixed", [_text_part("line1\nline2")])
        raw = Message(body=body).as_bytes()
        assert b"line1\r\nline2" in raw
        assert b"\n" not in raw.replace(b"\r\n", b"")

    def test_message_id_without_sender(self) -> None:
        body = MultiPart("multipart/mixed", [_text_part("x")])
        parsed = email.message_from_bytes(Message(body=body).as_bytes())
        assert parsed["Message-ID"].endswith("@localhost>")
        assert parsed["From"] is None

    def test_bytes_content(self) -> None:
        part = SimplePart({"Content-Type": "application/octet-stream"}, b"QUJD")
        body = MultiPart("multipart/mixed", [part])
        assert b"QUJD" in Message(body=body).as_bytes()

    @pytest.mark.parametrize(
        "message",
        [
            Message(subject="Hi\nBcc: evil@x.com"),
            Message(subject="Hi\r"),
            Message(from_=Address("a@x.com", "A\nX-Evil: 1")),
            Message(to=[Address("b@x.com\r\nX-Evil: 1")]),
            Message(bcc=[Address("d@x.com\n")]),
        ],
    )
    def test_rejects_line_breaks_in_headers(self, message: Message) -> None:
        message.set_body(MultiPart("multipart/mixed", [_text_part("x")]))
        with pytest.raises(ValueError, match="line break"):
            message.as_bytes()

    def test_rejects_non_ascii_address(self) -> None:
        body = MultiPart("multipart/mixed", [_text_part("x")])
        message = Message(to=[Address("jos\N{LATIN SMALL LETTER E WITH ACUTE}@x.com")], body=body)
        with pytest.raises(UnicodeEncodeError):
            message.as_bytes()
