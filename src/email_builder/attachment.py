"""Attachment encoding module."""

import base64
import logging
import mimetypes
from pathlib import Path
from typing import Union

from .errors import AttachmentReadError
from .message import SimplePart

logger = logging.getLogger(__name__)

DEFAULT_LINE_LENGTH = 500
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def wrap_lines(encoded: str, width: int) -> str:
    """
    Split encoded content into fixed-width lines.

    Every full line of ``width`` characters is followed by a newline;
    the remainder is appended as is. A non-positive width leaves the
    content unwrapped.

    Args:
        encoded: Content to wrap
        width: Line width in characters

    Returns:
        Wrapped content
    """
    if width <= 0:
        return encoded

    full_lines = len(encoded) // width
    lines = [
        encoded[i * width:(i + 1) * width] + "\n"
        for i in range(full_lines)
    ]
    lines.append(encoded[full_lines * width:])
    return "".join(lines)


def encode_content(data: bytes, width: int = DEFAULT_LINE_LENGTH) -> str:
    """Base64 encode ``data`` and wrap it at ``width`` columns."""
    return wrap_lines(base64.b64encode(data).decode("ascii"), width)


def guess_content_type(path: Union[str, Path]) -> str:
    """
    Look up the content type for a file from its extension.

    Args:
        path: File path

    Returns:
        MIME type, ``application/octet-stream`` when unknown
    """
    content_type, _ = mimetypes.guess_type(str(path), strict=False)
    return content_type or DEFAULT_CONTENT_TYPE


def build_attachment(
    path: Union[str, Path],
    width: int = DEFAULT_LINE_LENGTH
) -> SimplePart:
    """
    Read a file and build its attachment part.

    The name sent in the message is the base file name.

    Args:
        path: File to attach
        width: Line width for the base64 content

    Returns:
        SimplePart with base64 content and attachment headers

    Raises:
        AttachmentReadError: If the file cannot be read
    """
    path = Path(path)

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise AttachmentReadError(str(path), str(e)) from e

    content_type = guess_content_type(path)
    logger.debug(
        f"Encoding attachment {path.name} ({len(data)} bytes, "
        f"{content_type})"
    )

    part = SimplePart()
    part.add_header("Content-Type", content_type)
    part.add_header("Content-Transfer-Encoding", "base64")
    part.add_header(
        "Content-Disposition",
        f'attachment; filename="{_quote(path.name)}"'
    )
    part.content = encode_content(data, width)
    return part


def _quote(name: str) -> str:
    return name.replace("\\", "\\\\").replace('"', '\\"')
