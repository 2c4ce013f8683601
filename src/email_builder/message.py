"""Email message data structure module."""

import email.message
import uuid
from dataclasses import dataclass, field
from email import policy
from email.header import Header
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr, formatdate
from typing import Optional, Union

# Serialized messages use CRLF line endings as SMTP expects.
SMTP_POLICY = policy.compat32.clone(linesep="\r\n")


@dataclass(frozen=True)
class Address:
    """
    Email address with an optional display name.

    Attributes:
        email: Address (e.g., "user@example.com")
        name: Display name (e.g., "User Name")
    """

    email: str
    name: str = ""

    def format(self) -> str:
        """
        Format the address for a message header.

        Returns:
            ``"Name <email>"``, or the bare address when there is no name
        """
        return formataddr((self.name, self.email))


@dataclass
class SimplePart:
    """
    Leaf body part: a set of headers and the raw content.

    Attributes:
        headers: Header name to value, written in insertion order
        content: Part content, already encoded for the wire
    """

    headers: dict[str, str] = field(default_factory=dict)
    content: Union[str, bytes] = ""

    def add_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def to_mime(self) -> email.message.Message:
        part = email.message.Message()
        for name, value in self.headers.items():
            part[name] = value

        content = self.content
        if isinstance(content, bytes):
            content = content.decode("ascii", "surrogateescape")
        part.set_payload(content)
        return part


@dataclass
class MultiPart:
    """
    Container body part holding an ordered list of children.

    Attributes:
        subtype: Full MIME type (e.g., "multipart/mixed")
        parts: Child parts in order
    """

    subtype: str
    parts: list[Union["SimplePart", "MultiPart"]] = field(
        default_factory=list
    )

    def __post_init__(self):
        """Validate the container type after initialization."""
        if not self.subtype.startswith("multipart/"):
            raise ValueError(f"Invalid multipart type: {self.subtype}")

    def add_part(self, part: Union["SimplePart", "MultiPart"]) -> None:
        self.parts.append(part)

    def to_mime(self) -> MIMEMultipart:
        container = MIMEMultipart(self.subtype.split("/", 1)[1])
        for part in self.parts:
            container.attach(part.to_mime())
        return container


BodyPart = Union[SimplePart, MultiPart]


@dataclass
class Message:
    """
    Email message under construction.

    Attributes:
        from_: Sender address (optional until sent)
        to: List of recipient addresses
        cc: List of CC recipients
        bcc: List of BCC recipients (never written to the headers)
        subject: Email subject line
        body: Root body part, set right before sending
    """

    from_: Optional[Address] = None
    to: list[Address] = field(default_factory=list)
    cc: list[Address] = field(default_factory=list)
    bcc: list[Address] = field(default_factory=list)
    subject: str = ""
    body: Optional[BodyPart] = None

    def add_to(self, address: Address) -> None:
        self.to.append(address)

    def add_cc(self, address: Address) -> None:
        self.cc.append(address)

    def add_bcc(self, address: Address) -> None:
        self.bcc.append(address)

    def set_body(self, body: BodyPart) -> None:
        self.body = body

    def recipients(self) -> list[str]:
        """
        Get all recipients (to + cc + bcc).

        Returns:
            Combined list of recipient email addresses, in call order
        """
        return [a.email for a in self.to + self.cc + self.bcc]

    def to_mime(self) -> email.message.Message:
        """
        Build the MIME tree for this message.

        Returns:
            Message ready to be serialized

        Raises:
            ValueError: If the message has no body or a header value
                        contains a line break
            UnicodeEncodeError: If an address is not ASCII
        """
        if self.body is None:
            raise ValueError("Message has no body")

        self._check_line_breaks()

        msg = self.body.to_mime()

        if self.from_ is not None:
            msg["From"] = self.from_.format()
        if self.to:
            msg["To"] = ", ".join(a.format() for a in self.to)
        if self.cc:
            msg["Cc"] = ", ".join(a.format() for a in self.cc)

        if self.subject.isascii():
            msg["Subject"] = self.subject
        else:
            msg["Subject"] = Header(self.subject, "utf-8")

        msg["Date"] = formatdate(localtime=True)
        msg["Message-ID"] = self._generate_message_id()

        if "MIME-Version" not in msg:
            msg["MIME-Version"] = "1.0"
        return msg

    def as_bytes(self) -> bytes:
        """
        Serialize the message for SMTP delivery.

        Returns:
            Message bytes with CRLF line endings
        """
        text = self.to_mime().as_string(policy=SMTP_POLICY)
        return text.encode("utf-8", "surrogateescape")

    def _check_line_breaks(self) -> None:
        values = [("Subject", self.subject)]
        addresses = [self.from_] if self.from_ is not None else []
        addresses += self.to + self.cc + self.bcc
        for address in addresses:
            values.append(("address", address.email))
            values.append(("address", address.name))

        for name, value in values:
            if "\r" in value or "\n" in value:
                raise ValueError(f"{name} contains a line break: {value!r}")

    def _generate_message_id(self) -> str:
        """
        Generate a unique Message-ID.

        Returns:
            Message-ID string in standard format
        """
        domain = "localhost"
        if self.from_ is not None and "@" in self.from_.email:
            domain = self.from_.email.rsplit("@", 1)[1]

        return f"<{uuid.uuid4()}@{domain}>"
