"""Email sending module using SMTP."""

import logging
import smtplib
import ssl
from typing import Optional, Protocol

from .credentials import EmailCredentials

logger = logging.getLogger(__name__)

SMTPS_PORT = 465

LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


class Transport(Protocol):
    """Anything that can deliver a serialized message."""

    def send(
        self,
        address: str,
        credentials: EmailCredentials,
        from_addr: str,
        recipients: list[str],
        message: bytes,
    ) -> None:
        ...


class SMTPTransport:
    """
    Email transport using SMTP protocol.

    Each call to send() opens a connection, authenticates with the
    account username and password, delivers the message and quits.
    The call blocks for the whole round trip.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        use_ssl: Optional[bool] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ):
        """
        Initialize the SMTP transport.

        Args:
            timeout: Socket timeout in seconds (default: none)
            use_ssl: Use implicit TLS (SMTP_SSL). When None, implicit
                     TLS is used for port 465 and STARTTLS otherwise.
            ssl_context: TLS context (default: system defaults)
        """
        if timeout is not None and timeout <= 0:
            raise ValueError("Timeout must be greater than 0")

        self.timeout = timeout
        self.use_ssl = use_ssl
        self.ssl_context = ssl_context

    def send(
        self,
        address: str,
        credentials: EmailCredentials,
        from_addr: str,
        recipients: list[str],
        message: bytes,
    ) -> None:
        """
        Send a message via SMTP server.

        Args:
            address: Server address in ``host:port`` form
            credentials: Account used to authenticate
            from_addr: Envelope sender
            recipients: Envelope recipients (to + cc + bcc)
            message: Serialized message

        Raises:
            smtplib.SMTPNotSupportedError: If the connection is not
                encrypted and the server is not the local host
            smtplib.SMTPException: If the server rejects the message
            OSError: If connection fails
        """
        host, port = self._split_address(address)
        context = self.ssl_context or ssl.create_default_context()

        use_ssl = self.use_ssl
        if use_ssl is None:
            use_ssl = port == SMTPS_PORT

        logger.debug(f"Connecting to SMTP server: {host}:{port}")

        kwargs = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        if use_ssl:
            logger.debug("Using SMTP_SSL")
            server = smtplib.SMTP_SSL(host, port, context=context, **kwargs)
        else:
            server = smtplib.SMTP(host, port, **kwargs)

        try:
            logger.debug("SMTP connection established")

            encrypted = use_ssl
            if not use_ssl:
                server.ehlo()
                if server.has_extn("starttls"):
                    logger.debug("Upgrading connection with STARTTLS")
                    server.starttls(context=context)
                    server.ehlo()
                    encrypted = True

            # Credentials only travel over TLS, except to the local host.
            if not encrypted and host not in LOCAL_HOSTS:
                raise smtplib.SMTPNotSupportedError(
                    f"{host} does not support STARTTLS; refusing to send "
                    f"credentials over an unencrypted connection"
                )

            server.login(credentials.username, credentials.password)
            logger.debug("SMTP authentication successful")

            server.sendmail(from_addr, recipients, message)
            logger.debug(f"Email sent to {len(recipients)} recipient(s)")
        finally:
            try:
                server.quit()
            except (smtplib.SMTPException, OSError) as e:
                logger.debug(f"SMTP quit failed: {e}")
            logger.debug("SMTP connection closed")

    @staticmethod
    def _split_address(address: str) -> tuple[str, int]:
        host, sep, port = address.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"Invalid server address: {address}")
        return host, int(port)
