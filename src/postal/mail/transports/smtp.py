"""SMTP transport with PLAIN authentication.

The transport opens one connection per send: EHLO, STARTTLS when the server
advertises it, ``AUTH PLAIN`` when credentials are given, then the envelope
and ``DATA``. Credentials are refused on a connection without TLS unless the
server is on the local machine. No timeout is applied unless one is passed
explicitly.

Examples:
    >>> credentials = PlainCredentials("", "user", "secret", "smtp.example.com")
    >>> transport = SMTPTransport("smtp.example.com", 587, credentials)
    >>> transport.send("me@example.com", ["you@example.com"], b"...")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from postal.logging import TRACE_LEVEL
from postal.mail.exceptions import MailConfigurationError, MailTransportError
from postal.mail.transport import MailTransport

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["PlainCredentials", "SMTPTransport"]

log = logging.getLogger(__name__)

# PLAIN may go out unencrypted only to these hosts
_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


@dataclass(frozen=True, slots=True)
class PlainCredentials:
    """Credentials for the SMTP ``AUTH PLAIN`` mechanism.

    Attributes:
        identity: Authorization identity, usually empty to act as *username*.
        username: Authentication identity.
        password: Password for *username*.
        host: Server the credentials are meant for. The transport refuses to
            present them to any other host.
    """

    identity: str
    username: str
    password: str = field(repr=False)
    host: str

    def initial_response(self) -> str:
        """Return the PLAIN message ``identity NUL username NUL password``.

        Examples:
            >>> PlainCredentials("", "user", "pass", "smtp.example.com").initial_response()
            '\\x00user\\x00pass'
        """
        return f"{self.identity}\0{self.username}\0{self.password}"


class SMTPTransport(MailTransport):
    """Synchronous SMTP transport built on :mod:`smtplib`.

    Args:
        host: SMTP server hostname.
        port: SMTP server port.
        credentials: PLAIN credentials, or ``None`` to skip authentication.
        timeout: Socket timeout in seconds, ``None`` to block indefinitely.

    Raises:
        MailConfigurationError: If *host* is empty or *port* is out of range.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        credentials: PlainCredentials | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        if not host:
            raise MailConfigurationError("SMTP host is required")
        if not 0 < port < 65536:
            raise MailConfigurationError(f"SMTP port out of range: {port}")
        if timeout is not None and timeout <= 0:
            raise MailConfigurationError("Timeout must be greater than 0")

        self._host = host
        self._port = port
        self._credentials = credentials
        self._timeout = timeout

    @property
    def host_port(self) -> str:
        """Return ``host:port``."""
        return f"{self._host}:{self._port}"

    def send(self, sender: str, recipients: Sequence[str], content: bytes) -> None:
        """Deliver *content* through the configured SMTP server.

        Credentials are only presented over TLS, or in clear text to a
        server on the local machine.

        Raises:
            MailTransportError: If connecting, authenticating or sending
                fails. The original error is chained.
        """
        trace_enabled = log.isEnabledFor(TRACE_LEVEL)
        if trace_enabled:
            log.log(TRACE_LEVEL, "[SMTP] Connecting to %s", self.host_port)

        try:
            with smtplib.SMTP(host=self._host, port=self._port, timeout=self._timeout) as client:
                client.ehlo()
                tls = False
                if client.has_extn("STARTTLS"):
                    if trace_enabled:
                        log.log(TRACE_LEVEL, "[SMTP] Upgrading connection with STARTTLS")
                    client.starttls(context=ssl.create_default_context())
                    client.ehlo()
                    tls = True

                if self._credentials is not None:
                    self._authenticate(client, self._credentials, tls=tls, trace_enabled=trace_enabled)

                if trace_enabled:
                    log.log(TRACE_LEVEL, "[SMTP] MAIL FROM: %s", sender)
                    log.log(TRACE_LEVEL, "[SMTP] RCPT TO: %s", ", ".join(recipients))
                client.sendmail(sender, list(recipients), content)
        except (smtplib.SMTPException, OSError, UnicodeError) as exc:
            log.error("SMTP delivery to %s failed: %s", self.host_port, exc)
            raise MailTransportError(str(exc)) from exc

        if trace_enabled:
            log.log(TRACE_LEVEL, "[SMTP] Message sent successfully")

    def _authenticate(
        self,
        client: smtplib.SMTP,
        credentials: PlainCredentials,
        *,
        tls: bool,
        trace_enabled: bool,
    ) -> None:
        if not tls and self._host not in _LOCAL_HOSTS:
            raise MailTransportError("unencrypted connection")
        if credentials.host != self._host:
            raise MailTransportError(f"Credentials for {credentials.host!r} refused for server {self._host!r}")

        if trace_enabled:
            log.log(TRACE_LEVEL, "[SMTP] Authenticating as: %s", credentials.username)

        def plain(challenge: bytes | None = None) -> str:  # pylint: disable=unused-argument
            return credentials.initial_response()

        client.auth("PLAIN", plain)
        if trace_enabled:
            log.log(TRACE_LEVEL, "[SMTP] Authentication successful")
