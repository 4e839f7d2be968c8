"""Mail sender holding SMTP connection settings.

Examples:
    Generic server::

        sender = MailSender("", "user", "secret", "smtp.example.com", 587)
        sender.send_mail("you@example.com", "me@example.com", "Hi", "Hello!")

    Provider preset::

        sender = MailSender.gmail("me@gmail.com", "app-password")

    From ``postal.conf.yml``::

        sender = MailSender.from_config()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from postal.mail.exceptions import MailConfigurationError
from postal.mail.message import Message, create_message
from postal.mail.transports.smtp import PlainCredentials, SMTPTransport

if TYPE_CHECKING:
    from postal.mail.transport import MailTransport

__all__ = ["PROVIDERS", "MailSender", "MailerConfig"]

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MailerConfig:
    """SMTP connection settings.

    Attributes:
        identity: PLAIN authorization identity, may be empty.
        username: Account name.
        password: Account password.
        host: SMTP server hostname.
        port: SMTP server port.

    Raises:
        MailConfigurationError: If *host* is empty or *port* is not a valid
            TCP port.

    Examples:
        >>> MailerConfig("", "user", "secret", "smtp.example.com", 587).host_port
        'smtp.example.com:587'
    """

    identity: str
    username: str
    password: str = field(repr=False)
    host: str
    port: int

    def __post_init__(self) -> None:
        """Validate host and port."""
        if not self.host:
            raise MailConfigurationError("SMTP host is required")
        if isinstance(self.port, bool) or not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise MailConfigurationError(f"SMTP port must be an integer between 1 and 65535, got {self.port!r}")

    @property
    def host_port(self) -> str:
        """Return ``host:port``."""
        return f"{self.host}:{self.port}"

    def credentials(self) -> PlainCredentials:
        """Return the PLAIN credentials bound to :attr:`host`."""
        return PlainCredentials(self.identity, self.username, self.password, self.host)


# Provider endpoints, (host, port). Keep in sync with the providers' documentation.
PROVIDERS: dict[str, tuple[str, int]] = {
    "gmail": ("smtp.gmail.com", 587),
    "sendgrid": ("smtp.sendgrid.net", 25),
}


class MailSender:
    """Send :class:`~postal.mail.message.Message` objects over SMTP.

    Each send is independent and blocking; nothing is retried.

    Args:
        identity: PLAIN authorization identity, may be empty.
        username: Account name.
        password: Account password.
        host: SMTP server hostname.
        port: SMTP server port.
        transport: Transport override. By default an
            :class:`~postal.mail.transports.SMTPTransport` is created for
            every send from the settings above.
    """

    def __init__(
        self,
        identity: str,
        username: str,
        password: str,
        host: str,
        port: int,
        *,
        transport: MailTransport | None = None,
    ) -> None:
        self._config = MailerConfig(identity, username, password, host, port)
        self._transport = transport

    @classmethod
    def from_mailer_config(cls, config: MailerConfig, *, transport: MailTransport | None = None) -> MailSender:
        """Create a sender from an existing :class:`MailerConfig`."""
        return cls(
            config.identity,
            config.username,
            config.password,
            config.host,
            config.port,
            transport=transport,
        )

    @classmethod
    def for_provider(
        cls,
        provider: str,
        username: str,
        password: str,
        *,
        transport: MailTransport | None = None,
    ) -> MailSender:
        """Create a sender for a well-known provider listed in :data:`PROVIDERS`.

        Raises:
            MailConfigurationError: If *provider* is unknown.
        """
        try:
            host, port = PROVIDERS[provider.lower()]
        except KeyError:
            available = ", ".join(sorted(PROVIDERS))
            raise MailConfigurationError(f"Unknown mail provider {provider!r}. Available: {available}") from None
        return cls("", username, password, host, port, transport=transport)

    @classmethod
    def gmail(cls, username: str, password: str, *, transport: MailTransport | None = None) -> MailSender:
        """Create a sender for Gmail (``smtp.gmail.com:587``)."""
        return cls.for_provider("gmail", username, password, transport=transport)

    @classmethod
    def sendgrid(cls, username: str, password: str, *, transport: MailTransport | None = None) -> MailSender:
        """Create a sender for SendGrid (``smtp.sendgrid.net:25``)."""
        return cls.for_provider("sendgrid", username, password, transport=transport)

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any] | None = None,
        *,
        section: str = "mailer",
        transport: MailTransport | None = None,
    ) -> MailSender:
        """Create a sender from the ``mailer`` section of the configuration.

        The section either names a ``provider`` preset or lists ``host`` and
        ``port``; ``username``, ``password`` and ``identity`` are read in both
        cases.

        Args:
            config: Loaded configuration. Defaults to
                :func:`postal.config.get_config`.
            section: Top-level key holding the mailer settings.
            transport: Transport override.

        Raises:
            MailConfigurationError: If the section is missing or incomplete.
        """
        if config is None:
            from postal.config import get_config  # pylint: disable=import-outside-toplevel

            config = get_config()

        raw = config.get(section)
        if not isinstance(raw, Mapping):
            raise MailConfigurationError(f"Configuration section {section!r} is missing or not a mapping")

        identity = str(raw.get("identity") or "")
        username = str(raw.get("username") or "")
        password = str(raw.get("password") or "")
        provider = raw.get("provider")
        if provider:
            preset = cls.for_provider(str(provider), username, password)
            return cls(identity, username, password, preset.config.host, preset.config.port, transport=transport)

        missing = [key for key in ("host", "port") if raw.get(key) in (None, "")]
        if missing:
            raise MailConfigurationError(f"Configuration section {section!r} is missing: {', '.join(missing)}")
        try:
            port = int(raw["port"])
        except (TypeError, ValueError):
            raise MailConfigurationError(f"Invalid port in section {section!r}: {raw['port']!r}") from None

        return cls(identity, username, password, str(raw["host"]), port, transport=transport)

    @property
    def config(self) -> MailerConfig:
        """Return the connection settings."""
        return self._config

    def _resolve_transport(self) -> MailTransport:
        if self._transport is not None:
            return self._transport
        return SMTPTransport(self._config.host, self._config.port, self._config.credentials())

    def send_mail(self, to: str, sender: str, subject: str, text_body: str = "", html_body: str = "") -> Message:
        """Build a message with :func:`create_message` and send it.

        Returns:
            The message that was sent.

        Raises:
            AddressParseError: If *to* or *sender* is malformed.
            MailValidationError: If the message is incomplete.
            MailTransportError: If delivery fails.
        """
        message = create_message(to, sender, subject, text_body, html_body)
        self.send(message)
        return message

    def send(self, message: Message) -> None:
        """Validate, serialize and deliver *message*.

        Only the ``to`` mailboxes are passed to the server as envelope
        recipients; cc/bcc addresses appear in the headers only.

        Raises:
            MailValidationError: If the message is incomplete.
            MailTransportError: If delivery fails.
        """
        message.validate()

        content = message.as_bytes()
        recipients = message.recipients()
        log.info("Sending message to %s via %s", ", ".join(recipients), self._config.host_port)

        self._resolve_transport().send(message.sender.address, recipients, content)
        log.debug("Message delivered to %d recipient(s)", len(recipients))
