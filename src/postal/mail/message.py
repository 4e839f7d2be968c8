"""Message model and MIME serialization.

A :class:`Message` is created from raw strings with :func:`create_message`,
can be mutated freely (extra recipients, custom headers) and is only
validated right before it is serialized for sending.

Serialization writes the headers and body by hand so the byte layout stays
stable: ``To``, ``From``, the recipient copy lines, custom headers,
``Subject``, ``Date`` and then either a single text/HTML part or a
``multipart/alternative`` body when both are present.

Two legacy behaviours are kept on purpose:

- the ``cc`` list is written under a ``BCC:`` label and the ``bcc`` list
  under ``CC:``;
- only ``to`` addresses are used as envelope recipients, cc/bcc addresses are
  shown in the headers but never handed to the SMTP server.
"""

from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from postal.mail.address import Address, parse_address
from postal.mail.exceptions import (
    AddressParseError,
    EmptyContentError,
    EmptySubjectError,
    MailValidationError,
    MissingRecipientError,
    MissingSenderError,
)

__all__ = ["CRLF", "Message", "RecipientKind", "create_message", "format_date", "new_boundary"]

log = logging.getLogger(__name__)

CRLF = "\r\n"

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
# RFC 5322 field name: printable ASCII except colon
_HEADER_NAME_PATTERN = re.compile(r"^[\x21-\x39\x3b-\x7e]+$")


class RecipientKind(str, Enum):
    """Which recipient list an address is appended to."""

    TO = "to"
    CC = "cc"
    BCC = "bcc"


def format_date(moment: datetime | None = None) -> str:
    """Format a timestamp in the RFC 822 layout ``02 Jan 06 15:04 UTC``.

    Month names are fixed English abbreviations regardless of locale.

    Examples:
        >>> format_date(datetime(2013, 5, 24, 16, 32, tzinfo=timezone.utc))
        '24 May 13 16:32 UTC'
    """
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return f"{moment.day:02d} {_MONTHS[moment.month - 1]} {moment:%y %H:%M} UTC"


def new_boundary() -> str:
    """Return a fresh multipart boundary: 32 lowercase hex characters."""
    return secrets.token_hex(16)


def _address_list(addresses: list[Address]) -> str:
    return ",".join(str(address) for address in addresses)


@dataclass
class Message:
    """An email ready to be validated and serialized.

    Attributes:
        sender: The ``From`` address.
        to: Primary recipients, also used as envelope recipients.
        subject: Subject line.
        text_body: Plain text body, may be empty.
        html_body: HTML body, may be empty.
        is_text: Whether a text part is rendered.
        is_html: Whether an HTML part is rendered.
        cc: Copy recipients (header only).
        bcc: Blind copy recipients (header only).
        headers: Custom headers, written in insertion order. Names that
            collide with generated headers are written as extra lines, so
            readers usually keep the generated value.
    """

    sender: Address
    to: list[Address]
    subject: str
    text_body: str = ""
    html_body: str = ""
    is_text: bool = False
    is_html: bool = False
    cc: list[Address] = field(default_factory=list)
    bcc: list[Address] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)

    def add_recipient(self, address: str, kind: RecipientKind | str = RecipientKind.TO) -> bool:
        """Parse *address* and append it to the list selected by *kind*.

        Unparseable addresses are dropped without raising, unlike
        :func:`create_message`.

        Returns:
            ``True`` if the address was appended, ``False`` if it was dropped.
        """
        kind = RecipientKind(kind)
        try:
            parsed = parse_address(address)
        except AddressParseError as exc:
            log.warning("Dropping %s recipient: %s", kind.value, exc)
            return False

        getattr(self, kind.value).append(parsed)
        return True

    def add_to(self, address: str) -> bool:
        """Append a ``To`` recipient, see :meth:`add_recipient`."""
        return self.add_recipient(address, RecipientKind.TO)

    def add_cc(self, address: str) -> bool:
        """Append a copy recipient, see :meth:`add_recipient`."""
        return self.add_recipient(address, RecipientKind.CC)

    def add_bcc(self, address: str) -> bool:
        """Append a blind copy recipient, see :meth:`add_recipient`."""
        return self.add_recipient(address, RecipientKind.BCC)

    def add_header(self, name: str, value: str) -> None:
        """Set a custom header, replacing any previous value for *name*.

        Raises:
            MailValidationError: If *name* is not a valid field name or
                either part contains a line break.
        """
        if not _HEADER_NAME_PATTERN.match(name):
            raise MailValidationError(f"Invalid header name: {name!r}")
        if "\r" in value or "\n" in value:
            raise MailValidationError(f"Header {name!r} value must not contain line breaks")
        self.headers[name] = value

    def validate(self) -> None:
        """Check the message can be sent.

        Checks run in a fixed order and the first failure is raised.

        Raises:
            MissingRecipientError: No ``to`` address.
            MissingSenderError: Sender is missing or has an empty mailbox.
            EmptySubjectError: Subject is empty.
            MailValidationError: Subject contains a line break.
            EmptyContentError: Both bodies are empty.
        """
        if not self.to:
            raise MissingRecipientError()
        if self.sender is None or not self.sender.address:
            raise MissingSenderError()
        if not self.subject:
            raise EmptySubjectError()
        if "\r" in self.subject or "\n" in self.subject:
            raise MailValidationError("Subject must not contain line breaks")
        if not self.text_body and not self.html_body:
            raise EmptyContentError()

    def recipients(self) -> list[str]:
        """Return the envelope recipients: the ``to`` mailboxes only."""
        return [address.address for address in self.to]

    def as_string(self) -> str:
        """Render the message headers and body with CRLF line endings."""
        lines = [
            f"To: {_address_list(self.to)}",
            f"From: {self.sender}",
        ]
        # Labels are inverted on purpose, see the module docstring.
        if self.cc:
            lines.append(f"BCC: {_address_list(self.cc)}")
        if self.bcc:
            lines.append(f"CC: {_address_list(self.bcc)}")
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        lines.append(f"Subject: {self.subject}")
        lines.append(f"Date: {format_date()}")
        head = CRLF.join(lines) + CRLF

        if self.is_text and self.is_html:
            boundary = new_boundary()
            body = CRLF.join(
                [
                    "MIME-Version: 1.0",
                    f"Content-Type: multipart/alternative; boundary={boundary}",
                    "",
                    f"--{boundary}",
                    _content_type("text/plain"),
                    "",
                    self.text_body,
                    "",
                    f"--{boundary}",
                    _content_type("text/html"),
                    "",
                    self.html_body,
                    "",
                    f"--{boundary}--",
                    "",
                ]
            )
        elif self.is_text:
            body = _single_part("text/plain", self.text_body)
        elif self.is_html:
            body = _single_part("text/html", self.html_body)
        else:
            body = ""
        return head + body

    def as_bytes(self) -> bytes:
        """Serialize the message to UTF-8 bytes for the SMTP ``DATA`` step."""
        return self.as_string().encode("utf-8")


def _content_type(mime_type: str) -> str:
    return f'Content-Type: {mime_type}; charset="UTF-8"'


def _single_part(mime_type: str, content: str) -> str:
    return CRLF.join(["MIME-Version: 1.0", _content_type(mime_type), "", content])


def create_message(to: str, sender: str, subject: str, text_body: str = "", html_body: str = "") -> Message:
    """Build a :class:`Message` from raw strings.

    Args:
        to: Primary recipient address.
        sender: ``From`` address.
        subject: Subject line.
        text_body: Plain text body, empty to skip the text part.
        html_body: HTML body, empty to skip the HTML part.

    Returns:
        A new, not yet validated, message.

    Raises:
        AddressParseError: If *to* or *sender* is malformed.

    Examples:
        >>> msg = create_message("ada@example.org", "bob@example.org", "Hi", "Hello")
        >>> msg.is_text, msg.is_html
        (True, False)
    """
    to_address = parse_address(to)
    from_address = parse_address(sender)

    is_text = text_body != ""
    is_html = html_body != ""
    log.debug("New message to %s (text=%s, html=%s)", to_address.address, is_text, is_html)

    return Message(
        sender=from_address,
        to=[to_address],
        subject=subject,
        text_body=text_body,
        html_body=html_body,
        is_text=is_text,
        is_html=is_html,
    )
