"""Email address parsing.

Addresses are parsed with the RFC 5322 address-list grammar used by
:mod:`email.headerregistry` and then checked against the RFC 5321 length
limits SMTP servers enforce. Bare host names (``user@localhost``), domain
literals (``user@[192.0.2.1]``) and internationalized domains are accepted.
"""

from __future__ import annotations

from dataclasses import dataclass
from email._header_value_parser import get_address_list
from email.errors import HeaderParseError
from email.header import Header

from postal.mail.exceptions import AddressParseError

__all__ = ["Address", "parse_address"]

_MAX_LOCAL_LENGTH = 64
_MAX_DOMAIN_LENGTH = 255


def _quote(name: str) -> str:
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True, slots=True)
class Address:
    """A parsed mailbox with an optional display name.

    Attributes:
        name: Display name, empty when absent.
        address: Mailbox spec, ``local@domain``.

    Examples:
        >>> str(Address(name="", address="ada@example.org"))
        '<ada@example.org>'
        >>> str(Address(name="Ada Lovelace", address="ada@example.org"))
        '"Ada Lovelace" <ada@example.org>'
    """

    name: str
    address: str

    def __str__(self) -> str:
        mailbox = f"<{self.address}>"
        if not self.name:
            return mailbox
        if self.name.isascii() and self.name.isprintable():
            return f"{_quote(self.name)} {mailbox}"
        encoded = Header(self.name, "utf-8").encode()
        return f"{encoded} {mailbox}"


def _check_domain(domain: str, raw: str) -> None:
    if len(domain) > _MAX_DOMAIN_LENGTH:
        raise AddressParseError(raw, "domain is too long")
    if domain.startswith("["):
        return
    if any(not label for label in domain.split(".")):
        raise AddressParseError(raw, "domain has an empty label")


def parse_address(value: str) -> Address:
    """Parse a single address such as ``Ada <ada@example.org>``.

    Args:
        value: Raw address, with or without a display name and angle brackets.

    Returns:
        The parsed :class:`Address`.

    Raises:
        AddressParseError: If the string is empty, holds more than one
            address, or is not a valid mailbox.

    Examples:
        >>> parse_address("Grace Hopper <grace@example.org>")
        Address(name='Grace Hopper', address='grace@example.org')
        >>> parse_address("user@example.com").name
        ''
    """
    raw = value.strip() if isinstance(value, str) else ""
    if not raw:
        raise AddressParseError(str(value), "address is empty")
    if "\r" in raw or "\n" in raw:
        raise AddressParseError(raw, "line breaks are not allowed")

    try:
        parsed, remainder = get_address_list(raw)
    except (HeaderParseError, IndexError) as exc:
        raise AddressParseError(raw, str(exc)) from exc

    if remainder or parsed.all_defects or len(parsed.addresses) != 1:
        raise AddressParseError(raw, "expected exactly one well formed address")
    group = parsed.addresses[0]
    if group.display_name is not None or len(group.all_mailboxes) != 1:
        raise AddressParseError(raw, "address groups are not supported")

    mailbox = group.all_mailboxes[0]
    local_part = mailbox.local_part or ""
    domain = mailbox.domain or ""
    if not local_part or not domain:
        raise AddressParseError(raw, "mailbox must look like local@domain")
    if len(local_part) > _MAX_LOCAL_LENGTH:
        raise AddressParseError(raw, "local part is too long")
    _check_domain(domain, raw)

    return Address(name=mailbox.display_name or "", address=mailbox.addr_spec)
