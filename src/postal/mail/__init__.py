"""Mail composition and SMTP delivery.

Examples:
    >>> from postal.mail import create_message
    >>> message = create_message("you@example.com", "me@example.com", "Hello", "Plain body")
    >>> message.add_cc("copy@example.com")
    True
    >>> message.recipients()
    ['you@example.com']
"""

from postal.mail.address import Address, parse_address
from postal.mail.exceptions import (
    AddressParseError,
    EmptyContentError,
    EmptySubjectError,
    MailConfigurationError,
    MailError,
    MailTransportError,
    MailValidationError,
    MissingRecipientError,
    MissingSenderError,
)
from postal.mail.message import Message, RecipientKind, create_message
from postal.mail.sender import PROVIDERS, MailerConfig, MailSender
from postal.mail.transport import MailTransport
from postal.mail.transports import PlainCredentials, SMTPTransport

__all__ = [
    "PROVIDERS",
    "Address",
    "AddressParseError",
    "EmptyContentError",
    "EmptySubjectError",
    "MailConfigurationError",
    "MailError",
    "MailSender",
    "MailTransport",
    "MailTransportError",
    "MailValidationError",
    "MailerConfig",
    "Message",
    "MissingRecipientError",
    "MissingSenderError",
    "PlainCredentials",
    "RecipientKind",
    "SMTPTransport",
    "create_message",
    "parse_address",
]
