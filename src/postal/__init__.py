"""postal: compose text and HTML mail and send it over SMTP.

Examples:
    >>> from postal import MailSender
    >>> sender = MailSender.gmail("me@gmail.com", "app-password")
    >>> sender.config.host_port
    'smtp.gmail.com:587'
"""

from postal.config import ConfigError, PostalError, clear_config, get_config, load_config
from postal.logging import TRACE_LEVEL, get_logger, init_logging
from postal.mail import (
    Address,
    AddressParseError,
    MailError,
    MailerConfig,
    MailSender,
    MailTransportError,
    MailValidationError,
    Message,
    RecipientKind,
    create_message,
    parse_address,
)
from postal.meta import __version__

__all__ = [
    "TRACE_LEVEL",
    "Address",
    "AddressParseError",
    "ConfigError",
    "MailError",
    "MailSender",
    "MailTransportError",
    "MailValidationError",
    "MailerConfig",
    "Message",
    "PostalError",
    "RecipientKind",
    "__version__",
    "clear_config",
    "create_message",
    "get_config",
    "get_logger",
    "init_logging",
    "load_config",
    "parse_address",
]
