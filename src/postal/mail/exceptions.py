"""Exceptions raised by the postal.mail module.

Exception hierarchy::

    PostalError
        MailError (base for all mail errors)
            AddressParseError (malformed address, also ValueError)
            MailConfigurationError (invalid sender setup, also ValueError)
            MailValidationError (message fails validation, also ValueError)
                MissingRecipientError
                MissingSenderError
                EmptySubjectError
                EmptyContentError
            MailTransportError (SMTP delivery failed)
"""

from __future__ import annotations

from postal.config.exceptions import PostalError


class MailError(PostalError):
    """Base exception for all mail module errors."""


class AddressParseError(MailError, ValueError):
    """An email address could not be parsed.

    Attributes:
        value: The raw string that was rejected.
        reason: Why it was rejected.
    """

    def __init__(self, value: str, reason: str) -> None:
        """Initialize AddressParseError.

        Args:
            value: The raw string that was rejected.
            reason: Why it was rejected.
        """
        super().__init__(f"Invalid email address {value!r}: {reason}")
        self.value = value
        self.reason = reason


class MailConfigurationError(MailError, ValueError):
    """Sender or transport configuration is invalid."""


class MailValidationError(MailError, ValueError):
    """A message is not ready to be sent."""


class MissingRecipientError(MailValidationError):
    """The message has no ``To`` address."""

    def __init__(self) -> None:
        super().__init__("No to addressees for message")


class MissingSenderError(MailValidationError):
    """The message has no ``From`` address."""

    def __init__(self) -> None:
        super().__init__("No from address for message")


class EmptySubjectError(MailValidationError):
    """The message subject is empty."""

    def __init__(self) -> None:
        super().__init__("Empty subject for message")


class EmptyContentError(MailValidationError):
    """Neither a text nor an HTML body was provided."""

    def __init__(self) -> None:
        super().__init__("No text or html content for message")


class MailTransportError(MailError):
    """Delivery through the SMTP server failed."""
