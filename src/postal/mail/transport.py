"""Transport interface used by :class:`postal.mail.MailSender`."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["MailTransport"]


class MailTransport(ABC):
    """Deliver serialized messages to a mail server."""

    @abstractmethod
    def send(self, sender: str, recipients: Sequence[str], content: bytes) -> None:
        """Deliver *content* to *recipients*.

        Args:
            sender: Envelope sender mailbox (``MAIL FROM``).
            recipients: Envelope recipient mailboxes (``RCPT TO``).
            content: The serialized message (``DATA``).

        Raises:
            MailTransportError: If delivery fails.
        """
