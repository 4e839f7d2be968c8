"""Transport implementations for mail delivery.

Available transports:
    - SMTPTransport: Standard SMTP protocol with PLAIN authentication (sync)
"""

from postal.mail.transports.smtp import PlainCredentials, SMTPTransport

__all__ = [
    "PlainCredentials",
    "SMTPTransport",
]
