"""SMTP transport for composed messages.

- SMTPTransport: sends a Message over aiosmtplib and settles its completion
- dsn: maps a DSN request onto MAIL FROM / RCPT TO parameters

Usage
-----
    >>> from mailwright.core.email.smtp import get_smtp_transport
    >>> from mailwright.core.models import Message
    >>>
    >>> message = Message(sender="a@example.com", to="b@example.com",
    ...                   subject="Hi", text="hello")
    >>> transport = get_smtp_transport()
    >>> stats = await transport.send(message)
    >>> await message.completion  # raises the delivery error on failure
"""

from .client import SendStats, SMTPTransport, get_smtp_transport
from .dsn import dsn_mail_options, dsn_rcpt_options

__all__ = [
    "SMTPTransport",
    "SendStats",
    "dsn_mail_options",
    "dsn_rcpt_options",
    "get_smtp_transport",
]
