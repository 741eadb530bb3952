"""mailwright: RFC 2045/2046 multipart email composition."""

from mailwright.core.mime import ComposedMessage, compose
from mailwright.core.models import Address, Attachment, DsnOverride, Message

__version__ = "0.1.0"

__all__ = [
    "Address",
    "Attachment",
    "ComposedMessage",
    "DsnOverride",
    "Message",
    "compose",
]
