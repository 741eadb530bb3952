"""Domain models for outgoing messages."""

from .address import Address, format_address_list, normalize_addresses, to_address
from .completion import CompletionSignal
from .message import (
    Attachment,
    DsnOverride,
    Message,
    NotifyPolicy,
    ReturnPolicy,
    to_attachment,
)
from .options import MessageOptions

__all__ = [
    "Address",
    "Attachment",
    "CompletionSignal",
    "DsnOverride",
    "Message",
    "MessageOptions",
    "NotifyPolicy",
    "ReturnPolicy",
    "format_address_list",
    "normalize_addresses",
    "to_address",
    "to_attachment",
]
