"""Outgoing message domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, Flag
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from mailwright.core.mime.encoders import guess_mime_type
from mailwright.utils.errors import MissingBodyError, MissingRecipientError
from mailwright.utils.logging import get_logger

from .address import Address, normalize_addresses, to_address
from .completion import CompletionSignal

logger = get_logger(__name__)


@dataclass(frozen=True)
class Attachment:
    """File attached to a message. ``content`` is already base64-encoded."""

    filename: str
    content: str
    mime_type: Optional[str] = None

    @property
    def resolved_mime_type(self) -> str:
        return self.mime_type or guess_mime_type(self.filename)


AttachmentLike = Union[Attachment, Mapping[str, Any]]


def to_attachment(value: AttachmentLike) -> Attachment:
    """Resolve an ``Attachment`` or a mapping with ``filename``, ``content``
    and optional ``mime_type`` / ``mimeType`` keys."""
    if isinstance(value, Attachment):
        return value
    if isinstance(value, Mapping) and "filename" in value and "content" in value:
        return Attachment(
            filename=value["filename"],
            content=value["content"],
            mime_type=value.get("mime_type", value.get("mimeType")),
        )
    raise TypeError(f"Cannot build an attachment from {type(value).__name__}")


class ReturnPolicy(Enum):
    """DSN RET parameter: how much of the message to return on failure."""

    HEADERS = "HDRS"
    FULL = "FULL"


class NotifyPolicy(Flag):
    """DSN NOTIFY parameter: which delivery events to report."""

    NONE = 0
    DELAY = 1
    FAILURE = 2
    SUCCESS = 4


@dataclass(frozen=True)
class DsnOverride:
    """Delivery status notification request, carried for the transport.

    Composition never reads this; it is handed as-is to whichever
    transport sends the payload.
    """

    envelope_id: Optional[str] = None
    ret: Optional[ReturnPolicy] = None
    notify: NotifyPolicy = NotifyPolicy.NONE


@dataclass(frozen=True, eq=False)
class Message:
    """An outgoing email, normalised once at construction.

    ``sender`` and ``reply_to`` accept anything ``to_address`` does, and
    ``to``, ``cc`` and ``bcc`` anything ``normalize_addresses`` does; they
    are resolved into ``Address`` values here. Headers and body are derived
    on demand by ``compose``. Apart from ``completion`` the message does not
    change after construction.

    Raises:
        MissingBodyError: If neither text nor html is given
        MissingRecipientError: If ``to`` resolves to no address
    """

    sender: Address
    to: Tuple[Address, ...]
    subject: str = ""
    text: Optional[str] = None
    html: Optional[str] = None
    reply_to: Optional[Address] = None
    cc: Optional[Tuple[Address, ...]] = None
    bcc: Optional[Tuple[Address, ...]] = None
    attachments: Tuple[Attachment, ...] = ()
    headers: Mapping[str, str] = field(default_factory=dict)
    dsn_override: Optional[DsnOverride] = None
    completion: CompletionSignal = field(
        default_factory=CompletionSignal, init=False, repr=False
    )

    def __post_init__(self):
        if not self.text and not self.html:
            raise MissingBodyError()

        recipients = normalize_addresses(self.to)
        if recipients is None:
            raise MissingRecipientError()

        set_ = object.__setattr__
        set_(self, "sender", to_address(self.sender))
        set_(self, "to", recipients)
        set_(self, "reply_to", to_address(self.reply_to) if self.reply_to else None)
        set_(self, "cc", normalize_addresses(self.cc))
        set_(self, "bcc", normalize_addresses(self.bcc))
        set_(
            self,
            "attachments",
            tuple(to_attachment(item) for item in self.attachments or ()),
        )
        set_(self, "headers", MappingProxyType(dict(self.headers or {})))

        logger.debug(
            "Message created",
            extra={
                "context": {
                    "recipients": len(self.recipients),
                    "attachments": len(self.attachments),
                    "has_text": bool(self.text),
                    "has_html": bool(self.html),
                }
            },
        )

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "Message":
        """Build a message from the options mapping (``from``, ``to``, ...)."""
        from .options import MessageOptions

        return MessageOptions.parse(options).to_message()

    ## Transport contract

    @property
    def envelope_sender(self) -> str:
        """Address for SMTP ``MAIL FROM``."""
        return self.sender.email

    @property
    def recipients(self) -> List[str]:
        """Every address that must receive the message: to, cc and bcc.

        BCC recipients only appear here, never in the payload.
        """
        seen: Dict[str, None] = {}
        for group in (self.to, self.cc, self.bcc):
            for address in group or ():
                seen.setdefault(address.email, None)
        return list(seen)

    ## Composition

    def compose(self, now: Optional[datetime] = None):
        """Compose headers and body. See ``mailwright.core.mime.compose``."""
        from mailwright.core.mime.composer import compose

        return compose(self, now=now)

    def get_payload(self, now: Optional[datetime] = None) -> str:
        """Full payload text, ready for SMTP DATA."""
        return self.compose(now).payload

    def as_bytes(self, now: Optional[datetime] = None) -> bytes:
        return self.compose(now).as_bytes()
