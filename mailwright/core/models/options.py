"""Pydantic schema for the message construction options."""

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from mailwright.utils.errors import ValidationError

from .address import Address
from .message import Attachment, DsnOverride, Message, NotifyPolicy, ReturnPolicy


class AddressOptions(BaseModel):
    """A named mailbox: ``{"name": ..., "email": ...}``."""

    email: str
    name: Optional[str] = None

    def to_address(self) -> Address:
        return Address(email=self.email, name=self.name)


AddressValue = Union[str, AddressOptions]
RecipientsValue = Union[AddressValue, List[AddressValue]]


class AttachmentOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: str
    content: str
    mime_type: Optional[str] = Field(default=None, alias="mimeType")


class ReturnOptions(BaseModel):
    HEADERS: bool = False
    FULL: bool = False


class NotifyOptions(BaseModel):
    DELAY: bool = False
    FAILURE: bool = False
    SUCCESS: bool = False


class DsnOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    envelope_id: Optional[str] = Field(default=None, alias="envelopeId")
    RET: Optional[ReturnOptions] = None
    NOTIFY: Optional[NotifyOptions] = None

    def to_dsn(self) -> DsnOverride:
        ret = None
        if self.RET and self.RET.FULL:
            ret = ReturnPolicy.FULL
        elif self.RET and self.RET.HEADERS:
            ret = ReturnPolicy.HEADERS

        notify = NotifyPolicy.NONE
        if self.NOTIFY:
            for name, enabled in self.NOTIFY.model_dump().items():
                if enabled:
                    notify |= NotifyPolicy[name]

        return DsnOverride(envelope_id=self.envelope_id, ret=ret, notify=notify)


class MessageOptions(BaseModel):
    """Construction input for a ``Message``.

    Field names follow the wire shape (``from``, ``reply``, ``dsnOverride``,
    ``mimeType``); Python names are accepted too. Body and recipient
    requirements are enforced by ``Message`` itself.
    """

    model_config = ConfigDict(populate_by_name=True)

    sender: AddressValue = Field(alias="from")
    to: Optional[RecipientsValue] = None
    reply_to: Optional[AddressValue] = Field(default=None, alias="reply")
    cc: Optional[RecipientsValue] = None
    bcc: Optional[RecipientsValue] = None
    subject: str = ""
    text: Optional[str] = None
    html: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    attachments: Optional[List[AttachmentOptions]] = None
    dsn_override: Optional[DsnOptions] = Field(default=None, alias="dsnOverride")

    @classmethod
    def parse(cls, options: Mapping[str, Any]) -> "MessageOptions":
        """Validate raw options, raising the package's ValidationError."""
        try:
            return cls.model_validate(options)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid message options: {e.error_count()} error(s)",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def to_message(self) -> Message:
        return Message(
            sender=_resolve(self.sender),
            to=_resolve_many(self.to),
            subject=self.subject,
            text=self.text,
            html=self.html,
            reply_to=_resolve(self.reply_to) if self.reply_to else None,
            cc=_resolve_many(self.cc),
            bcc=_resolve_many(self.bcc),
            attachments=[
                Attachment(a.filename, a.content, a.mime_type)
                for a in self.attachments or []
            ],
            headers=self.headers or {},
            dsn_override=self.dsn_override.to_dsn() if self.dsn_override else None,
        )


def _resolve(value: AddressValue) -> Union[str, Address]:
    if isinstance(value, AddressOptions):
        return value.to_address()
    return value


def _resolve_many(value: Optional[RecipientsValue]):
    if value is None:
        return None
    if isinstance(value, list):
        return [_resolve(item) for item in value]
    return _resolve(value)
