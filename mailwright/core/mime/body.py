"""Multipart body composition.

Layout::

    multipart/mixed
    +-- multipart/alternative
    |   +-- text/plain   (if text)
    |   +-- text/html    (if html, base64)
    +-- attachment       (one per attachment, base64)
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from .constants import (
    ATTACHMENT_LINE_LENGTH,
    BASE64_LINE_LENGTH,
    CRLF,
    DATA_TERMINATOR,
    TEXT_LINE_LENGTH,
)
from .encoders import encode_base64_lines, format_date, rechunk_base64, wrap_text

if TYPE_CHECKING:
    from mailwright.core.models.message import Attachment, Message


def compose_body(
    message: "Message",
    mixed_boundary: str,
    alternative_boundary: str,
    now: Optional[datetime] = None,
) -> str:
    """Build the MIME body that follows the header block.

    Ends with the closing mixed delimiter and the SMTP ``.`` line.
    """
    out: List[str] = [
        f"--{mixed_boundary}{CRLF}",
        f'Content-Type: multipart/alternative; boundary="{alternative_boundary}"{CRLF}{CRLF}',
    ]

    if message.text:
        out.append(f"--{alternative_boundary}{CRLF}")
        out.append(f'Content-Type: text/plain; charset="utf-8"{CRLF}{CRLF}')
        out.append(_lines(wrap_text(message.text, TEXT_LINE_LENGTH)))

    if message.html:
        out.append(f"--{alternative_boundary}{CRLF}")
        out.append(f'Content-Type: text/html; charset="utf-8"{CRLF}')
        out.append(f"Content-Transfer-Encoding: base64{CRLF}{CRLF}")
        out.append(_lines(encode_base64_lines(message.html, BASE64_LINE_LENGTH)))

    out.append(f"--{alternative_boundary}--{CRLF}")

    for attachment in message.attachments:
        out.append(_attachment_part(attachment, mixed_boundary, now))

    out.append(f"--{mixed_boundary}--{CRLF}{DATA_TERMINATOR}{CRLF}")

    return "".join(out)


def _attachment_part(
    attachment: "Attachment", mixed_boundary: str, now: Optional[datetime]
) -> str:
    filename = attachment.filename
    return (
        f"--{mixed_boundary}{CRLF}"
        f'Content-Type: {attachment.resolved_mime_type}; name="{filename}"{CRLF}'
        f"Content-Description: {filename}{CRLF}"
        f'Content-Disposition: attachment; filename="{filename}";{CRLF}'
        f'    creation-date="{format_date(now)}"{CRLF}'
        f"Content-Transfer-Encoding: base64{CRLF}{CRLF}"
        + _lines(rechunk_base64(attachment.content, ATTACHMENT_LINE_LENGTH))
    )


def _lines(lines: List[str]) -> str:
    """Part content followed by the blank line that precedes a delimiter."""
    return CRLF.join(lines) + CRLF + CRLF
