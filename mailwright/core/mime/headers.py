"""Header block composition.

``compose_headers`` is a pure function of the message, the mixed boundary
and the current time. Nothing is written back to the message.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Tuple

from mailwright.core.models.address import format_address_list

from .constants import MIME_VERSION, HeaderNames
from .encoders import encode_subject, format_date

if TYPE_CHECKING:
    from mailwright.core.models.message import Message

Header = Tuple[str, str]


def compose_headers(
    message: "Message", mixed_boundary: str, now: Optional[datetime] = None
) -> List[Header]:
    """Build the ordered header list for a message.

    Caller-supplied headers come first, minus any reserved name (compared
    case-insensitively); the computed headers follow. A caller-supplied
    Message-ID is the one exception and is kept verbatim. Bcc is never
    emitted.

    Args:
        message: Message to describe
        mixed_boundary: Boundary of the outer multipart/mixed body
        now: Moment for the Date header, defaults to the current time

    Returns:
        List of (name, value) pairs in output order
    """
    headers: List[Header] = [(HeaderNames.MIME_VERSION, MIME_VERSION)]
    message_id = None

    for name, value in message.headers.items():
        key = name.lower()
        if key == HeaderNames.MESSAGE_ID.lower():
            message_id = value
        elif key not in HeaderNames.RESERVED:
            headers.append((name, value))

    headers.append((HeaderNames.FROM, message.sender.format()))
    headers.append((HeaderNames.TO, format_address_list(message.to)))

    if message.reply_to:
        headers.append((HeaderNames.REPLY_TO, message.reply_to.format()))

    if message.cc:
        headers.append((HeaderNames.CC, format_address_list(message.cc)))

    headers.append((HeaderNames.SUBJECT, encode_subject(message.subject)))
    headers.append((HeaderNames.DATE, format_date(now)))
    headers.append((HeaderNames.MESSAGE_ID, message_id or generate_message_id(message)))
    headers.append(
        (HeaderNames.CONTENT_TYPE, f'multipart/mixed; boundary="{mixed_boundary}"')
    )

    return headers


def generate_message_id(message: "Message") -> str:
    """``<random-uuid@domain>``, with the domain taken from the sender."""
    return f"<{uuid.uuid4()}@{message.sender.domain}>"


def render_headers(headers: List[Header]) -> str:
    """Join headers into CRLF-separated ``Name: value`` lines."""
    return "\r\n".join(f"{name}: {value}" for name, value in headers)
