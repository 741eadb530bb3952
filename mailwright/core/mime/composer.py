"""Message composition entry point."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional, Tuple

from mailwright.utils.logging import get_logger, log_call

from .body import compose_body
from .constants import (
    ALTERNATIVE_BOUNDARY_PREFIX,
    CRLF,
    DATA_TERMINATOR,
    MIXED_BOUNDARY_PREFIX,
)
from .encoders import generate_boundary
from .headers import compose_headers, render_headers

if TYPE_CHECKING:
    from mailwright.core.models.message import Message

logger = get_logger(__name__)


@dataclass(frozen=True)
class ComposedMessage:
    """Result of one composition: header list, body and the boundaries used."""

    headers: List[Tuple[str, str]]
    body: str
    mixed_boundary: str
    alternative_boundary: str

    @property
    def payload(self) -> str:
        """Headers, blank line, body. Ends with the ``.`` DATA terminator."""
        return render_headers(self.headers) + CRLF + CRLF + self.body

    @property
    def content(self) -> str:
        """Payload without the trailing ``.`` line.

        For SMTP libraries that dot-stuff and terminate DATA themselves.
        """
        payload = self.payload
        terminator = DATA_TERMINATOR + CRLF
        if payload.endswith(CRLF + terminator):
            return payload[: -len(terminator)]
        return payload

    def header(self, name: str) -> Optional[str]:
        """First value of a header, matched case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    def as_bytes(self) -> bytes:
        return self.payload.encode("utf-8")


@log_call
def compose(message: "Message", now: Optional[datetime] = None) -> ComposedMessage:
    """Compose a message into headers and a multipart body.

    Fresh boundaries are drawn on every call, and Date/creation-date use
    ``now`` (the current time by default), so repeated calls give
    equivalent but not identical payloads.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    mixed_boundary = generate_boundary(MIXED_BOUNDARY_PREFIX)
    alternative_boundary = generate_boundary(ALTERNATIVE_BOUNDARY_PREFIX)

    headers = compose_headers(message, mixed_boundary, now)
    body = compose_body(message, mixed_boundary, alternative_boundary, now)

    logger.debug(
        "Message composed",
        extra={
            "context": {
                "headers": len(headers),
                "attachments": len(message.attachments),
                "size": len(body),
            }
        },
    )

    return ComposedMessage(
        headers=headers,
        body=body,
        mixed_boundary=mixed_boundary,
        alternative_boundary=alternative_boundary,
    )
