"""Low-level MIME encoders: boundaries, wrapping, base64 and header words.

Line limits:
- 998 characters for plain text lines (RFC 2046, RFC 5322)
- 76 characters for base64 bodies (RFC 2045)
- 72 characters for attachment base64, leaving room under 76
"""

import base64
import re
import secrets
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List, Optional, Union

from .constants import (
    ATTACHMENT_LINE_LENGTH,
    BASE64_LINE_LENGTH,
    BOUNDARY_RANDOM_BYTES,
    DEFAULT_MIME_TYPE,
    ENCODED_WORD_MAX_LENGTH,
    MIME_TYPES,
    TEXT_LINE_LENGTH,
)

_BOUNDARY_UNSAFE = re.compile(r'[<>@,;:\\/\[\]?=" ]')
_WHITESPACE = re.compile(r"\s+")

_ENCODED_WORD_PREFIX = "=?utf-8?b?"
_ENCODED_WORD_SUFFIX = "?="
# Largest number of raw bytes whose base64 still fits in one encoded word
_ENCODED_WORD_MAX_BYTES = (
    (ENCODED_WORD_MAX_LENGTH - len(_ENCODED_WORD_PREFIX) - len(_ENCODED_WORD_SUFFIX))
    // 4
    * 3
)


def generate_boundary(prefix: str) -> str:
    """Build a multipart boundary from a prefix and 28 random bytes.

    Characters that are not safe in a boundary parameter are replaced with
    ``_``, including any that appear in the prefix.
    """
    boundary = prefix + secrets.token_hex(BOUNDARY_RANDOM_BYTES)
    return _BOUNDARY_UNSAFE.sub("_", boundary)


def wrap_text(text: str, max_length: int = TEXT_LINE_LENGTH) -> List[str]:
    """Greedy word wrap.

    Words are separated by single spaces; any run of whitespace in the input
    (newlines included) counts as one separator. A word longer than
    ``max_length`` is cut into fixed-size pieces, each on its own line.
    """
    lines: List[str] = []
    current = ""

    for word in text.split():
        if len(word) > max_length:
            if current:
                lines.append(current)
                current = ""
            lines.extend(chunk(word, max_length))
        elif len(current) + len(word) + (1 if current else 0) <= max_length:
            current = f"{current} {word}" if current else word
        else:
            lines.append(current)
            current = word

    if current:
        lines.append(current)

    return lines


def chunk(value: str, size: int) -> List[str]:
    """Split a string into fixed-width slices."""
    if size <= 0:
        raise ValueError("Chunk size must be positive")
    return [value[i : i + size] for i in range(0, len(value), size)]


def encode_base64_lines(
    data: Union[str, bytes], line_length: int = BASE64_LINE_LENGTH
) -> List[str]:
    """Base64-encode text (as UTF-8) or bytes and split into lines."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return chunk(base64.b64encode(data).decode("ascii"), line_length)


def rechunk_base64(content: str, line_length: int = ATTACHMENT_LINE_LENGTH) -> List[str]:
    """Re-wrap caller-supplied base64 into lines of ``line_length``.

    Existing line breaks are dropped first so pre-wrapped input is handled.
    """
    return chunk(_WHITESPACE.sub("", content), line_length)


def guess_mime_type(filename: str) -> str:
    """Map a filename's extension to a MIME type."""
    _, dot, extension = filename.rpartition(".")
    if not dot:
        return DEFAULT_MIME_TYPE
    return MIME_TYPES.get(extension.lower(), DEFAULT_MIME_TYPE)


def encode_subject(subject: str) -> str:
    """Encode a subject as RFC 2047 UTF-8 base64 encoded-words.

    The subject is always encoded, ASCII or not. When one encoded word would
    be longer than 75 characters the subject is split on character
    boundaries into several words, folded onto continuation lines.
    """
    words = [
        _ENCODED_WORD_PREFIX
        + base64.b64encode(piece).decode("ascii")
        + _ENCODED_WORD_SUFFIX
        for piece in _split_utf8(subject, _ENCODED_WORD_MAX_BYTES)
    ]
    return "\r\n ".join(words)


def _split_utf8(text: str, max_bytes: int) -> List[bytes]:
    """UTF-8 encode ``text`` in pieces of at most ``max_bytes``, never
    splitting a character."""
    pieces: List[bytes] = []
    current = b""

    for char in text:
        encoded = char.encode("utf-8")
        if current and len(current) + len(encoded) > max_bytes:
            pieces.append(current)
            current = b""
        current += encoded

    pieces.append(current)
    return pieces


def format_date(moment: Optional[datetime] = None) -> str:
    """Format a moment as an RFC 1123 date in GMT, e.g. for the Date header."""
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)
