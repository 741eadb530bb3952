"""MIME payload composition.

- encoders: boundaries, line wrapping, base64, subject encoded-words
- headers: header block for a message
- body: multipart/mixed body with a multipart/alternative first part
- composer: ties headers and body together around shared boundaries

Usage:
    >>> from mailwright.core.models import Message
    >>> from mailwright.core.mime import compose
    >>>
    >>> message = Message(sender="a@example.com", to="b@example.com",
    ...                   subject="Hi", text="hello")
    >>> composed = compose(message)
    >>> composed.header("Subject")
    '=?utf-8?b?SGk=?='
"""

from .body import compose_body
from .composer import ComposedMessage, compose
from .headers import compose_headers

__all__ = [
    "ComposedMessage",
    "compose",
    "compose_body",
    "compose_headers",
]
