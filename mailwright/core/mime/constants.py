"""MIME composition constants."""

# RFC 5322 / RFC 2046: maximum line length excluding CRLF
TEXT_LINE_LENGTH = 998

# RFC 2045: base64 lines must not exceed 76 characters
BASE64_LINE_LENGTH = 76

# Attachment base64 is re-wrapped a little shorter than the limit
ATTACHMENT_LINE_LENGTH = 72

# RFC 2047: an encoded-word may not be more than 75 characters long
ENCODED_WORD_MAX_LENGTH = 75

BOUNDARY_RANDOM_BYTES = 28
MIXED_BOUNDARY_PREFIX = "mixed_"
ALTERNATIVE_BOUNDARY_PREFIX = "alternative_"

CRLF = "\r\n"

# SMTP DATA termination marker, the last line of a composed payload
DATA_TERMINATOR = "."

MIME_VERSION = "1.0"

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = {
    "txt": "text/plain",
    "html": "text/html",
    "csv": "text/csv",
    "pdf": "application/pdf",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "zip": "application/zip",
}


class HeaderNames:
    """Header names computed by the composer."""

    FROM = "From"
    TO = "To"
    REPLY_TO = "Reply-To"
    CC = "CC"
    BCC = "Bcc"
    SUBJECT = "Subject"
    DATE = "Date"
    MESSAGE_ID = "Message-ID"
    MIME_VERSION = "MIME-Version"
    CONTENT_TYPE = "Content-Type"

    # Caller-supplied headers with these names (any case) never pass through
    RESERVED = frozenset(
        name.lower()
        for name in (
            FROM,
            TO,
            REPLY_TO,
            CC,
            BCC,
            SUBJECT,
            DATE,
            MESSAGE_ID,
            MIME_VERSION,
            CONTENT_TYPE,
        )
    )
