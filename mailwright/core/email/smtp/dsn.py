"""Map a DSN request (RFC 3461) onto ESMTP command parameters."""

from typing import List, Optional

from mailwright.core.models.message import DsnOverride, NotifyPolicy

# NOTIFY keywords in RFC 3461 order
_NOTIFY_KEYWORDS = (
    (NotifyPolicy.SUCCESS, "SUCCESS"),
    (NotifyPolicy.FAILURE, "FAILURE"),
    (NotifyPolicy.DELAY, "DELAY"),
)


def dsn_mail_options(dsn: Optional[DsnOverride]) -> List[str]:
    """Parameters for ``MAIL FROM``: ``RET=`` and ``ENVID=``."""
    if dsn is None:
        return []

    options = []
    if dsn.ret is not None:
        options.append(f"RET={dsn.ret.value}")
    if dsn.envelope_id:
        options.append(f"ENVID={xtext(dsn.envelope_id)}")
    return options


def dsn_rcpt_options(dsn: Optional[DsnOverride]) -> List[str]:
    """Parameters for each ``RCPT TO``: ``NOTIFY=``."""
    if dsn is None or not dsn.notify:
        return []

    keywords = [keyword for flag, keyword in _NOTIFY_KEYWORDS if flag in dsn.notify]
    return [f"NOTIFY={','.join(keywords)}"]


def xtext(value: str) -> str:
    """Encode a value as RFC 3461 xtext.

    Printable ASCII other than ``+`` and ``=`` passes through; everything
    else becomes ``+XX``.
    """
    out = []
    for byte in value.encode("utf-8"):
        if 33 <= byte <= 126 and byte not in (ord("+"), ord("=")):
            out.append(chr(byte))
        else:
            out.append(f"+{byte:02X}")
    return "".join(out)
