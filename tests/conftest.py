"""
Shared test fixtures and configuration for pytest
"""
import base64
import os
from datetime import datetime, timezone

import pytest

from mailwright.core.models import Attachment, Message


@pytest.fixture
def fixed_now():
    """A fixed moment for Date and creation-date headers"""
    return datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def simple_message():
    """The smallest valid message: one sender, one recipient, text only"""
    return Message(
        sender="a@example.com",
        to="b@example.com",
        subject="Hi",
        text="hello",
    )


@pytest.fixture
def pdf_content():
    """Base64 content for a small fake PDF, long enough to need several lines"""
    return base64.b64encode(b"%PDF-1.4 " + bytes(range(256))).decode("ascii")


@pytest.fixture
def full_message(pdf_content):
    """Message using every optional field"""
    return Message(
        sender={"name": "Alice", "email": "alice@mail.example.org"},
        to=["bob@example.com", {"name": "Carol", "email": "carol@example.com"}],
        reply_to="replies@example.org",
        cc="dave@example.com",
        bcc=["erin@example.com", {"name": "Frank", "email": "frank@example.com"}],
        subject="Quarterly report",
        text="Please find the report attached.",
        html="<p>Please find the <b>report</b> attached.</p>",
        attachments=[Attachment(filename="report.pdf", content=pdf_content)],
        headers={"X-Campaign": "q3"},
    )


@pytest.fixture(autouse=True)
def clear_env_vars():
    """Clear mailwright environment variables before each test"""
    env_vars = [
        'MAILWRIGHT_SMTP_HOST', 'MAILWRIGHT_SMTP_PORT',
        'MAILWRIGHT_SMTP_USERNAME', 'MAILWRIGHT_SMTP_PASSWORD',
        'MAILWRIGHT_LOG_LEVEL',
    ]
    original = {}
    for var in env_vars:
        original[var] = os.environ.get(var)
        if var in os.environ:
            del os.environ[var]

    yield

    # Restore original environment
    for var, value in original.items():
        if value is not None:
            os.environ[var] = value
        elif var in os.environ:
            del os.environ[var]
