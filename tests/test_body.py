"""
Tests for multipart body composition

Tests cover:
- multipart/alternative layout for text, HTML or both
- Plain text wrapping and HTML base64 encoding
- Attachment parts and their headers
- Closing delimiters and the DATA terminator
"""
import base64

from mailwright.core.mime.body import compose_body
from mailwright.core.models import Attachment, Message

from .test_helpers import PayloadTestHelper

MIXED = "mixed_aaaa"
ALT = "alternative_bbbb"


class TestAlternativePart:
    """Tests for the multipart/alternative first part"""

    def test_starts_with_mixed_delimiter_and_alternative_header(self, simple_message):
        body = compose_body(simple_message, MIXED, ALT)
        assert body.startswith(
            f'--{MIXED}\r\nContent-Type: multipart/alternative; boundary="{ALT}"\r\n\r\n'
        )

    def test_text_only_exact_layout(self, simple_message):
        body = compose_body(simple_message, MIXED, ALT)
        assert body == (
            f"--{MIXED}\r\n"
            f'Content-Type: multipart/alternative; boundary="{ALT}"\r\n\r\n'
            f"--{ALT}\r\n"
            'Content-Type: text/plain; charset="utf-8"\r\n\r\n'
            "hello\r\n\r\n"
            f"--{ALT}--\r\n"
            f"--{MIXED}--\r\n"
            ".\r\n"
        )

    def test_html_only_has_no_plain_part(self):
        message = Message(sender="a@example.com", to="b@example.com", html="<p>hi</p>")
        body = compose_body(message, MIXED, ALT)
        assert "text/plain" not in body
        assert 'Content-Type: text/html; charset="utf-8"\r\nContent-Transfer-Encoding: base64' in body

    def test_text_then_html(self, full_message):
        body = compose_body(full_message, MIXED, ALT)
        assert body.count("text/plain") == 1
        assert body.count("text/html") == 1
        assert body.index("text/plain") < body.index("text/html")
        assert body.count("multipart/alternative") == 1

    def test_html_decodes_back_exactly(self):
        html = "<p>Grüße, 世界</p>" * 30
        message = Message(sender="a@example.com", to="b@example.com", html=html)
        body = compose_body(message, MIXED, ALT)
        lines = PayloadTestHelper.part_content(body, ALT, "text/html")
        assert all(len(line) <= 76 for line in lines)
        assert base64.b64decode("".join(lines)).decode("utf-8") == html

    def test_long_text_is_wrapped_at_998(self):
        text = " ".join(["lorem"] * 500)
        message = Message(sender="a@example.com", to="b@example.com", text=text)
        body = compose_body(message, MIXED, ALT)
        lines = PayloadTestHelper.part_content(body, ALT, "text/plain")
        assert len(lines) > 1
        assert all(len(line) <= 998 for line in lines)
        assert " ".join(lines) == text


class TestAttachmentParts:
    """Tests for attachment parts"""

    def test_attachment_headers(self, fixed_now):
        message = Message(
            sender="a@example.com",
            to="b@example.com",
            text="see attached",
            attachments=[Attachment(filename="a.pdf", content="QUJD")],
        )
        body = compose_body(message, MIXED, ALT, fixed_now)
        assert (
            f"--{MIXED}\r\n"
            'Content-Type: application/pdf; name="a.pdf"\r\n'
            "Content-Description: a.pdf\r\n"
            'Content-Disposition: attachment; filename="a.pdf";\r\n'
            '    creation-date="Sun, 18 Oct 2026 12:00:00 GMT"\r\n'
            "Content-Transfer-Encoding: base64\r\n\r\n"
            "QUJD\r\n\r\n"
        ) in body

    def test_explicit_mime_type_wins(self):
        message = Message(
            sender="a@example.com",
            to="b@example.com",
            text="x",
            attachments=[Attachment("data.bin", "QUJD", mime_type="application/x-custom")],
        )
        assert 'Content-Type: application/x-custom; name="data.bin"' in compose_body(
            message, MIXED, ALT
        )

    def test_content_rechunked_to_72(self, pdf_content):
        message = Message(
            sender="a@example.com",
            to="b@example.com",
            text="x",
            attachments=[Attachment("report.pdf", pdf_content)],
        )
        body = compose_body(message, MIXED, ALT)
        lines = PayloadTestHelper.part_content(body, MIXED, "application/pdf")
        assert all(len(line) <= 72 for line in lines)
        assert "".join(lines) == pdf_content

    def test_attachments_follow_alternative_in_order(self):
        message = Message(
            sender="a@example.com",
            to="b@example.com",
            text="x",
            attachments=[Attachment("one.txt", "MQ=="), Attachment("two.png", "Mg==")],
        )
        body = compose_body(message, MIXED, ALT)
        assert body.index(f"--{ALT}--") < body.index("one.txt") < body.index("two.png")
        assert body.count(f"--{MIXED}\r\n") == 3

    def test_ends_with_closing_delimiter_and_terminator(self, full_message):
        body = compose_body(full_message, MIXED, ALT)
        assert body.endswith(f"--{MIXED}--\r\n.\r\n")
