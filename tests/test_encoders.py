"""
Tests for the low-level MIME encoders

Tests cover:
- Boundary generation and character safety
- Plain-text word wrapping and over-long words
- Base64 line chunking for HTML and attachments
- MIME type inference from filenames
- Subject encoded-words and folding
- Date formatting
"""
import base64
from datetime import datetime, timedelta, timezone

import pytest

from mailwright.core.mime.encoders import (
    chunk,
    encode_base64_lines,
    encode_subject,
    format_date,
    generate_boundary,
    guess_mime_type,
    rechunk_base64,
    wrap_text,
)

UNSAFE = set('<>@,;:\\/[]?=" ')


def _decode_subject(encoded):
    words = encoded.split("\r\n ")
    raw = b""
    for word in words:
        assert word.startswith("=?utf-8?b?") and word.endswith("?=")
        raw += base64.b64decode(word[len("=?utf-8?b?"):-2])
    return words, raw.decode("utf-8")


class TestGenerateBoundary:
    """Tests for boundary generation"""

    def test_prefix_and_random_hex(self):
        boundary = generate_boundary("mixed_")
        assert boundary.startswith("mixed_")
        suffix = boundary[len("mixed_"):]
        assert len(suffix) == 56
        int(suffix, 16)

    def test_two_boundaries_differ(self):
        assert generate_boundary("mixed_") != generate_boundary("alternative_")
        assert generate_boundary("mixed_") != generate_boundary("mixed_")

    def test_unsafe_characters_are_replaced(self):
        boundary = generate_boundary('a<b>c@d,e;f:g\\h/i[j]k?l=m"n o')
        assert not UNSAFE & set(boundary)
        assert boundary.startswith("a_b_c_d_e_f_g_h_i_j_k_l_m_n_o")


class TestWrapText:
    """Tests for greedy plain-text wrapping"""

    def test_short_text_is_one_line(self):
        assert wrap_text("hello world") == ["hello world"]

    def test_wraps_at_limit(self):
        assert wrap_text("aaa bbb ccc", 7) == ["aaa bbb", "ccc"]

    def test_line_may_fill_the_limit_exactly(self):
        assert wrap_text("abc def", 7) == ["abc def"]

    def test_whitespace_runs_collapse_to_single_spaces(self):
        assert wrap_text("a\n\nb \t  c") == ["a b c"]

    def test_long_word_is_force_split(self):
        assert wrap_text("ab abcdefghij cd", 4) == ["ab", "abcd", "efgh", "ij", "cd"]

    def test_empty_text(self):
        assert wrap_text("") == []
        assert wrap_text("   ") == []

    def test_lines_respect_limit_and_words_round_trip(self):
        text = " ".join(f"word{i}" * (i % 7 + 1) for i in range(400))
        lines = wrap_text(text, 60)
        assert all(len(line) <= 60 for line in lines)
        assert " ".join(lines).split() == text.split()

    def test_default_limit_is_998(self):
        lines = wrap_text("x" * 2000)
        assert [len(line) for line in lines] == [998, 998, 4]


class TestBase64Lines:
    """Tests for base64 chunking"""

    def test_chunk_fixed_width(self):
        assert chunk("abcdefg", 3) == ["abc", "def", "g"]

    def test_chunk_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            chunk("abc", 0)

    def test_html_lines_are_76_and_decode_back(self):
        html = "<html><body>" + "<p>héllo wörld ✓</p>" * 40 + "</body></html>"
        lines = encode_base64_lines(html)
        assert all(len(line) <= 76 for line in lines)
        assert all(len(line) == 76 for line in lines[:-1])
        assert base64.b64decode("".join(lines)) == html.encode("utf-8")

    def test_bytes_are_accepted(self):
        assert encode_base64_lines(b"\x00\x01") == ["AAE="]

    def test_rechunk_attachment_to_72(self):
        content = base64.b64encode(bytes(300)).decode("ascii")
        lines = rechunk_base64(content)
        assert all(len(line) <= 72 for line in lines)
        assert "".join(lines) == content

    def test_rechunk_drops_existing_line_breaks(self):
        assert rechunk_base64("QUJD\r\nREVG\n", 72) == ["QUJDREVG"]

    def test_rechunk_empty_content(self):
        assert rechunk_base64("") == []


class TestGuessMimeType:
    """Tests for filename-based MIME type inference"""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("notes.txt", "text/plain"),
            ("page.html", "text/html"),
            ("data.csv", "text/csv"),
            ("a.pdf", "application/pdf"),
            ("A.PDF", "application/pdf"),
            ("image.png", "image/png"),
            ("photo.jpg", "image/jpeg"),
            ("photo.JPEG", "image/jpeg"),
            ("anim.gif", "image/gif"),
            ("bundle.zip", "application/zip"),
        ],
    )
    def test_known_extensions(self, filename, expected):
        assert guess_mime_type(filename) == expected

    @pytest.mark.parametrize("filename", ["archive.tar.gz", "README", "trailing.", "x.docx"])
    def test_unknown_or_missing_extension(self, filename):
        assert guess_mime_type(filename) == "application/octet-stream"


class TestEncodeSubject:
    """Tests for subject encoded-words"""

    def test_ascii_subject_is_always_encoded(self):
        assert encode_subject("Hi") == "=?utf-8?b?SGk=?="

    def test_empty_subject(self):
        assert encode_subject("") == "=?utf-8?b??="

    def test_non_ascii_subject(self):
        words, decoded = _decode_subject(encode_subject("Grüße"))
        assert len(words) == 1
        assert decoded == "Grüße"

    def test_long_subject_is_folded_into_short_words(self):
        subject = "A rather long subject line " * 6
        encoded = encode_subject(subject)
        words, decoded = _decode_subject(encoded)
        assert len(words) > 1
        assert all(len(word) <= 75 for word in words)
        assert decoded == subject

    def test_folding_never_splits_a_character(self):
        subject = "日本語のメール件名" * 5
        words, decoded = _decode_subject(encode_subject(subject))
        for word in words:
            base64.b64decode(word[len("=?utf-8?b?"):-2]).decode("utf-8")
        assert decoded == subject


class TestFormatDate:
    """Tests for RFC 1123 date formatting"""

    def test_utc_moment(self):
        moment = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)
        assert format_date(moment) == "Sun, 18 Oct 2026 12:00:00 GMT"

    def test_other_timezone_is_converted_to_gmt(self):
        moment = datetime(2026, 10, 18, 14, 30, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_date(moment) == "Sun, 18 Oct 2026 12:30:00 GMT"

    def test_naive_moment_is_treated_as_utc(self):
        assert format_date(datetime(2026, 1, 1)) == "Thu, 01 Jan 2026 00:00:00 GMT"

    def test_defaults_to_now(self):
        assert format_date().endswith(" GMT")
