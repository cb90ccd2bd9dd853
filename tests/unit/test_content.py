"""
Unit tests for the content streamer.
"""

import io
import re
from datetime import datetime
from pathlib import Path

import pytest

from filehttpd.errors import StreamError
from filehttpd.handlers.content import (
    NOT_FOUND_BODY,
    ContentStreamer,
    render_date,
    write_body,
)
from filehttpd.handlers.resource import resolve_resource


DATE_PATTERN = rb"\d{2}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}"


def body_for(root: Path, target_path: str, mime_type: str) -> bytes:
    """Helper to render the body for a path under root."""
    out = io.BytesIO()
    with resolve_resource(target_path, root) as resource:
        write_body(out, mime_type, resource)
    return out.getvalue()


class TestNotFoundBody:
    """Tests for the body of missing resources."""

    def test_fixed_error_body(self, docroot: Path):
        assert body_for(docroot, "/missing.html", "text/html") == b"<h3>Error: 404 not Found</h3>"

    def test_error_body_for_missing_image(self, docroot: Path):
        """Test that the error body doesn't depend on content type."""
        assert body_for(docroot, "/missing.png", "image/png") == NOT_FOUND_BODY

    def test_error_body_for_directory(self, docroot: Path):
        assert body_for(docroot, "/photos", "text/html") == NOT_FOUND_BODY


class TestBinaryCopy:
    """Tests for image content."""

    def test_bytes_are_identical(self, docroot: Path):
        """Test that image bytes are copied without transformation."""
        expected = (docroot / "cat.png").read_bytes()

        assert body_for(docroot, "/cat.png", "image/png") == expected

    def test_tokens_not_expanded_in_images(self, docroot: Path):
        """Test that a token-looking line inside an image is left alone."""
        body = body_for(docroot, "/cat.png", "image/png")

        assert b"\n<cs371date>\n" in body
        assert b"Farouk" not in body

    def test_large_file_in_chunks(self, docroot: Path):
        data = bytes(range(256)) * 1024
        (docroot / "big.gif").write_bytes(data)

        out = io.BytesIO()
        with resolve_resource("/big.gif", docroot) as resource:
            ContentStreamer(chunk_size=1000).write(out, "image/gif", resource)

        assert out.getvalue() == data


class TestTextCopy:
    """Tests for text content with template tokens."""

    def test_date_token(self, docroot: Path):
        """Test that the date precedes the literal date token."""
        body = body_for(docroot, "/index.html", "text/html")

        assert re.search(DATE_PATTERN + rb"<cs371date>", body)

    def test_server_token(self, docroot: Path):
        """Test that the signature precedes the literal server token."""
        body = body_for(docroot, "/index.html", "text/html")

        assert b"Farouk's Server.<cs371server>" in body

    def test_newlines_are_dropped(self, docroot: Path):
        """Test that line terminators are not written back."""
        (docroot / "plain.html").write_bytes(b"<p>one</p>\r\n<p>two</p>\n<p>three</p>")

        assert body_for(docroot, "/plain.html", "text/html") == b"<p>one</p><p>two</p><p>three</p>"

    def test_full_page(self, docroot: Path):
        body = body_for(docroot, "/index.html", "text/html")

        assert re.fullmatch(
            rb"<html><body>" + DATE_PATTERN + rb"<cs371date>"
            rb"Farouk's Server\.<cs371server></body></html>",
            body,
        )

    def test_token_must_be_whole_line(self, docroot: Path):
        """Test that tokens embedded in a longer line are not expanded."""
        (docroot / "inline.html").write_bytes(
            b"<p><cs371date></p>\n <cs371server>\n<cs371server> \n"
        )

        body = body_for(docroot, "/inline.html", "text/html")

        assert body == b"<p><cs371date></p> <cs371server><cs371server> "

    def test_token_on_last_line_without_newline(self, docroot: Path):
        (docroot / "end.html").write_bytes(b"<p>x</p>\n<cs371server>")

        assert body_for(docroot, "/end.html", "text/html") == b"<p>x</p>Farouk's Server.<cs371server>"

    def test_bare_carriage_return_ends_line(self, docroot: Path):
        """Test that a lone "\\r" terminates a line, so a token after it is expanded."""
        (docroot / "mac.html").write_bytes(b"<p>x</p>\r<cs371server>\r")

        assert body_for(docroot, "/mac.html", "text/html") == b"<p>x</p>Farouk's Server.<cs371server>"

    def test_mixed_line_endings(self, docroot: Path):
        (docroot / "mixed.html").write_bytes(b"<cs371server>\r\n<p>a</p>\r\r\n<cs371server>\n")

        assert body_for(docroot, "/mixed.html", "text/html") == (
            b"Farouk's Server.<cs371server><p>a</p>Farouk's Server.<cs371server>"
        )

    def test_non_ascii_bytes_pass_through(self, docroot: Path):
        """Test that text bytes outside ASCII reach the client unchanged."""
        (docroot / "bytes.html").write_bytes(b"caf\xc3\xa9 \xe9\xff\n")

        assert body_for(docroot, "/bytes.html", "text/html") == b"caf\xc3\xa9 \xe9\xff"

    def test_handle_left_open_for_resource(self, docroot: Path):
        """Test that the line reader leaves closing the file to the Resource."""
        with resolve_resource("/index.html", docroot) as resource:
            handle = resource.handle
            write_body(io.BytesIO(), "text/html", resource)
            assert not handle.closed

        assert handle.closed

    def test_unknown_extension_is_templated(self, docroot: Path):
        """Test that any non-image content is treated as text."""
        (docroot / "notes.txt").write_bytes(b"<cs371server>\n")

        assert body_for(docroot, "/notes.txt", "text/html") == b"Farouk's Server.<cs371server>"

    def test_empty_file(self, docroot: Path):
        (docroot / "empty.html").write_bytes(b"")

        assert body_for(docroot, "/empty.html", "text/html") == b""


class TestRenderDate:
    """Tests for the date token rendering."""

    def test_format(self):
        assert render_date(datetime(2024, 3, 7, 13, 45, 2)) == "07/03/24 13:45:02"

    def test_default_is_now(self):
        assert re.fullmatch(DATE_PATTERN.decode(), render_date())


class TestStreamFaults:
    """Tests for client write failures."""

    def test_error_body_write_failure(self, docroot: Path, broken_stream):
        with resolve_resource("/missing.html", docroot) as resource:
            with pytest.raises(StreamError) as exc_info:
                write_body(broken_stream, "text/html", resource)

        assert exc_info.value.stage == "body"

    def test_binary_write_failure(self, docroot: Path, broken_stream):
        with resolve_resource("/cat.png", docroot) as resource:
            with pytest.raises(StreamError):
                write_body(broken_stream, "image/png", resource)

    def test_text_write_failure_stops_copy(self, docroot: Path, make_broken_stream):
        """Test that nothing more is written after the first failure."""
        stream = make_broken_stream(fail_after=2)

        with resolve_resource("/index.html", docroot) as resource:
            with pytest.raises(StreamError):
                write_body(stream, "text/html", resource)

        assert stream.written == b"<html><body>"
