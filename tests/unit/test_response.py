"""
Unit tests for the response model.
"""

import pytest

from webserver.http.response import (
    RenderedResponse,
    STATUS_LINE,
    content_type_for,
)


class TestContentType:

    @pytest.mark.parametrize("path, expected", [
        ("/index.html", "text/html"),
        ("/a/b/page.html", "text/html"),
        ("/notes.htmlish", "text/html"),
        ("/x.html.txt", "text/html"),
        ("/readme.txt", "text/plain"),
        ("/page.htm", "text/plain"),
        ("/", "text/plain"),
        ("/HTML", "text/plain"),
    ])
    def test_substring_match(self, path, expected):
        """Any path containing ".html" is HTML; the rest is plain text."""
        assert content_type_for(path) == expected


class TestRenderedResponse:
    """Tests for RenderedResponse class."""

    def test_status_line(self):
        response = RenderedResponse()
        assert response.status_line == "HTTP/1.1 200 OK"
        assert STATUS_LINE == "HTTP/1.1 200 OK"

    def test_for_path(self):
        response = RenderedResponse.for_path("/a.txt", "hello")
        assert response.headers == [("Content-Type", "text/plain")]
        assert response.content_type == "text/plain"
        assert response.body == "hello"

    def test_html(self):
        assert RenderedResponse.html("<p>").content_type == "text/html"

    def test_get_header_case_insensitive(self):
        response = RenderedResponse(headers=[("X-Custom", "value")])
        assert response.get_header("x-custom") == "value"
        assert response.get_header("missing", "default") == "default"

    def test_to_bytes(self):
        response = RenderedResponse.for_path("/index.html", "<p>hi</p>")
        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/html\r\n"
            b"\r\n"
            b"<p>hi</p>\n"
        )

    def test_to_bytes_keeps_header_order(self):
        response = RenderedResponse(headers=[("B", "2"), ("A", "1")], body="")
        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\nB: 2\r\nA: 1\r\n\r\n\n"

    def test_to_bytes_encodes_utf8(self):
        response = RenderedResponse.for_path("/x.txt", "café")
        assert response.to_bytes().endswith("café\n".encode("utf-8"))
