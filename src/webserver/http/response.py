"""
=============================================================================
RESPONSE MODEL
=============================================================================

Every response this server sends has the same shape:

    HTTP/1.1 200 OK\r\n              ◄── status line (always 200)
    Content-Type: text/html\r\n      ◄── guessed from the requested path
    \r\n                             ◄── end of headers
    <body>\n                         ◄── body, then one trailing newline

There is no Content-Length. The connection is closed after the write, and
the close is what tells the client the body is complete.

=============================================================================
CONTENT-TYPE GUESSING
=============================================================================

The guess is a substring check, not an extension lookup:

    "/index.html"      → text/html
    "/notes.htmlish"   → text/html      (".html" appears in the string)
    "/readme.txt"      → text/plain
    "/page.htm"        → text/plain

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Tuple


STATUS_LINE = "HTTP/1.1 200 OK"

TEXT_HTML = "text/html"
TEXT_PLAIN = "text/plain"


def content_type_for(path: str) -> str:
    """Guess the Content-Type of a requested path."""
    if ".html" in path:
        return TEXT_HTML
    return TEXT_PLAIN


@dataclass
class RenderedResponse:
    """
    A response ready to be written to the socket.

    Built fresh for each request and thrown away after the write.
    """

    status_line: str = STATUS_LINE
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: str = ""

    @classmethod
    def for_path(cls, path: str, body: str = "") -> "RenderedResponse":
        """Build a 200 response whose Content-Type is guessed from path."""
        return cls(headers=[("Content-Type", content_type_for(path))], body=body)

    @classmethod
    def html(cls, body: str) -> "RenderedResponse":
        return cls(headers=[("Content-Type", TEXT_HTML)], body=body)

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        for header, value in self.headers:
            if header.lower() == name.lower():
                return value
        return default

    @property
    def content_type(self) -> str:
        return self.get_header("Content-Type")

    def head(self) -> str:
        """Status line and headers, including the blank separator line."""
        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in self.headers)
        lines.append("")
        return "\r\n".join(lines) + "\r\n"

    def to_bytes(self) -> bytes:
        """
        Serialize for a single socket write.

        The trailing "\\n" closes the response the way a line-oriented
        writer would.
        """
        return (self.head() + self.body + "\n").encode("utf-8")
