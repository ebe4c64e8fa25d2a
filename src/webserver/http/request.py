"""
=============================================================================
REQUEST LINE PARSING
=============================================================================

The server only cares about the first line of a request:

    GET /subdirectory/index.html HTTP/1.1\r\n     ◄── request line
    Host: 127.0.0.1:8080\r\n                       ◄── kept, never interpreted
    User-Agent: curl/8.5.0\r\n
    \r\n                                           ◄── end of header block

The request line is split on whitespace. The first token is the method
(uppercased), the second is the path (lowercased). Everything after the
second token, the HTTP version included, is ignored. Query strings and
fragments stay part of the path.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Tuple

from ..errors import MalformedRequestError


LINE_BREAKS = ("\r\n", "\n")


@dataclass(frozen=True)
class IncomingRequest:
    """
    A parsed request header block.

    Built once per connection from the raw header text; never mutated.

    Attributes:
        method: Request method, uppercased ("GET", "HEAD", ...).
        path: Requested path, lowercased, query string included.
        raw_header_lines: Header lines after the request line, without
                          their line terminators.
        message: The full header block as read, terminators included.
    """

    method: str
    path: str
    raw_header_lines: Tuple[str, ...] = ()
    message: str = field(default="", repr=False)


def parse_request(message: str) -> IncomingRequest:
    """
    Parse the header block read from a connection.

    Args:
        message: Header lines concatenated with their terminators.

    Returns:
        The parsed request.

    Raises:
        MalformedRequestError: If nothing was read or the first line has
                               fewer than two whitespace-separated tokens.
    """
    if not message:
        raise MalformedRequestError("Empty request", raw=message)

    lines = message.splitlines()
    tokens = lines[0].split() if lines else []
    if len(tokens) < 2:
        raise MalformedRequestError(
            f"Invalid request line: {lines[0] if lines else ''!r}",
            raw=message,
        )

    headers = tuple(line for line in lines[1:] if line)

    return IncomingRequest(
        method=tokens[0].upper(),
        path=tokens[1].lower(),
        raw_header_lines=headers,
        message=message,
    )


def is_header_terminator(line: str) -> bool:
    """True for the bare line break that ends an HTTP header block."""
    return line in LINE_BREAKS
