"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves the file at web_root + requested path.

    Request: GET /notes/todo.txt          web_root = "webroot"

    1. Resolve:  "webroot" + "/notes/todo.txt"  →  webroot/notes/todo.txt
                 "/webroot/notes/todo.txt" names the same file: the
                 url_prefix the listing pages link under is stripped first
    2. Read the file as text
    3. Join its lines WITHOUT separators (strip_newlines=True)
    4. Content-Type from the requested path

=============================================================================
KNOWN GAPS
=============================================================================

- The path is not normalized. "/../secret.txt" is read from outside the
  web root.
- With strip_newlines on, "line one\\nline two\\n" is served as
  "line oneline two". Turn it off with ServerConfig(strip_newlines=False).
- The whole file is read into memory before anything is sent.

=============================================================================
"""

import logging
import os

from ..config import ServerConfig
from ..errors import StaticFileNotFoundError
from ..http.response import RenderedResponse
from ..http.router import StaticFile


logger = logging.getLogger(__name__)


def strip_url_prefix(requested_path: str, url_prefix: str) -> str:
    """
    Map "<url_prefix>/rest" onto "/rest".

    Paths outside the prefix, and the prefix itself without a trailing
    segment, are returned unchanged.
    """
    if url_prefix and requested_path.startswith(url_prefix.rstrip("/") + "/"):
        return requested_path[len(url_prefix.rstrip("/")):]
    return requested_path


def resolve_path(web_root: str, requested_path: str, url_prefix: str = "") -> str:
    """
    Join web_root and the requested path as strings.

    The URL prefix the listing pages link under is removed first, so
    "/webroot/a/index.html" and "/a/index.html" name the same file.
    No ".." handling and no symlink resolution happen here.
    """
    requested_path = strip_url_prefix(requested_path, url_prefix)
    if requested_path.startswith(("/", os.sep)):
        return web_root + requested_path
    return web_root + "/" + requested_path


def read_text(path: str, strip_newlines: bool = True) -> str:
    """
    Read a text file fully.

    Args:
        path: Filesystem path.
        strip_newlines: Concatenate lines with their terminators removed.
                        "\\n", "\\r\\n" and "\\r" all count as terminators.

    Raises:
        StaticFileNotFoundError: If the file is missing, a directory, or
                                 unreadable.
    """
    try:
        if strip_newlines:
            # Universal newlines turn every terminator into "\n"
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                return "".join(line.rstrip("\n") for line in f)
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
            return f.read()
    except OSError as e:
        raise StaticFileNotFoundError(path, e.strerror or str(e)) from e


def render_static_file(strategy: StaticFile, config: ServerConfig) -> RenderedResponse:
    """Render the requested file as the response body."""
    full_path = resolve_path(config.web_root, strategy.path, config.url_prefix)
    body = read_text(full_path, strip_newlines=config.strip_newlines)
    logger.debug(f"Serving {full_path} ({len(body)} chars)")
    return RenderedResponse.for_path(strategy.path, body)
