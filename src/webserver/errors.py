"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure the server knows about has its own exception class. Where it
is raised tells you how far it is allowed to travel:

    ┌──────────────────────────┬──────────────────┬───────────────────────┐
    │ Exception                │ Raised by        │ Stops at              │
    ├──────────────────────────┼──────────────────┼───────────────────────┤
    │ BindError                │ Listener.start() │ process supervisor    │
    │ AcceptError              │ accept loop      │ accept loop (logged)  │
    │ MalformedRequestError    │ request parser   │ connection handler    │
    │ StaticFileNotFoundError  │ static handler   │ connection handler    │
    │ DirectoryListError       │ listing handler  │ connection handler    │
    └──────────────────────────┴──────────────────┴───────────────────────┘

Nothing that happens inside one connection may reach the Listener or
another connection. The handler thread catches, logs and closes.

=============================================================================
"""

from typing import Optional, Tuple


class WebServerError(Exception):
    """Base class for all server errors."""


class BindError(WebServerError):
    """
    The listening socket could not acquire its address.

    Fatal to startup. The original OSError is chained as __cause__.
    """

    def __init__(self, address: Tuple[str, int], reason: str):
        super().__init__(f"Cannot bind to {address[0]}:{address[1]}: {reason}")
        self.address = address


class AcceptError(WebServerError):
    """A transient failure while accepting a connection."""


class MalformedRequestError(WebServerError):
    """
    The request header block was empty or had no method/path tokens.

    Attributes:
        raw: Whatever was read before giving up (may be empty).
    """

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class StaticFileNotFoundError(WebServerError, FileNotFoundError):
    """The resolved static file does not exist or cannot be read."""

    def __init__(self, path: str, reason: Optional[str] = None):
        message = f"File not found: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path


class DirectoryListError(WebServerError):
    """The web root could not be listed (missing, not a directory, unreadable)."""

    def __init__(self, path: str, reason: Optional[str] = None):
        message = f"Cannot list directory: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path
