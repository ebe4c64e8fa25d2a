"""
=============================================================================
webserver: a minimal threaded HTTP/1.1 file server
=============================================================================

Serves a web root over plain sockets, one thread per connection:

    GET /                              → listing of the web root's subdirectories
    GET .../subdirectory/index.html    → fixed listing of a.txt .. d.txt
    anything else                      → the file at web_root + path

QUICK START:
────────────

    from webserver import ServerConfig, start, stop

    listener = start(ServerConfig(port=8080, web_root="webroot"))
    ...
    stop(listener)

Or from the command line:

    python -m webserver --port 8080 --web-root webroot

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .core import Listener, Connection, ConnectionState
from .errors import (
    WebServerError,
    BindError,
    AcceptError,
    MalformedRequestError,
    StaticFileNotFoundError,
    DirectoryListError,
)
from .server import start, stop, handle_connection, setup_logging

__all__ = [
    "ServerConfig",
    "Listener",
    "Connection",
    "ConnectionState",
    "WebServerError",
    "BindError",
    "AcceptError",
    "MalformedRequestError",
    "StaticFileNotFoundError",
    "DirectoryListError",
    "start",
    "stop",
    "handle_connection",
    "setup_logging",
    "__version__",
]
