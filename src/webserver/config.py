"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables live in one immutable object, built once at startup and handed
explicitly to every component that needs it:

    ServerConfig ──► Listener          (host, port, backlog, poll interval)
                 ──► Connection        (connection_timeout)
                 ──► Router            (default_file)
                 ──► Response Builder  (web_root, url_prefix, port,
                                        public_host, strip_newlines)

There is no module-level mutable state. Threads share the config, and since
it is frozen they can read it without locks.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the web server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, connection_timeout, accept_poll_interval

    CONTENT SETTINGS
    - web_root, default_file, url_prefix, public_host, strip_newlines

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """The IP address to bind to."""

    port: int = 8080
    """
    The port number to listen on.
    0 lets the OS pick a free port (see Listener.address).
    """

    backlog: int = 50
    """Maximum number of queued, not yet accepted connections."""

    connection_timeout: Optional[float] = None
    """
    Socket timeout for accepted connections, in seconds.
    None = blocking forever, so a silent peer holds its thread indefinitely.
    """

    accept_poll_interval: float = 1.0
    """How often a blocked accept() wakes up to check for shutdown."""

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    web_root: str = "webroot"
    """Directory that requested paths are resolved against."""

    default_file: str = "index.html"
    """File name the fixed subdirectory route matches on."""

    url_prefix: str = "/webroot"
    """
    URL path under which the web root is also reachable.
    The listing pages link to "<url_prefix>/...", and a request for
    "<url_prefix>/a/index.html" is served from web_root/a/index.html.
    """

    public_host: str = "127.0.0.1"
    """Host name written into the absolute links of the root listing."""

    strip_newlines: bool = True
    """
    Join static file lines without separators.
    Set to False to serve the file text unchanged.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        WEBSERVER_HOST            Bind address (default: 127.0.0.1)
        WEBSERVER_PORT            Port (default: 8080)
        WEBSERVER_WEB_ROOT        Web root directory (default: webroot)
        WEBSERVER_DEFAULT_FILE    Default file name (default: index.html)
        WEBSERVER_URL_PREFIX      URL alias of the web root (default: /webroot)
        WEBSERVER_PUBLIC_HOST     Host used in listing links (default: 127.0.0.1)
        WEBSERVER_STRIP_NEWLINES  "0"/"false" keeps file newlines (default: on)
        WEBSERVER_LOG_LEVEL       Logging level (default: INFO)

        =====================================================================

        Raises:
            ValueError: If WEBSERVER_PORT is not an integer.
        """
        strip = os.getenv("WEBSERVER_STRIP_NEWLINES", "1").strip().lower()
        return cls(
            host=os.getenv("WEBSERVER_HOST", "127.0.0.1"),
            port=_int_env("WEBSERVER_PORT", 8080),
            web_root=os.getenv("WEBSERVER_WEB_ROOT", "webroot"),
            default_file=os.getenv("WEBSERVER_DEFAULT_FILE", "index.html"),
            url_prefix=os.getenv("WEBSERVER_URL_PREFIX", "/webroot"),
            public_host=os.getenv("WEBSERVER_PUBLIC_HOST", "127.0.0.1"),
            strip_newlines=strip not in ("0", "false", "no", "off"),
            log_level=os.getenv("WEBSERVER_LOG_LEVEL", "INFO"),
        )

    @property
    def log_level_number(self) -> int:
        """The numeric logging level for log_level."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad value fails before the socket is bound.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if not self.default_file:
            raise ValueError("default_file must not be empty")

        if self.url_prefix and not self.url_prefix.startswith("/"):
            raise ValueError(f"url_prefix must start with '/': {self.url_prefix}")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.connection_timeout is not None and self.connection_timeout <= 0:
            raise ValueError("connection_timeout must be > 0")

        if self.accept_poll_interval <= 0:
            raise ValueError("accept_poll_interval must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
