"""
=============================================================================
WEB SERVER: WIRING THE PIPELINE TOGETHER
=============================================================================

    start(config)
        └──► Listener.start()                    bind + accept loop thread
                 │
                 └──► for every connection, on its own thread:
                          handle_connection(conn, config)
                              │
                              ├──► conn.read_header()       READING_HEADER
                              ├──► parse_request()
                              ├──► router.select()          ROUTING
                              ├──► handlers.render()        RENDERING
                              ├──► conn.send_response()     WRITING
                              └──► conn.close()             CLOSED (always)

    stop(listener)
        └──► Listener.stop()                     close socket, no draining

=============================================================================
ISOLATION
=============================================================================

handle_connection() never raises. Whatever goes wrong inside one
connection (a malformed request, a missing file, a reset peer) is logged
and the connection is closed, usually without a response. The Listener
and every other connection carry on untouched.

=============================================================================
"""

import logging
from typing import Optional

from .config import ServerConfig
from .core import Connection, ConnectionState, Listener
from .errors import DirectoryListError, MalformedRequestError, StaticFileNotFoundError
from .handlers import render
from .http import Router, parse_request


logger = logging.getLogger(__name__)


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: ServerConfig) -> None:
    """Configure logging for the process at config.log_level."""
    numeric = config.log_level_number

    logging.basicConfig(
        level=numeric,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )

    logging.getLogger("webserver").setLevel(numeric)


# =============================================================================
# CONNECTION HANDLER
# =============================================================================

def handle_connection(conn: Connection, config: ServerConfig, router: Optional[Router] = None) -> None:
    """
    Serve exactly one request on an accepted connection, then close it.

    Runs on its own thread. Never raises.

    Args:
        conn: The accepted connection.
        config: Shared, read-only server configuration.
        router: Route table to use; built from config.default_file if not given.
    """
    if router is None:
        router = Router(default_file=config.default_file)

    try:
        message = conn.read_header()
        logger.debug(f"[{conn.id}] Message:\r\n{message}")

        request = parse_request(message)

        conn.transition(ConnectionState.ROUTING)
        strategy = router.select(request.method, request.path)
        logger.info(
            f"[{conn.id}] {conn.client_ip} {request.method} {request.path} "
            f"-> {type(strategy).__name__}"
        )

        conn.transition(ConnectionState.RENDERING)
        response = render(strategy, config)

        conn.send_response(response.to_bytes())

    except MalformedRequestError as e:
        conn.fail()
        logger.warning(f"[{conn.id}] Connection handler: malformed request: {e}")

    except (StaticFileNotFoundError, DirectoryListError) as e:
        conn.fail()
        logger.error(f"[{conn.id}] Response builder: {e}")

    except OSError as e:
        logger.error(f"[{conn.id}] Connection handler: I/O error while {conn.state.value}: {e}")
        conn.fail()

    except Exception as e:
        conn.fail()
        logger.exception(f"[{conn.id}] Connection handler: unexpected error: {e}")

    finally:
        conn.close()


# =============================================================================
# LIFECYCLE
# =============================================================================

def start(config: Optional[ServerConfig] = None) -> Listener:
    """
    Start serving in the background.

    Args:
        config: Server configuration; defaults to ServerConfig().

    Returns:
        The running Listener, to be passed to stop().

    Raises:
        ValueError: If the configuration is invalid.
        BindError: If the port is unavailable.
    """
    config = config or ServerConfig()
    config.validate()

    router = Router(default_file=config.default_file)

    def handler(conn: Connection, cfg: ServerConfig) -> None:
        handle_connection(conn, cfg, router)

    listener = Listener(config, handler)
    listener.start()
    logger.info(f"Serving {config.web_root!r} on port {listener.port}")
    return listener


def stop(listener: Listener) -> None:
    """Stop accepting connections. In-flight connections finish on their own."""
    listener.stop()
