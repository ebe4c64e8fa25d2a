"""
=============================================================================
LISTENER: TCP ACCEPT LOOP
=============================================================================

The Listener owns the bound server socket. It does one thing: accept
connections and hand each one to a brand new thread.

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── bound once in start()
                    └───────────┬───────────┘
                                │ accept()
        ┌───────────────────────┼───────────────────────┐
        ▼                       ▼                       ▼
  ┌───────────┐           ┌───────────┐           ┌───────────┐
  │ Thread #1 │           │ Thread #2 │           │ Thread #N │
  │ handler() │           │ handler() │           │ handler() │
  └───────────┘           └───────────┘           └───────────┘

There is no pool and no admission limit: a burst of N connections starts N
threads. The accept loop never waits for a handler.

=============================================================================
SHUTDOWN
=============================================================================

stop() is the only cancellation mechanism:

    1. Mark the listener closed
    2. shutdown() + close() the listening socket
         └── wakes a blocked accept() with an OSError
    3. The accept loop sees the closed flag and exits quietly

Threads already handling a connection are not interrupted; they finish on
their own. Handler threads are not daemons, so the interpreter waits for
them before the process exits. As a fallback the listening socket also has a short timeout
(accept_poll_interval) so the loop notices the closed flag even on
platforms where closing a socket does not wake accept().

=============================================================================
"""

import logging
import socket
import threading
from dataclasses import replace
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from ..errors import AcceptError, BindError
from .connection import Connection


logger = logging.getLogger(__name__)


ConnectionHandler = Callable[[Connection, ServerConfig], None]


class Listener:
    """
    Accepts TCP connections and runs a handler thread per connection.

    Usage:
        listener = Listener(config, handle_connection)
        listener.start()          # returns immediately
        ...
        listener.stop()           # unblocks accept, does not drain handlers
    """

    def __init__(self, config: ServerConfig, handler: ConnectionHandler):
        """
        Args:
            config: Server configuration (host, port, backlog, ...).
            handler: Called as handler(conn, config) on a new thread for
                     every accepted connection.
        """
        self.config = config
        self.handler = handler

        self._socket: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._closed = threading.Event()
        self._address: Optional[Tuple[str, int]] = None
        self.connections_accepted = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._closed.is_set()

    @property
    def is_closed(self) -> bool:
        return self._closed.is_set()

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (ip, port); the real port when config.port is 0."""
        if self._address is None:
            return (self.config.host, self.config.port)
        return self._address

    @property
    def port(self) -> int:
        return self.address[1]

    # =========================================================================
    # STARTUP
    # =========================================================================

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Allow a restart while the old socket lingers in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.settimeout(self.config.accept_poll_interval)
        return sock

    def start(self) -> "Listener":
        """
        Bind, listen and start the accept loop on its own thread.

        Returns:
            self, already accepting.

        Raises:
            BindError: If the address cannot be bound.
        """
        if self._thread is not None:
            raise RuntimeError("Listener already started")

        sock = self._create_socket()
        address = (self.config.host, self.config.port)
        try:
            sock.bind(address)
            sock.listen(self.config.backlog)
        except OSError as e:
            sock.close()
            logger.error(f"Failed to bind to {address[0]}:{address[1]}: {e}")
            raise BindError(address, e.strerror or str(e)) from e

        self._socket = sock
        self._address = sock.getsockname()[:2]
        if self.config.port == 0:
            # Listing links are built from config.port
            self.config = replace(self.config, port=self._address[1])

        self._thread = threading.Thread(
            target=self._accept_loop,
            name=f"listener-{self.port}",
            daemon=True,
        )
        self._thread.start()

        logger.info(f"Listening on {self.address[0]}:{self.address[1]}")
        return self

    # =========================================================================
    # ACCEPT LOOP
    # =========================================================================

    def _accept_loop(self):
        """Accept connections until the listener is closed."""
        while not self._closed.is_set():
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Poll the closed flag
            except OSError as e:
                if self._closed.is_set() or self._socket.fileno() == -1:
                    break  # stop() closed the socket under us
                error = AcceptError(f"Accept failed: {e}")
                logger.error(f"Listener: {error}")
                continue

            self._spawn(client_socket, client_address)

        logger.debug("Accept loop exited")

    def _spawn(self, client_socket: socket.socket, client_address: tuple):
        """Wrap the socket and hand it to a new handler thread."""
        try:
            conn = Connection(
                socket=client_socket,
                address=client_address,
                timeout=self.config.connection_timeout,
            )
        except OSError as e:
            logger.error(f"Listener: failed to set up connection from {client_address}: {e}")
            client_socket.close()
            return

        self.connections_accepted += 1
        logger.debug(f"[{conn.id}] Accepted connection from {conn.client_ip}:{conn.client_port}")

        thread = threading.Thread(
            target=self.handler,
            args=(conn, self.config),
            name=f"conn-{conn.id}",
            daemon=False,
        )
        thread.start()

    # =========================================================================
    # SHUTDOWN
    # =========================================================================

    def stop(self, timeout: Optional[float] = 5.0):
        """
        Close the listening socket and wait for the accept loop to exit.

        In-flight handler threads keep running. Safe to call more than once.
        """
        if self._closed.is_set():
            return
        self._closed.set()
        logger.info("Stopping listener...")

        if self._socket is not None:
            try:
                # Wakes a blocked accept() on Linux
                self._socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            try:
                self._socket.close()
            except OSError:
                pass

        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

        logger.info("Listener stopped")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the accept loop to exit. Returns True if it has."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()
