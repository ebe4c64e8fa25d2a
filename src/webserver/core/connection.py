"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

This module wraps one accepted client socket. A connection serves exactly
one request and is then closed; there is no keep-alive.

=============================================================================
READING THE HEADER BLOCK LINE BY LINE
=============================================================================

TCP is a byte stream, so the request may arrive in any number of chunks.
Instead of buffering recv() calls by hand we wrap the socket in a buffered
file object (socket.makefile) and read it one line at a time:

    GET / HTTP/1.1\r\n        ← readline() #1
    Host: localhost\r\n       ← readline() #2
    \r\n                      ← readline() #3, bare line break: stop

If the peer closes first, readline() returns b"" and we stop with
whatever was collected. Each line is kept WITH its terminator, so the
message is exactly what the client sent.

=============================================================================
CONNECTION STATES
=============================================================================

    ACCEPTED ──► READING_HEADER ──► ROUTING ──► RENDERING ──► WRITING ──► CLOSED
                       │                            │             │          ▲
                       └────────────────────────────┴─────────────┴─► FAILED ┘

Every path ends in CLOSED. close() is idempotent and safe to call from a
finally block no matter where processing stopped.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..http.request import is_header_terminator


logger = logging.getLogger(__name__)

DRAIN_TIMEOUT = 0.5
DRAIN_LIMIT = 64 * 1024


class ConnectionState(Enum):
    """Connection lifecycle states."""
    ACCEPTED = "accepted"              # Just accepted, nothing read yet
    READING_HEADER = "reading_header"  # Reading the request header block
    ROUTING = "routing"                # Choosing a response strategy
    RENDERING = "rendering"            # Building the response
    WRITING = "writing"                # Sending the response
    FAILED = "failed"                  # An error stopped processing
    CLOSED = "closed"                  # Socket released


@dataclass
class Connection:
    """
    Represents one accepted client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier used as a log prefix.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        timeout: Socket timeout in seconds, None for blocking I/O.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.ACCEPTED
    created_at: float = field(default_factory=time.time)
    timeout: Optional[float] = None

    _reader: object = field(default=None, repr=False)
    _history: List[ConnectionState] = field(default_factory=list, repr=False)

    def __post_init__(self):
        self.socket.settimeout(self.timeout)
        self._history.append(self.state)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    @property
    def history(self) -> List[ConnectionState]:
        """Every state this connection has been in, in order."""
        return list(self._history)

    @property
    def is_closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    def transition(self, state: ConnectionState) -> None:
        """Move to a new state. A closed connection stays closed."""
        if self.state == ConnectionState.CLOSED:
            return
        self.state = state
        self._history.append(state)

    def fail(self) -> None:
        """Mark processing as failed."""
        self.transition(ConnectionState.FAILED)

    # =========================================================================
    # READING
    # =========================================================================

    def read_header(self) -> str:
        """
        Read the request header block.

        Reads lines until a bare line break or end of stream. Lines are
        decoded as Latin-1 so any byte sequence round-trips.

        Returns:
            The header block including line terminators. Empty if the peer
            closed before sending a line.

        Raises:
            OSError: On socket errors (reset, timeout, ...).
        """
        self.transition(ConnectionState.READING_HEADER)

        if self._reader is None:
            self._reader = self.socket.makefile("rb")

        lines = []
        while True:
            raw = self._reader.readline()
            if not raw:
                break  # Peer closed the stream
            line = raw.decode("latin-1")
            lines.append(line)
            if is_header_terminator(line):
                break

        return "".join(lines)

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> None:
        """
        Send the whole response in one buffered write.

        Raises:
            OSError: If the peer went away.
        """
        self.transition(ConnectionState.WRITING)
        self.socket.sendall(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        shutdown(SHUT_WR) sends FIN first so the client sees a clean end of
        the response, then the file descriptor is released.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            # Unread bytes at close() turn the FIN into a RST, which can
            # discard the response on the client side. Bounded by DRAIN_LIMIT
            # bytes and DRAIN_TIMEOUT seconds so a chatty peer cannot hold us.
            deadline = time.monotonic() + DRAIN_TIMEOUT
            drained = 0
            while drained < DRAIN_LIMIT:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(4096)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass

        if self._reader is not None:
            try:
                self._reader.close()
            except OSError:
                pass
            self._reader = None

        try:
            self.socket.close()
        except OSError:
            pass

        self.transition(ConnectionState.CLOSED)
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
