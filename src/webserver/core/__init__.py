"""
Core Server Components

Low-level networking: the Listener accept loop and the per-client
Connection wrapper.
"""

from .socket_server import Listener
from .connection import Connection, ConnectionState

__all__ = ["Listener", "Connection", "ConnectionState"]
