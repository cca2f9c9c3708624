"""
=============================================================================
CORE NETWORKING
=============================================================================

    SocketServer   accepts TCP connections on the configured port
    Connection     one client socket: read a line, send a response, close
    Dispatcher     where each connection runs (a new thread by default)

Nothing in this package knows about files, paths or HTTP status codes;
that is the handler's job.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .dispatch import Dispatcher, InlineDispatcher, ThreadPerConnectionDispatcher

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "Dispatcher",
    "InlineDispatcher",
    "ThreadPerConnectionDispatcher",
]
