"""
=============================================================================
CONNECTION DISPATCH
=============================================================================

Decides WHERE a connection gets handled. The acceptor never handles a
connection itself; it hands it to a Dispatcher:

    SocketServer._accept_loop()
        │
        └──► dispatcher.dispatch(handler, conn)
                 │
                 ├── ThreadPerConnectionDispatcher → new thread per conn
                 └── InlineDispatcher              → same thread (tests)

The default is one new thread per accepted connection with no upper bound:
no pool, no queue, no admission control. A slow or stalled client only
ever blocks its own thread. The flip side is that nothing stops a flood of
idle connections from exhausting threads; a bounded pool or an async
scheduler can be dropped in here without the request handler noticing.

=============================================================================
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable

from .connection import Connection


logger = logging.getLogger(__name__)

ConnectionHandler = Callable[[Connection], None]


class Dispatcher(ABC):
    """Strategy for running a connection handler."""

    @abstractmethod
    def dispatch(self, handler: ConnectionHandler, conn: Connection) -> None:
        """Arrange for handler(conn) to run. Must not raise for handler errors."""


class ThreadPerConnectionDispatcher(Dispatcher):
    """
    One daemon thread per connection.

    Daemon threads do not keep the process alive at exit: when the accept
    loop stops, connections still in flight are abandoned with the process.
    """

    def dispatch(self, handler: ConnectionHandler, conn: Connection) -> None:
        thread = threading.Thread(
            target=handler,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()
        logger.debug(f"[{conn.id}] Dispatched to {thread.name}")


class InlineDispatcher(Dispatcher):
    """
    Run the handler on the calling thread.

    Serializes all connections behind the accept loop, so it is only
    suitable for tests and debugging.
    """

    def dispatch(self, handler: ConnectionHandler, conn: Connection) -> None:
        handler(conn)
