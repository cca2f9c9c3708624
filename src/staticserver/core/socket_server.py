"""
=============================================================================
TCP ACCEPTOR
=============================================================================

Owns the listening socket. Its whole job:

    socket() ──► bind(host, port) ──► listen() ──► loop: accept()
                                                          │
                                  Connection(client) ◄────┘
                                          │
                          dispatcher.dispatch(handler, conn)

It never reads or writes client data itself.

=============================================================================
SOCKET OPTIONS
=============================================================================

SO_REUSEADDR:
    A stopped server leaves its port in TIME_WAIT for a while. Without this
    option, restarting immediately fails with "Address already in use".

Accept timeout (1 second):
    accept() would otherwise block forever, and the loop could never notice
    that shutdown() was requested. Timing out once a second and re-checking
    the running flag makes the loop interruptible. This is a property of the
    LISTENING socket only; client sockets stay fully blocking.

=============================================================================
SIGNALS
=============================================================================

SIGINT (Ctrl+C) and SIGTERM (kill, docker stop) stop the accept loop.
Python only allows installing signal handlers from the main thread, so
when the server runs on another thread (tests, embedding) they are left
alone and shutdown() must be called instead.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Tuple

from ..config import ServerConfig
from .connection import Connection
from .dispatch import ConnectionHandler, Dispatcher, ThreadPerConnectionDispatcher


logger = logging.getLogger(__name__)


class SocketServer:
    """
    TCP acceptor.

    Usage:
        def handle(conn: Connection):
            with conn:
                ...

        server = SocketServer(config)
        server.start(handle)   # Blocks until shutdown()

    Raises from start():
        OSError: If the socket cannot be bound. This is fatal; it is not
                 retried.
    """

    def __init__(self, config: ServerConfig, dispatcher: Optional[Dispatcher] = None):
        self.config = config
        self.dispatcher = dispatcher or ThreadPerConnectionDispatcher()

        self._socket: Optional[socket.socket] = None
        self._running = False

        self._listening = threading.Event()
        self._shutdown_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        The bound (host, port).

        With port 0 in the config this is the port the OS actually chose,
        available once the server is listening.
        """
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.settimeout(1.0)
        return sock

    def _setup_signals(self):
        """Install SIGINT/SIGTERM handlers, main thread only."""
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: ConnectionHandler):
        """
        Bind, listen and accept until shutdown() is called.

        Args:
            connection_handler: Called (through the dispatcher) once per
                                accepted connection. It owns the connection
                                and must close it.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True
        self._shutdown_event.clear()
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._listening.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: ConnectionHandler):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Re-check self._running
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                max_line_size=self.config.max_line_size,
            )

            try:
                self.dispatcher.dispatch(connection_handler, conn)
            except Exception as e:
                # e.g. the OS refused to start another thread
                logger.error(f"[{conn.id}] Dispatch failed: {e}")
                conn.close()

    def shutdown(self):
        """Stop the accept loop. Idempotent, callable from any thread."""
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False
        self._shutdown_event.set()

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._listening.clear()
        logger.info("Socket server stopped")

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is bound and listening. False on timeout."""
        return self._listening.wait(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """Block until shutdown() has been requested. False on timeout."""
        return self._shutdown_event.wait(timeout)
