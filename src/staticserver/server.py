"""
=============================================================================
STATIC SERVER
=============================================================================

Wires the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   SocketServer ── accept() ──► Connection                           │
    │                                    │                                │
    │                         Dispatcher (thread per connection)          │
    │                                    │                                │
    │                                    ▼                                │
    │                      StaticServer._process_connection()             │
    │                                    │                                │
    │        read_request_line ──► parse_request_line ──► handler.handle  │
    │                                                          │          │
    │                                      send_response ◄─────┘          │
    │                                           │                         │
    │                                        close()                      │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ONE CONNECTION, ONE RESPONSE
=============================================================================

Each connection carries exactly one exchange and is then closed. There is
no keep-alive loop.

Outcomes per connection:

    nothing sent / malformed / over-long line  →  closed, no response
    anything else                              →  exactly one response

No exception leaves _process_connection(): a bug in the handler turns into
a best-effort 500 page for that client, a traceback in the operational log,
and nothing else. Other connections and the accept loop never see it.

=============================================================================
"""

import logging
from typing import Optional

from .access_log import RequestLog
from .config import ServerConfig
from .core import Connection, Dispatcher, SocketServer
from .handlers import StaticFileHandler
from .http.request import HTTPParseError, HTTPRequest, decode_request_line, parse_request_line
from .http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class StaticServer:
    """
    The static file server.

    Usage:
        server = StaticServer(ServerConfig(port=8080, web_root="./public"))
        server.run()   # Blocks until Ctrl+C / SIGTERM / shutdown()

    Args:
        config: Server configuration. Validated in run().
        dispatcher: Where connections are handled; a new thread per
                    connection when omitted.
    """

    def __init__(self, config: Optional[ServerConfig] = None, dispatcher: Optional[Dispatcher] = None):
        self.config = config or ServerConfig()

        self._socket_server = SocketServer(self.config, dispatcher)
        self._request_log: Optional[RequestLog] = None
        self._handler: Optional[StaticFileHandler] = None

    @property
    def address(self):
        """Bound (host, port); the real port once listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start serving (blocking).

        Raises:
            ValueError: Invalid configuration.
            OSError: The port could not be bound.
        """
        self._setup_logging()
        self.config.validate()

        self._request_log = RequestLog(self.config.request_log)
        self._handler = StaticFileHandler(self.config.root_path, self._request_log)

        logger.info(f"Serving {self._handler.root_dir} on port {self.config.port}")

        try:
            self._socket_server.start(self._process_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._request_log.close()
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. Safe to call from any thread."""
        self._socket_server.shutdown()

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_listening(timeout)

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("staticserver").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _process_connection(self, conn: Connection):
        """
        Handle one connection start to finish (runs on its own thread).
        """
        with conn:
            request = self._read_request(conn)
            if request is None:
                return

            try:
                response = self._handler.handle(request)
            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error: {e}")
                self._send_internal_error(conn, request)
                return

            logger.debug(f"[{conn.id}] {request.method} {request.path} -> {response.status:d}")
            conn.send_response(response.to_bytes())

    def _read_request(self, conn: Connection) -> Optional[HTTPRequest]:
        """
        Read and parse the request line.

        Returns:
            The request, or None for anything that gets no response at all:
            client closed early, line too long, line malformed, socket error.
        """
        try:
            raw = conn.read_request_line()
            if raw is None:
                logger.debug(f"[{conn.id}] Closed without a request")
                return None
            return parse_request_line(decode_request_line(raw))
        except (HTTPParseError, ValueError) as e:
            logger.debug(f"[{conn.id}] Dropping connection: {e}")
        except OSError as e:
            logger.warning(f"[{conn.id}] Read failed: {e}")
        return None

    def _send_internal_error(self, conn: Connection, request: HTTPRequest):
        """Best-effort 500 after an unexpected handler failure."""
        try:
            response = self._handler.error(request, HTTPStatus.INTERNAL_SERVER_ERROR, use_template=False)
            conn.send_response(response.to_bytes())
        except Exception as e:
            logger.error(f"[{conn.id}] Could not send error response: {e}")
