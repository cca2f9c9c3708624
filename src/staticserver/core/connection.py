"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket as the duplex byte stream the request
handler needs: read ONE line, write ONE response, close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

A client that sends "GET /index.html HTTP/1.1\r\n" may deliver it in any
number of pieces:

    recv() → "GET /ind"
    recv() → "ex.html HTTP/1.1\r\nHost: loc"
    recv() → ...

So we buffer until the first "\n" shows up, and take everything before it
as the request line. Whatever arrived after it (headers) is ignored.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                  read_request_line() outcomes                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   "GET / HTTP/1.1\r\n..."   →  b"GET / HTTP/1.1\r\n"                │
    │   "GET /"  then EOF         →  b"GET /"   (final unterminated line) │
    │   EOF with nothing sent     →  None       (silent close)            │
    │   > max_line_size, no "\n"  →  ValueError (silent close)            │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

There is intentionally no read timeout. A client that connects and never
sends a line holds its thread until it disconnects.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED
              │                                       ▲
              └───────────────────────────────────────┘
                   (nothing to answer: empty / malformed)

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request/response exchange."""
    NEW = "new"                # Just accepted
    READING = "reading"        # Waiting for the request line
    PROCESSING = "processing"  # Handler is resolving the request
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"
    CLOSED = "closed"


# Cap on how much trailing client data close() will drain.
_DRAIN_LIMIT = 64 * 1024


@dataclass
class Connection:
    """
    One client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used in log messages.
        state: Current ConnectionState.
        created_at: When the connection was accepted.
        buffer_size: Bytes requested per recv().
        max_line_size: Longest request line accepted, in bytes.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 4096
    max_line_size: int = 8192

    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        # Fully blocking: no per-connection timeout.
        self.socket.settimeout(None)

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request_line(self) -> Optional[bytes]:
        """
        Read the first line the client sends.

        Returns:
            The line including its terminator (if one arrived), or None if
            the client closed the connection without sending anything.

        Raises:
            ValueError: If max_line_size bytes arrive without a newline.
        """
        self.state = ConnectionState.READING

        while b"\n" not in self._buffer:
            if len(self._buffer) > self.max_line_size:
                raise ValueError(f"Request line exceeds {self.max_line_size} bytes")

            chunk = self._recv()
            if not chunk:
                break  # EOF: whatever is buffered is the last line
            self._buffer += chunk

        end = self._buffer.find(b"\n")
        if end == -1:
            line, self._buffer = self._buffer, b""
        else:
            line, self._buffer = self._buffer[:end + 1], self._buffer[end + 1:]

        if len(line.rstrip(b"\r\n")) > self.max_line_size:
            raise ValueError(f"Request line exceeds {self.max_line_size} bytes")

        self.state = ConnectionState.PROCESSING
        return line or None

    def _recv(self) -> bytes:
        """recv() that maps a reset or broken connection to EOF."""
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the complete response.

        sendall() loops until every byte is handed to the kernel; plain
        send() may write only part of a large file.

        Returns:
            True if sent, False if the client went away.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close gracefully.

        1. shutdown(SHUT_WR) sends FIN so the client sees end-of-response.
        2. Drain what the client already sent (the unread headers), so the
           kernel does not answer our close() with a RST that could discard
           the response before the client reads it.
        3. close() releases the file descriptor.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Client already gone

        try:
            self.socket.settimeout(0.5)
            drained = 0
            while drained < _DRAIN_LIMIT:
                chunk = self.socket.recv(1024)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # Includes socket.timeout

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
