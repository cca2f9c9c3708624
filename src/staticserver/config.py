"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Everything the server needs to know at startup, in one dataclass.

Serving behavior is governed by exactly two settings: the PORT to listen
on and the WEB-ROOT to serve. The remaining fields are operator plumbing
(socket tuning, where the request log goes, how chatty the console is)
and never change what a client gets back.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    Priority (highest to lowest):

    1. Command-line arguments
       └── python -m staticserver --port 3000 --root ./public

    2. Environment variables
       └── HTTP_PORT=3000 HTTP_WEB_ROOT=./public python -m staticserver

    3. Default values (in this dataclass)

=============================================================================
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class ServerConfig:
    """
    Configuration for the static file server.

    Development:
        ServerConfig(port=8080, web_root="./public", log_level="DEBUG")

    Tests:
        ServerConfig(port=0, web_root=tmp_path)   # OS picks a free port
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVING
    # ─────────────────────────────────────────────────────────────────────

    port: int = 8080
    """TCP port. 0 asks the OS for an ephemeral port (handy in tests)."""

    web_root: str = "."
    """
    Directory that requests are resolved against.
    Nothing outside it is ever served.
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Bind address. The default listens on all interfaces."""

    backlog: int = 128
    """Accept queue length before the OS starts refusing connections."""

    buffer_size: int = 4096
    """Bytes requested per recv() while reading the request line."""

    max_line_size: int = 8192
    """
    Upper bound on the request line in bytes.
    A longer line is treated like a malformed one: the connection is dropped.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    request_log: str = "requests.log"
    """Append-only file receiving one line per error response."""

    log_level: str = "INFO"
    """Operational (console) logging level: DEBUG, INFO, WARNING, ERROR."""

    @property
    def root_path(self) -> Path:
        """The web-root, canonicalized (absolute, symlinks resolved)."""
        return Path(self.web_root).resolve()

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        HTTP_PORT         Port (default: 8080)
        HTTP_WEB_ROOT     Directory to serve (default: current directory)
        HTTP_REQUEST_LOG  Request log path (default: requests.log)
        HTTP_LOG_LEVEL    Logging level (default: INFO)
        """
        return cls(
            port=int(os.getenv("HTTP_PORT", "8080")),
            web_root=os.getenv("HTTP_WEB_ROOT", "."),
            request_log=os.getenv("HTTP_REQUEST_LOG", "requests.log"),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Fail fast at startup instead of on the first request.

        Raises:
            ValueError: Describing the first invalid setting found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if not Path(self.web_root).is_dir():
            raise ValueError(f"Web root is not a directory: {self.web_root}")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.max_line_size < 1:
            raise ValueError("max_line_size must be >= 1")
