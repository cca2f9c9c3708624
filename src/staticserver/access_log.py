"""
=============================================================================
REQUEST LOG
=============================================================================

An append-only file with one line per ERROR response:

    [2026-10-18 14:03:27] GET /missing.html => 404
    [2026-10-18 14:03:29] POST /index.html => 405
    └─────────┬─────────┘ └─┬┘ └─────┬────┘    └┬┘
         local time      method    path      status

Successful (200) responses are NOT logged. That asymmetry is intentional.

=============================================================================
ONE WRITER, MANY THREADS
=============================================================================

Every connection runs on its own thread, and any of them may need to append
a line at the same moment. Two unsynchronized writes could interleave:

    [2026-10-18 14:03:27] GET /a.h[2026-10-18 14:03:27] GET /b.html => 404
    tml => 404

The serialization lives in exactly one place: a logging.FileHandler. Every
handler owns a lock and emit() runs under it, so each line is written (and
flushed) whole before the next thread gets its turn.

    thread 1 ──┐
    thread 2 ──┼──► RequestLog.append() ──► [handler lock] ──► requests.log
    thread 3 ──┘

Each RequestLog gets its own child of "staticserver.access". It does not
propagate, so its lines land only in its own file, with nothing prepended
by whatever console logging the process has configured.

Control characters in the method or path (a decoded %0A, say) are escaped
before writing, so one append is always exactly one line:

    GET /a%0Ab.html   ──►   [2026-10-18 14:03:27] GET /a\\x0ab.html => 404

=============================================================================
"""

import logging
import re
from pathlib import Path
from typing import Union


LOG_FORMAT = "[%(asctime)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ACCESS_LOGGER_NAME = "staticserver.access"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _escape_controls(text: str) -> str:
    return _CONTROL_CHARS.sub(lambda m: f"\\x{ord(m.group()):02x}", text)


class RequestLog:
    """
    Single-writer sink for the request log.

    Usage:
        log = RequestLog("requests.log")
        log.append("GET", "/missing.html", 404)
        ...
        log.close()

    The file is opened lazily (on the first append) in append mode, so
    constructing a RequestLog never touches the filesystem.
    """

    def __init__(self, path: Union[str, Path] = "requests.log"):
        self.path = Path(path)

        self._handler = logging.FileHandler(self.path, mode="a", encoding="utf-8", delay=True)
        self._handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

        # One logger per instance: two open logs never share a handler.
        # Pinned to INFO so the "staticserver" level does not filter lines.
        self._logger = logging.getLogger(f"{ACCESS_LOGGER_NAME}.{id(self):x}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        self._logger.addHandler(self._handler)

    @staticmethod
    def format_entry(method: str, path: str, status: int) -> str:
        """
        The part of a line after the timestamp.

            >>> RequestLog.format_entry("GET", "/x.html", 404)
            'GET /x.html => 404'

        Control characters are written as \\xNN escapes.
        """
        return f"{_escape_controls(method)} {_escape_controls(path)} => {int(status)}"

    def append(self, method: str, path: str, status: int) -> None:
        """Append one line. Safe to call from any number of threads."""
        self._logger.info(self.format_entry(method, path, status))

    def close(self) -> None:
        """Detach from the access logger and close the file."""
        self._logger.removeHandler(self._handler)
        self._handler.close()

    def __enter__(self) -> "RequestLog":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
