"""
=============================================================================
REQUEST LINE PARSING
=============================================================================

This server only ever looks at the FIRST line of what a client sends:

    GET /css/site.css HTTP/1.1\r\n      ← the only line we read
    Host: localhost:8080\r\n            ← ignored, never read
    \r\n

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET          /css/site%20dark.css        HTTP/1.1                  │
    │  └─┬─┘        └──────────┬──────────┘     └───┬───┘                 │
    │  method            target (raw)            ignored                  │
    │                          │                                          │
    │                    percent-decode                                   │
    │                          ▼                                          │
    │                  /css/site dark.css       ← request.path            │
    └─────────────────────────────────────────────────────────────────────┘

Headers, query strings and bodies are out of scope: the target is taken
verbatim (a "?" is just another path character) and everything after the
first line is left unread.

=============================================================================
MALFORMED INPUT
=============================================================================

A line with fewer than two whitespace-separated tokens cannot be answered
sensibly. It raises HTTPParseError, and the connection is closed without a
response. Parsing never raises anything else.

=============================================================================
"""

from dataclasses import dataclass
from urllib.parse import unquote


class HTTPParseError(Exception):
    """
    Raised when the request line cannot be parsed.

    Protocol errors are never answered: the caller drops the connection
    silently and nothing is logged to the request log.
    """


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed request line.

    Attributes:
        method: The method token exactly as sent ("GET", "POST", "get"...).
                Not validated here; the handler decides what is allowed.
        target: The raw, still percent-encoded request target.
    """

    method: str
    target: str

    @property
    def path(self) -> str:
        """
        The percent-decoded target.

        Invalid UTF-8 in escapes is replaced rather than raising:

            >>> HTTPRequest("GET", "/a%20b.html").path
            '/a b.html'
        """
        return unquote(self.target)


def decode_request_line(raw: bytes) -> str:
    """
    Turn raw request-line bytes into text.

    Strips the line terminator (LF or CRLF). Undecodable bytes are replaced
    with U+FFFD so a hostile byte sequence can never raise here.
    """
    return raw.decode("utf-8", errors="replace").rstrip("\r\n")


def parse_request_line(line: str) -> HTTPRequest:
    """
    Split a request line into method and target.

    Args:
        line: The first line of the request, terminator already removed.

    Returns:
        The parsed request. Tokens beyond the second (the HTTP version,
        usually) are ignored.

    Raises:
        HTTPParseError: If the line is empty or has fewer than two tokens.
    """
    tokens = line.split()
    if len(tokens) < 2:
        raise HTTPParseError(f"Malformed request line: {line!r}")

    method, target = tokens[0], tokens[1]
    return HTTPRequest(method=method, target=target)
