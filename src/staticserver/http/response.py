"""
=============================================================================
HTTP RESPONSE
=============================================================================

Every response this server writes has exactly the same shape:

    HTTP/1.1 200 OK\r\n                 ← status line
    Content-Type: text/html\r\n
    Content-Length: 9\r\n               ← always len(body), computed here
    \r\n                                ← blank line
    <p>hi</p>                           ← raw body bytes

There is deliberately no Date, Server or Connection header: a response
depends only on the status and the body, so asking for the same unchanged
file twice gives byte-identical responses.

=============================================================================
"""

from dataclasses import dataclass

from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.1"
CRLF = "\r\n"


@dataclass
class HTTPResponse:
    """
    A response ready to be serialized onto the socket.

    Content-Length is not stored; it is derived from the body at
    serialization time so the two can never disagree.
    """

    status: HTTPStatus = HTTPStatus.OK
    content_type: str = "text/html"
    body: bytes = b""

    @property
    def status_line(self) -> str:
        """e.g. "HTTP/1.1 405 Method Not Allowed" """
        return f"{HTTP_VERSION} {self.status:d} {self.status.phrase}"

    @property
    def content_length(self) -> int:
        return len(self.body)

    def to_bytes(self) -> bytes:
        """
        Serialize for socket.sendall().

        Returns:
            Status line, the two headers, blank line, then the body.
        """
        lines = [
            self.status_line,
            f"Content-Type: {self.content_type}",
            f"Content-Length: {self.content_length}",
            "",
        ]
        head = CRLF.join(lines) + CRLF
        return head.encode("ascii") + self.body


def file_response(content: bytes, content_type: str) -> HTTPResponse:
    """200 OK carrying a file's bytes."""
    return HTTPResponse(status=HTTPStatus.OK, content_type=content_type, body=content)


def html_error(status: HTTPStatus, html: str) -> HTTPResponse:
    """
    An error response with an already rendered HTML page.

    The page is UTF-8 encoded here, so Content-Length counts bytes, not
    characters, even when the template contains non-ASCII text.
    """
    return HTTPResponse(status=status, content_type="text/html", body=html.encode("utf-8"))
