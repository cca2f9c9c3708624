"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this server can answer with, plus their reason
phrases.

    ┌────────┬──────────────────────────────────────────────────────────────┐
    │  200   │ OK                    - File found and served                │
    ├────────┼──────────────────────────────────────────────────────────────┤
    │  403   │ Forbidden             - Traversal attempt, or the file       │
    │        │                         exists but its extension is not on   │
    │        │                         the allow-list                       │
    │  404   │ Not Found             - No such file under the web-root      │
    │  405   │ Method Not Allowed    - Anything other than GET              │
    ├────────┼──────────────────────────────────────────────────────────────┤
    │  500   │ Internal Server Error - File vanished or could not be read   │
    └────────┴──────────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare and format as plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> f"{HTTPStatus.NOT_FOUND:d}"
        '404'
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200

    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405

    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """
        Reason phrase for the status line.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      └── phrase
                      └───────── code
        """
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
