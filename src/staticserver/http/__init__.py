"""
HTTP primitives: the request-line model, the response model, status codes
and the extension tables.
"""

from .status_codes import HTTPStatus
from .request import HTTPRequest, HTTPParseError, decode_request_line, parse_request_line
from .response import HTTPResponse, file_response, html_error
from .mime_types import (
    ALLOWED_EXTENSIONS,
    get_content_type,
    get_extension,
    is_allowed_extension,
)

__all__ = [
    "HTTPStatus",
    "HTTPRequest",
    "HTTPParseError",
    "decode_request_line",
    "parse_request_line",
    "HTTPResponse",
    "file_response",
    "html_error",
    "ALLOWED_EXTENSIONS",
    "get_content_type",
    "get_extension",
    "is_allowed_extension",
]
