"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Turns one parsed request line into exactly one response. This is where all
the decisions are made; everything else in the package is plumbing.

=============================================================================
DECISION ORDER
=============================================================================

The checks run in a fixed order, and the first one that fails decides the
status:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  method != "GET"                      ──► 405 Method Not Allowed    │
    │  decoded path contains ".."           ──► 403 Forbidden             │
    │  "/"  →  "/index.html"                                              │
    │  other path ending in "/"             ──► 404 Not Found             │
    │  resolved path outside the web-root   ──► 403 Forbidden             │
    │  not an existing regular file         ──► 404 Not Found             │
    │  extension not .html / .css / .js     ──► 403 Forbidden             │
    │  file unreadable                      ──► 500 Internal Server Error │
    │  otherwise                            ──► 200 OK + file bytes       │
    └─────────────────────────────────────────────────────────────────────┘

Note the existence check comes BEFORE the extension check: a missing .png
is 404, an existing .png is 403. The allow-list gates what is served, not
just what is looked up.

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

Two independent layers:

1. Textual. Any ".." in the percent-decoded path is rejected outright:

       GET /%2e%2e/%2e%2e/etc/passwd   →  decoded "/../../etc/passwd"  →  403

2. Canonical. The joined path is resolved (".." collapsed, symlinks
   followed) and must still lie inside the resolved web-root:

       web-root/link.html → /etc/hostname      →  403

   This catches what a substring check cannot, such as symlinks inside the
   web-root that point out of it.

=============================================================================
REQUEST LOG
=============================================================================

Every error response is appended to the request log; 200 responses are
not. The logged path is the decoded path the client asked for.

=============================================================================
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..access_log import RequestLog
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, file_response, html_error
from ..http.status_codes import HTTPStatus
from ..http.mime_types import get_content_type, get_extension, is_allowed_extension
from .errors import ErrorPageRenderer


logger = logging.getLogger(__name__)

ALLOWED_METHOD = "GET"
DEFAULT_DOCUMENT = "/index.html"


class PathTraversalError(ValueError):
    """The resolved path escapes the web-root."""


@dataclass(frozen=True)
class ResolvedTarget:
    """
    A request path mapped onto the filesystem.

    Attributes:
        decoded_path: The percent-decoded request path ("/" already
                      replaced by the default document).
        filesystem_path: Canonical absolute path, guaranteed to be inside
                         the web-root.
        extension: Extension of the requested path, e.g. ".css".
    """

    decoded_path: str
    filesystem_path: Path
    extension: str


class StaticFileHandler:
    """
    Serves files from a single web-root.

    Usage:
        handler = StaticFileHandler(
            web_root="./public",
            request_log=RequestLog("requests.log"),
        )
        response = handler.handle(parse_request_line("GET / HTTP/1.1"))

    Holds no per-request state; one instance is shared by all connection
    threads.
    """

    def __init__(
        self,
        web_root: Union[str, Path],
        request_log: RequestLog,
        error_pages: Optional[ErrorPageRenderer] = None,
    ):
        # Resolve once; containment checks compare against this.
        self.root_dir = Path(web_root).resolve()
        self.request_log = request_log
        self.error_pages = error_pages or ErrorPageRenderer(self.root_dir)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Produce the response for a request.

        Never raises for client input; filesystem failures become 500.
        """
        path = request.path

        if request.method != ALLOWED_METHOD:
            return self.error(request, HTTPStatus.METHOD_NOT_ALLOWED)

        if ".." in path:
            logger.warning(f"Path traversal attempt: {path!r}")
            return self.error(request, HTTPStatus.FORBIDDEN)

        if path == "/":
            path = DEFAULT_DOCUMENT
        elif path.endswith("/"):
            # Names a directory, never a file; resolve() would drop the slash.
            return self.error(request, HTTPStatus.NOT_FOUND)

        try:
            target = self.resolve(path)
        except PathTraversalError:
            logger.warning(f"Path escapes web root: {path!r}")
            return self.error(request, HTTPStatus.FORBIDDEN)

        if not _is_regular_file(target.filesystem_path):
            return self.error(request, HTTPStatus.NOT_FOUND)

        if not is_allowed_extension(target.extension):
            return self.error(request, HTTPStatus.FORBIDDEN)

        return self._serve_file(request, target)

    def resolve(self, decoded_path: str) -> ResolvedTarget:
        """
        Map a decoded request path to a file under the web-root.

        Leading slashes are stripped so the path always joins relative to
        the web-root ("//etc/passwd" becomes "<root>/etc/passwd").

        Raises:
            PathTraversalError: If the canonical path is outside the web-root.
        """
        joined = self.root_dir / decoded_path.lstrip("/")

        try:
            full_path = joined.resolve()
        except (OSError, ValueError):
            # Symlink loop or embedded NUL: keep the lexical path, which
            # cannot be opened and will surface as 404.
            full_path = joined

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            raise PathTraversalError(decoded_path) from None

        return ResolvedTarget(
            decoded_path=decoded_path,
            filesystem_path=full_path,
            extension=get_extension(decoded_path),
        )

    def error(self, request: HTTPRequest, status: HTTPStatus, use_template: bool = True) -> HTTPResponse:
        """
        Build an error response and append it to the request log.

        Args:
            request: The request being answered (method and path are logged).
            status: Error status.
            use_template: False skips error.html and uses the built-in page,
                          for failures where the filesystem is suspect.
        """
        if use_template:
            html = self.error_pages.render(status)
        else:
            html = self.error_pages.fallback(status)

        response = html_error(status, html)

        try:
            self.request_log.append(request.method, request.path, status)
        except Exception as e:
            logger.error(f"Could not write request log: {e}")

        return response

    def _serve_file(self, request: HTTPRequest, target: ResolvedTarget) -> HTTPResponse:
        try:
            content = target.filesystem_path.read_bytes()
        except OSError as e:
            # Vanished or became unreadable after the existence check.
            logger.error(f"Error reading {target.filesystem_path}: {e}")
            return self.error(request, HTTPStatus.INTERNAL_SERVER_ERROR, use_template=False)

        logger.debug(f"200 {target.decoded_path} ({len(content)} bytes)")
        return file_response(content, get_content_type(target.extension))


def _is_regular_file(path: Path) -> bool:
    """Path.is_file() that treats permission errors as "not there"."""
    try:
        return path.is_file()
    except OSError:
        return False
