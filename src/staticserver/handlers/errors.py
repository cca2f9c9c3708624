"""
=============================================================================
ERROR PAGES
=============================================================================

Every non-200 response carries an HTML page, rendered one of two ways:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  <web-root>/error.html exists and is readable?                      │
    │                                                                     │
    │     yes ──► read it (fresh, every time) and substitute:             │
    │                 {{statusCode}}  →  404                              │
    │                 {{message}}     →  Not Found                        │
    │                                                                     │
    │     no  ──► built-in page:                                          │
    │             <html><head><title>404 Not Found</title></head>         │
    │             <body><h1>Error 404: Not Found</h1></body></html>       │
    └─────────────────────────────────────────────────────────────────────┘

The template is never cached, so editing error.html changes the very next
error page without a restart.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union

from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)

STATUS_TOKEN = "{{statusCode}}"
MESSAGE_TOKEN = "{{message}}"

FALLBACK_TEMPLATE = (
    "<html><head><title>{code} {message}</title></head>"
    "<body><h1>Error {code}: {message}</h1></body></html>"
)


class ErrorPageRenderer:
    """
    Renders error pages from an optional on-disk template.

    Args:
        web_root: Directory holding the template.
        template_name: Template file name inside web_root.
    """

    def __init__(self, web_root: Union[str, Path], template_name: str = "error.html"):
        self.web_root = Path(web_root)
        self.template_name = template_name

    @property
    def template_path(self) -> Path:
        return self.web_root / self.template_name

    def render(self, status: HTTPStatus) -> str:
        """
        Render the page for a status, preferring the template.

        A missing template is the normal case and falls back quietly. An
        unreadable one (permissions, not a file, bad encoding) also falls
        back, with a warning.
        """
        try:
            template = self.template_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return self.fallback(status)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error template {self.template_path} unusable: {e}")
            return self.fallback(status)

        return (template
            .replace(STATUS_TOKEN, f"{status:d}")
            .replace(MESSAGE_TOKEN, status.phrase))

    @staticmethod
    def fallback(status: HTTPStatus) -> str:
        """The built-in page, used when there is no usable template."""
        return FALLBACK_TEMPLATE.format(code=f"{status:d}", message=status.phrase)
