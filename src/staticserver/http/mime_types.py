"""
=============================================================================
EXTENSION ALLOW-LIST AND CONTENT TYPES
=============================================================================

Only three kinds of file are ever served. The table below is both the
allow-list (which extensions may be served at all) and the Content-Type
lookup (what header they are served with).

    ┌────────────┬──────────────────────────┐
    │ Extension  │ Content-Type             │
    ├────────────┼──────────────────────────┤
    │ .html      │ text/html                │
    │ .css       │ text/css                 │
    │ .js        │ application/javascript   │
    └────────────┴──────────────────────────┘

Matching is exact and case-sensitive: "page.HTML" is not allow-listed.

Content types are sent without a charset parameter; the file's bytes are
sent exactly as they are on disk.

=============================================================================
"""

from pathlib import Path
from typing import Union


MIME_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
}

# Extensions eligible for serving. Anything else is 403, even if it exists.
ALLOWED_EXTENSIONS = frozenset(MIME_TYPES)

# Unreachable for allow-listed files, kept so get_content_type() is total.
DEFAULT_MIME_TYPE = "application/octet-stream"


def get_extension(path: Union[str, Path]) -> str:
    """
    Extract the extension, leading dot included.

        >>> get_extension("/css/site.css")
        '.css'
        >>> get_extension("README")
        ''
        >>> get_extension("archive.tar.gz")
        '.gz'
    """
    return Path(path).suffix


def is_allowed_extension(extension: str) -> bool:
    """Check an extension (as returned by get_extension) against the allow-list."""
    return extension in ALLOWED_EXTENSIONS


def get_content_type(extension: str) -> str:
    """
    Content-Type header value for an extension.

        >>> get_content_type(".js")
        'application/javascript'
        >>> get_content_type(".png")
        'application/octet-stream'
    """
    return MIME_TYPES.get(extension, DEFAULT_MIME_TYPE)
