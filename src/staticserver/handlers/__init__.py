"""
Request handlers.

    StaticFileHandler    request line → response (200 or error page)
    ErrorPageRenderer    error.html template or built-in fallback page
"""

from .static import StaticFileHandler, ResolvedTarget, PathTraversalError
from .errors import ErrorPageRenderer

__all__ = [
    "StaticFileHandler",
    "ResolvedTarget",
    "PathTraversalError",
    "ErrorPageRenderer",
]
