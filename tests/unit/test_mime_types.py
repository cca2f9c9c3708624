"""
Unit tests for the extension allow-list and content types.
"""

import pytest

from staticserver.http.mime_types import (
    ALLOWED_EXTENSIONS,
    DEFAULT_MIME_TYPE,
    get_content_type,
    get_extension,
    is_allowed_extension,
)


class TestExtensions:

    @pytest.mark.parametrize("path, expected", [
        ("/index.html", ".html"),
        ("/css/site.css", ".css"),
        ("app.min.js", ".js"),
        ("/README", ""),
        ("/dir.d/file", ""),
    ])
    def test_get_extension(self, path: str, expected: str):
        assert get_extension(path) == expected

    def test_allow_list(self):
        assert ALLOWED_EXTENSIONS == {".html", ".css", ".js"}

    @pytest.mark.parametrize("ext", [".png", ".txt", ".htm", "", ".HTML", ".Js"])
    def test_not_allowed(self, ext: str):
        """Test that matching is exact and case-sensitive."""
        assert not is_allowed_extension(ext)


class TestContentType:

    @pytest.mark.parametrize("ext, expected", [
        (".html", "text/html"),
        (".css", "text/css"),
        (".js", "application/javascript"),
    ])
    def test_table(self, ext: str, expected: str):
        assert get_content_type(ext) == expected

    def test_default(self):
        assert get_content_type(".png") == DEFAULT_MIME_TYPE == "application/octet-stream"
