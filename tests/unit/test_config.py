"""
Unit tests for ServerConfig.
"""

from pathlib import Path

import pytest

from staticserver.config import ServerConfig


class TestDefaults:

    def test_defaults(self):
        config = ServerConfig()

        assert config.port == 8080
        assert config.host == "0.0.0.0"
        assert config.web_root == "."
        assert config.request_log == "requests.log"

    def test_root_path_is_absolute(self, tmp_path: Path):
        config = ServerConfig(web_root=str(tmp_path))
        assert config.root_path == tmp_path.resolve()


class TestFromEnv:

    def test_reads_environment(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("HTTP_PORT", "3000")
        monkeypatch.setenv("HTTP_WEB_ROOT", str(tmp_path))
        monkeypatch.setenv("HTTP_REQUEST_LOG", "/var/log/err.log")
        monkeypatch.setenv("HTTP_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.port == 3000
        assert config.web_root == str(tmp_path)
        assert config.request_log == "/var/log/err.log"
        assert config.log_level == "DEBUG"

    def test_falls_back_to_defaults(self, monkeypatch):
        for name in ("HTTP_PORT", "HTTP_WEB_ROOT", "HTTP_REQUEST_LOG", "HTTP_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    def test_bad_port(self, monkeypatch):
        monkeypatch.setenv("HTTP_PORT", "eighty")
        with pytest.raises(ValueError):
            ServerConfig.from_env()


class TestValidate:

    def test_valid(self, tmp_path: Path):
        ServerConfig(port=0, web_root=str(tmp_path)).validate()

    @pytest.mark.parametrize("port", [-1, 65536, 100000])
    def test_invalid_port(self, tmp_path: Path, port: int):
        with pytest.raises(ValueError, match="port"):
            ServerConfig(port=port, web_root=str(tmp_path)).validate()

    def test_missing_web_root(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Web root"):
            ServerConfig(web_root=str(tmp_path / "nope")).validate()

    def test_web_root_is_file(self, tmp_path: Path):
        f = tmp_path / "file.html"
        f.write_text("x")
        with pytest.raises(ValueError, match="Web root"):
            ServerConfig(web_root=str(f)).validate()

    def test_line_size(self, tmp_path: Path):
        with pytest.raises(ValueError, match="max_line_size"):
            ServerConfig(web_root=str(tmp_path), max_line_size=0).validate()
