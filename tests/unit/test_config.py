"""
Unit tests for server configuration.
"""

import pytest

from minihttp.config import (
    MAX_BODY_SIZE,
    MAX_METHOD_SIZE,
    MAX_PATH_SIZE,
    RECV_BUFFER_SIZE,
    ServerConfig,
    is_ipv4_address,
)


class TestServerConfig:
    """Tests for ServerConfig class."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.backlog == 10
        assert config.buffer_size == RECV_BUFFER_SIZE == 30000
        assert config.timeout is None
        assert config.max_method_size == MAX_METHOD_SIZE == 10
        assert config.max_path_size == MAX_PATH_SIZE == 100
        assert config.max_body_size == MAX_BODY_SIZE == 4096
        assert config.document_root == "./public_html"
        assert config.log_level == "INFO"

    def test_defaults_are_valid(self):
        ServerConfig().validate()

    @pytest.mark.parametrize("port", [1, 80, 8080, 65534])
    def test_valid_ports(self, port: int):
        ServerConfig(port=port).validate()

    @pytest.mark.parametrize("port", [0, -1, 65535, 70000])
    def test_invalid_ports(self, port: int):
        with pytest.raises(ValueError, match="Invalid port number"):
            ServerConfig(port=port).validate()

    @pytest.mark.parametrize("host", ["localhost", "256.0.0.1", "::1", "", "1.2.3"])
    def test_invalid_host(self, host: str):
        with pytest.raises(ValueError, match="Invalid IP address"):
            ServerConfig(host=host).validate()

    @pytest.mark.parametrize("field, value", [
        ("backlog", 0),
        ("buffer_size", 0),
        ("timeout", 0),
        ("accept_timeout", -1.0),
        ("max_method_size", 1),
        ("max_path_size", 0),
        ("max_body_size", 1),
    ])
    def test_invalid_limits(self, field: str, value):
        config = ServerConfig(**{field: value})

        with pytest.raises(ValueError, match=field):
            config.validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MINIHTTP_HOST", "0.0.0.0")
        monkeypatch.setenv("MINIHTTP_PORT", "9090")
        monkeypatch.setenv("MINIHTTP_ROOT", "/srv/site")
        monkeypatch.setenv("MINIHTTP_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 9090
        assert config.document_root == "/srv/site"
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("MINIHTTP_HOST", "MINIHTTP_PORT", "MINIHTTP_ROOT", "MINIHTTP_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert ServerConfig.from_env() == ServerConfig()


class TestIsIPv4Address:
    """Tests for is_ipv4_address()."""

    @pytest.mark.parametrize("value", ["127.0.0.1", "0.0.0.0", "255.255.255.255", "10.1.2.3"])
    def test_valid(self, value: str):
        assert is_ipv4_address(value)

    @pytest.mark.parametrize("value", ["", "abc", "1.2.3.4.5", "300.1.1.1", "::1", None])
    def test_invalid(self, value):
        assert not is_ipv4_address(value)
