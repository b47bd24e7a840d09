"""
Unit tests for the command-line entry point.
"""

import socket

import pytest

from minihttp.__main__ import EXIT_FAILURE, EXIT_SUCCESS, build_parser, main, parse_port


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("MINIHTTP_HOST", "MINIHTTP_PORT", "MINIHTTP_ROOT", "MINIHTTP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_server(monkeypatch):
    """Replace HTTPServer with a stub; returns the configs it was built with."""
    configs = []

    class FakeServer:
        def __init__(self, config):
            configs.append(config)

        def run(self):
            pass

    monkeypatch.setattr("minihttp.__main__.HTTPServer", FakeServer)
    return configs


class TestArguments:
    """Argument count and format errors exit with status 1."""

    @pytest.mark.parametrize("argv", [
        [],
        ["127.0.0.1"],
        ["127.0.0.1", "8080", "extra"],
    ])
    def test_wrong_argument_count(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)

        assert exc_info.value.code == EXIT_FAILURE
        assert "usage: minihttp" in capsys.readouterr().err

    @pytest.mark.parametrize("address", ["localhost", "999.0.0.1", "1.2.3", "::1"])
    def test_invalid_address(self, address: str, capsys):
        assert main([address, "8080"]) == EXIT_FAILURE
        assert f"Invalid IP address: {address}" in capsys.readouterr().err

    @pytest.mark.parametrize("port", ["0", "65535", "abc", "-1"])
    def test_invalid_port(self, port: str, capsys):
        assert main(["127.0.0.1", port]) == EXIT_FAILURE
        assert f"Invalid port number: {port}" in capsys.readouterr().err

    def test_environment_options(self, fake_server, monkeypatch):
        """Only the root and log level are read from the environment."""
        monkeypatch.setenv("MINIHTTP_HOST", "not-an-address")
        monkeypatch.setenv("MINIHTTP_PORT", "eighty")
        monkeypatch.setenv("MINIHTTP_ROOT", "/srv/site")
        monkeypatch.setenv("MINIHTTP_LOG_LEVEL", "DEBUG")

        assert main(["127.0.0.1", "8080"]) == EXIT_SUCCESS

        config = fake_server[0]
        assert (config.host, config.port) == ("127.0.0.1", 8080)
        assert config.document_root == "/srv/site"
        assert config.log_level == "DEBUG"

    def test_options_override_environment(self, fake_server, monkeypatch):
        monkeypatch.setenv("MINIHTTP_ROOT", "/srv/site")

        assert main(["127.0.0.1", "8080", "--root", "./other", "-l", "ERROR"]) == EXIT_SUCCESS
        assert fake_server[0].document_root == "./other"
        assert fake_server[0].log_level == "ERROR"

    def test_port_in_use(self, capsys):
        """A bind failure is reported and exits with status 1."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as holder:
            holder.bind(("127.0.0.1", 0))
            holder.listen(1)
            port = holder.getsockname()[1]

            assert main(["127.0.0.1", str(port), "--log-level", "ERROR"]) == EXIT_FAILURE

        assert "Failed to start HTTP server" in capsys.readouterr().err

    def test_options_parsed(self):
        args = build_parser().parse_args(["0.0.0.0", "80", "--root", "site", "-l", "DEBUG"])

        assert args.address == "0.0.0.0"
        assert args.port == "80"
        assert args.root == "site"
        assert args.log_level == "DEBUG"


class TestParsePort:
    """Tests for parse_port()."""

    @pytest.mark.parametrize("value, expected", [
        ("1", 1),
        ("8080", 8080),
        ("65534", 65534),
        ("0", None),
        ("65535", None),
        ("-80", None),
        ("http", None),
        ("", None),
    ])
    def test_parse_port(self, value: str, expected):
        assert parse_port(value) == expected
