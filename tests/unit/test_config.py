"""
Unit tests for configuration and command-line handling.
"""

import pytest

from taskserver.config import ServerConfig
from taskserver.__main__ import build_parser, config_from_args, main


ENV_VARS = (
    "TASKSERVER_HOST",
    "TASKSERVER_PORT",
    "TASKSERVER_BUFFER_SIZE",
    "TASKSERVER_READ_TIMEOUT",
    "TASKSERVER_LOG_LEVEL",
    "TASKSERVER_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Make sure no TASKSERVER_* variable leaks in from the outer shell."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestServerConfig:
    """Tests for ServerConfig defaults and validation."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 7878
        assert config.buffer_size == 1024
        assert config.read_timeout is None
        assert config.log_format == "text"
        config.validate()

    def test_port_zero_allowed(self):
        ServerConfig(port=0).validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 65536},
        {"backlog": 0},
        {"buffer_size": 8},
        {"read_timeout": 0},
        {"read_timeout": -2.5},
        {"log_format": "xml"},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()


class TestFromEnv:
    """Tests for ServerConfig.from_env."""

    def test_no_env_gives_defaults(self):
        assert ServerConfig.from_env() == ServerConfig()

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("TASKSERVER_HOST", "0.0.0.0")
        monkeypatch.setenv("TASKSERVER_PORT", "9000")
        monkeypatch.setenv("TASKSERVER_BUFFER_SIZE", "4096")
        monkeypatch.setenv("TASKSERVER_READ_TIMEOUT", "2.5")
        monkeypatch.setenv("TASKSERVER_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("TASKSERVER_LOG_FORMAT", "json")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 9000
        assert config.buffer_size == 4096
        assert config.read_timeout == 2.5
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_bad_number(self, monkeypatch):
        monkeypatch.setenv("TASKSERVER_PORT", "eighty")

        with pytest.raises(ValueError):
            ServerConfig.from_env()


class TestCommandLine:
    """Tests for the CLI argument layer."""

    def test_defaults(self):
        assert config_from_args([]) == ServerConfig()

    def test_flags(self):
        config = config_from_args([
            "--host", "0.0.0.0",
            "-p", "3000",
            "--buffer-size", "2048",
            "--read-timeout", "10",
            "--log-level", "debug",
            "--log-format", "json",
        ])

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.buffer_size == 2048
        assert config.read_timeout == 10.0
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_flags_override_env(self, monkeypatch):
        monkeypatch.setenv("TASKSERVER_PORT", "9000")
        monkeypatch.setenv("TASKSERVER_HOST", "0.0.0.0")

        config = config_from_args(["--port", "3000"])

        assert config.port == 3000
        assert config.host == "0.0.0.0"

    def test_env_shown_as_default(self, monkeypatch):
        monkeypatch.setenv("TASKSERVER_PORT", "9000")

        parser = build_parser(ServerConfig.from_env())

        assert parser.get_default("port") == 9000

    def test_unknown_log_format(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            config_from_args(["--log-format", "xml"])

        assert exc_info.value.code == 2

    def test_main_rejects_invalid_config(self, capsys):
        """Test that a bad value exits before anything is bound."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--port", "70000"])

        assert exc_info.value.code == 2
        assert "Invalid port" in capsys.readouterr().err
