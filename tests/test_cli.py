"""
Tests for the command line interface.
"""

import socket

import pytest
from click.testing import CliRunner

from relaycat import cli, __version__
from relaycat.network import SetupError


def unused_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def recorded(monkeypatch):
    """Replace the mode dispatcher with a recorder."""
    configs = []
    monkeypatch.setattr(cli, "run", configs.append)
    return configs


class TestOptions:
    """Tests for option parsing."""

    def test_version(self, runner):
        """Test --version output."""
        result = runner.invoke(cli.main, ["--version"])
        assert result.exit_code == 0
        assert f"relaycat, version {__version__}" in result.output
        assert __version__ == "0.1.0"

    def test_help(self, runner):
        """Test that help lists every option."""
        result = runner.invoke(cli.main, ["--help"])
        assert result.exit_code == 0
        for flag in ("--listen", "--port", "--udp", "--verbose"):
            assert flag in result.output

    def test_defaults(self, runner, recorded):
        """Test a bare invocation."""
        result = runner.invoke(cli.main, [])
        assert result.exit_code == 0
        config = recorded[0]
        assert not config.listen
        assert not config.udp
        assert config.effective_host == "localhost"
        assert config.effective_port == 8080

    def test_short_flags(self, runner, recorded):
        """Test -l -u -p."""
        result = runner.invoke(cli.main, ["-l", "-u", "-p", "9002"])
        assert result.exit_code == 0
        config = recorded[0]
        assert config.listen and config.udp
        assert config.effective_port == 9002

    def test_positional_host_and_port(self, runner, recorded):
        """Test HOST PORT positionals."""
        result = runner.invoke(cli.main, ["example.com", "80"])
        assert result.exit_code == 0
        assert recorded[0].effective_host == "example.com"
        assert recorded[0].effective_port == 80

    def test_client_positional_port_wins(self, runner, recorded):
        """Test client precedence of the positional port."""
        runner.invoke(cli.main, ["--port", "1", "example.com", "2"])
        assert recorded[0].effective_port == 2

    def test_listen_option_port_wins(self, runner, recorded):
        """Test listen precedence of --port."""
        runner.invoke(cli.main, ["--listen", "--port", "1", "example.com", "2"])
        assert recorded[0].effective_port == 1
        assert recorded[0].effective_host == "0.0.0.0"

    @pytest.mark.parametrize("args", [
        ["-p", "70000"],
        ["-p", "http"],
        ["localhost", "-1"],
    ])
    def test_invalid_port(self, runner, recorded, args):
        """Test that bad ports are usage errors."""
        result = runner.invoke(cli.main, args)
        assert result.exit_code == 2
        assert recorded == []


class TestExitCodes:
    """Tests for error reporting."""

    def test_connection_refused(self, runner):
        """Test that a failed connect exits non-zero with one diagnostic."""
        port = unused_port()
        result = runner.invoke(cli.main, ["127.0.0.1", str(port)])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Connected" not in result.output

    def test_setup_error(self, runner, monkeypatch):
        """Test that setup errors are reported with their exit code."""
        def fail(config):
            raise SetupError("Could not listen on 0.0.0.0:1: denied")

        monkeypatch.setattr(cli, "run", fail)
        result = runner.invoke(cli.main, ["-l"])
        assert result.exit_code == 1
        assert "Could not listen on 0.0.0.0:1" in result.output

    def test_os_error(self, runner, monkeypatch):
        """Test that stray socket errors are reported, not raised."""
        def fail(config):
            raise OSError("too many open files")

        monkeypatch.setattr(cli, "run", fail)
        result = runner.invoke(cli.main, [])
        assert result.exit_code == 1
        assert "too many open files" in result.output

    def test_interrupt(self, runner, monkeypatch):
        """Test that Ctrl+C exits with 130."""
        def interrupt(config):
            raise KeyboardInterrupt

        monkeypatch.setattr(cli, "run", interrupt)
        result = runner.invoke(cli.main, [])
        assert result.exit_code == 130
