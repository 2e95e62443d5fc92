"""Tests for the getmyid command line."""

import json
import logging

from typer.testing import CliRunner

from getmyid.cli import app

runner = CliRunner()


class TestIdentityCommand:
    """getmyid identity."""

    def test_human_output(self, sock_path, fake_daemon, success_bytes):
        """Identity summary is printed."""
        with fake_daemon(success_bytes):
            result = runner.invoke(app, ["--socket", str(sock_path), "identity"])
        assert result.exit_code == 0
        assert "BILLING_PROD" in result.stdout
        assert "worker-01" in result.stdout

    def test_json_output(self, sock_path, fake_daemon, success_bytes):
        """--json prints a success envelope with the identity."""
        with fake_daemon(success_bytes):
            result = runner.invoke(app, ["--json", "--socket", str(sock_path), "id"])
        assert result.exit_code == 0
        out = json.loads(result.stdout)
        assert out["ok"] is True
        assert out["data"]["identity"] == "BILLING_PROD"
        assert out["data"]["runner"]["pid"] == 1234

    def test_runner_options_sent(self, sock_path, fake_daemon, success_bytes):
        """Runner options become the request envelope."""
        with fake_daemon(success_bytes, read_request=True) as daemon:
            result = runner.invoke(
                app,
                ["--socket", str(sock_path), "identity", "--instance-id", "7", "--timestamp", "100", "--field", "env=prod"],
            )
        assert result.exit_code == 0
        assert daemon.request_json() == {"runner": {"instance_id": 7, "timestamp": 100, "env": "prod"}}

    def test_bad_field(self, sock_path):
        """--field without '=' is rejected before connecting."""
        result = runner.invoke(app, ["--json", "--socket", str(sock_path), "identity", "--field", "oops"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error"] == "invalid_field"

    def test_known_field_needs_integer(self, sock_path):
        """--field on an id name goes through the same strict validation as --instance-id."""
        result = runner.invoke(app, ["--json", "--socket", str(sock_path), "identity", "--field", "instance_id=abc"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error"] == "invalid_field"

    def test_socket_not_found(self, sock_path):
        """Missing socket reports socket_not_found."""
        result = runner.invoke(app, ["--json", "--socket", str(sock_path), "identity"])
        assert result.exit_code == 1
        out = json.loads(result.stdout)
        assert out["ok"] is False
        assert out["error"] == "socket_not_found"

    def test_daemon_error(self, sock_path, fake_daemon, error_bytes):
        """Daemon error code is passed through."""
        with fake_daemon(error_bytes):
            result = runner.invoke(app, ["--json", "--socket", str(sock_path), "identity"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error"] == "E_NO_MATCH"


class TestConfigOptions:
    """Global configuration options."""

    def test_invalid_timeout(self, sock_path):
        """Non-positive timeout is a configuration error."""
        result = runner.invoke(app, ["--json", "--socket", str(sock_path), "--timeout", "0", "check"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error"] == "invalid_config"

    def test_config_file(self, tmp_path, sock_path, fake_daemon, success_bytes):
        """Socket path is taken from the config file."""
        config = tmp_path / "getmyid.toml"
        config.write_text(f'socket_path = "{sock_path}"\n')
        with fake_daemon(success_bytes):
            result = runner.invoke(app, ["--json", "--config", str(config), "identity"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["identity"] == "BILLING_PROD"

    def test_log_file(self, tmp_path, sock_path):
        """--log-file attaches a file handler to the package logger."""
        log_path = tmp_path / "getmyid.log"
        logger = logging.getLogger("getmyid")
        try:
            result = runner.invoke(app, ["--log-file", str(log_path), "--socket", str(sock_path), "check"])
            assert result.exit_code == 1
            assert log_path.exists()
            assert logger.handlers
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()


    def test_unwritable_log_file(self, tmp_path, sock_path):
        """A log file that cannot be opened is a configuration error, not a traceback."""
        log_path = tmp_path / "missing" / "getmyid.log"
        result = runner.invoke(app, ["--json", "--log-file", str(log_path), "--socket", str(sock_path), "check"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error"] == "invalid_config"
        assert not logging.getLogger("getmyid").handlers


class TestCheckCommand:
    """getmyid check."""

    def test_missing(self, sock_path):
        """Missing socket exits 1 and reports exists=false."""
        result = runner.invoke(app, ["--json", "--socket", str(sock_path), "check"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)["data"]
        assert data["exists"] is False
        assert data["connectable"] is False

    def test_listening(self, sock_path, fake_daemon, success_bytes):
        """Listening socket is reported as connectable."""
        with fake_daemon(success_bytes):
            result = runner.invoke(app, ["--socket", str(sock_path), "check"])
        assert result.exit_code == 0
        assert "accepting connections" in result.stdout
