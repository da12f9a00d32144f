"""Unit tests for the healthy command-line interface."""
from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from healthy import __version__
from healthy.cli.main import cli

runner = CliRunner()


class TestCLIBasics:
    def test_help_lists_commands(self) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("wait", "config", "version"):
            assert command in result.output

    def test_version_command(self) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ---------------------------------------------------------------------------
# wait
# ---------------------------------------------------------------------------


class TestWaitCommand:
    def test_no_checks_is_a_noop(self) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["wait"])
        assert result.exit_code == 0
        assert "nothing to wait for" in result.output

    def test_existing_file_is_healthy(self) -> None:
        with runner.isolated_filesystem():
            Path("ready").touch()
            result = runner.invoke(cli, ["wait", "--file", "ready", "--timeout", "5s"])
        assert result.exit_code == 0, result.output
        assert "All 1 check(s) healthy." in result.output

    def test_missing_file_times_out(self) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                ["wait", "--file", "absent", "--timeout", "100ms", "--delay", "10ms", "-q"],
            )
        assert result.exit_code == 1
        assert "Timed out" in result.output

    def test_bad_tcp_address_is_fatal(self) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["wait", "--tcp", "nope", "--timeout", "5s"])
        assert result.exit_code == 1
        assert "Fatal" in result.output

    def test_bad_check_timeout_is_usage_error(self) -> None:
        result = runner.invoke(cli, ["wait", "--file", "x", "--check-timeout", "soon"])
        assert result.exit_code == 2

    def test_negative_delay_rejected(self) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["wait", "--file", "x", "--delay=-1s"])
        assert result.exit_code == 1
        assert "Invalid option" in result.output

    def test_config_file_is_used(self) -> None:
        with runner.isolated_filesystem():
            Path("healthy.yaml").write_text("timeout: 100ms\ndelay: 10ms\n", encoding="utf-8")
            result = runner.invoke(cli, ["wait", "--file", "absent", "-q"])
        assert result.exit_code == 1
        assert "Timed out" in result.output

    def test_callback_in_config_file_rejected(self) -> None:
        with runner.isolated_filesystem():
            Path("healthy.yaml").write_text("callback: print\n", encoding="utf-8")
            result = runner.invoke(cli, ["wait", "--file", "absent"])
        assert result.exit_code == 1
        assert "Could not load config" in result.output
        assert "callback" in result.output

    def test_invalid_environment_is_reported(self) -> None:
        with runner.isolated_filesystem():
            Path("ready").touch()
            result = runner.invoke(
                cli,
                ["wait", "--file", "ready", "--timeout", "5s"],
                env={"HEALTHY_TIMEOUT": "soon"},
            )
        assert result.exit_code == 1
        assert "Could not load config" in result.output


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommand:
    def test_show_prints_json(self) -> None:
        with runner.isolated_filesystem():
            Path("healthy.yaml").write_text("timeout: 5s\n", encoding="utf-8")
            result = runner.invoke(cli, ["config", "--show"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["timeout"] == 5.0
        assert data["callback"] is False

    def test_table_uses_duration_notation(self) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config"])
        assert result.exit_code == 0
        assert "30s" in result.output
        assert "100ms" in result.output

    def test_environment_applied(self) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "--show"], env={"HEALTHY_TIMEOUT": "5s"})
        assert result.exit_code == 0
        assert json.loads(result.output)["timeout"] == 5.0

    def test_explicit_missing_config_fails(self) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "-c", "missing.yaml"])
        assert result.exit_code == 1
        assert "Could not load config" in result.output
