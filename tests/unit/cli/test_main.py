"""Tests for the inkwell CLI entry point."""

from __future__ import annotations

import logging

from typer.testing import CliRunner

from inkwell.cli.main import app

runner = CliRunner()


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("inkwell ")


def test_version_command() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "inkwell" in result.output


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("generate", "patch", "show", "export", "clear"):
        assert name in result.output


def test_verbose_enables_debug_logging(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    runner.invoke(app, ["--verbose", "show", "--db", str(tmp_path / "none.db")])
    assert logging.getLogger().level == logging.DEBUG


def test_default_log_level_is_warning(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    runner.invoke(app, ["show", "--db", str(tmp_path / "none.db")])
    assert logging.getLogger().level == logging.WARNING
