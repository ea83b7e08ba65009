from __future__ import annotations

import os

import pytest
from typer.testing import CliRunner

from maui import __version__
from maui.cli.app import app
from maui.core.config import ENV_LOG_LEVEL, Config

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_check_help_lists_options() -> None:
    result = runner.invoke(app, ["check", "--help"])
    assert result.exit_code == 0
    for option in ("--verbose", "--platform", "--manifest"):
        assert option in result.output


def test_debug_raises_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_LOG_LEVEL, "WARNING")

    result = runner.invoke(app, ["--debug", "check", "--help"])

    assert result.exit_code == 0
    assert os.environ[ENV_LOG_LEVEL] == "DEBUG"
    assert Config().with_env(os.environ).logging.level == "DEBUG"
