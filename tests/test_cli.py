"""Smoke tests for the ledger command-line entry point."""

from __future__ import annotations

import importlib.util
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType

import pytest
from typer.testing import CliRunner

from logging_config import LOG_FORMAT

SCRIPTS_DIR = Path(__file__).resolve().parents[1] / "scripts"


def _load_script(name: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(f"ledger_scripts_{name}", SCRIPTS_DIR / f"{name}.py")
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers() -> Iterator[None]:
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if handler.formatter is not None and handler.formatter._fmt == LOG_FORMAT:
            root_logger.removeHandler(handler)


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'cli.db'}"


def test_ledger_cli_round_trip(db_url: str) -> None:
    app = _load_script("ledger").app
    runner = CliRunner()

    def invoke(*args: str):
        result = runner.invoke(app, ["--db-url", db_url, *args])
        assert result.exit_code == 0, result.output
        return result.output

    assert "schema ready" in invoke("init-db")
    assert "Alice" in invoke("create-player", "Alice")
    invoke("create-player", "Bob")
    assert "Bob" in invoke("find-player", "Bob")

    recorded = invoke("record-match", "1", "2", "10", "0")
    assert "Alice 10-0 Bob" in recorded
    assert "(+36.0)" in recorded

    leaderboard = invoke("leaderboard")
    assert "total=2" in leaderboard
    assert "1. #1" in leaderboard

    assert "Alice" in invoke("champion")
    assert "Alice" in invoke("champion-stats")
    assert "win_probability" in invoke("predict", "1", "2")


def test_ledger_cli_reports_error_kind(db_url: str) -> None:
    app = _load_script("ledger").app
    runner = CliRunner()
    assert runner.invoke(app, ["--db-url", db_url, "init-db"]).exit_code == 0

    result = runner.invoke(app, ["--db-url", db_url, "player", "99"])
    assert result.exit_code == 1


def test_backfill_dry_run(db_url: str) -> None:
    ledger_app = _load_script("ledger").app
    backfill_app = _load_script("backfill_championships").app
    runner = CliRunner()
    for args in (["init-db"], ["create-player", "Alice"], ["create-player", "Bob"], ["record-match", "2", "1", "3", "1"]):
        assert runner.invoke(ledger_app, ["--db-url", db_url, *args]).exit_code == 0

    result = runner.invoke(backfill_app, ["--db-url", db_url, "--dry-run", "--log-level", "WARNING"])
    assert result.exit_code == 0, result.output
    assert "[dry-run] processed_matches=1 reigns=1 champions=1" in result.output
