"""Shared fixtures: a file-backed SQLite ledger with a controllable clock."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory
from domain.ledger import ChampionshipLedger
from repositories import ensure_ledger_schema


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0))


@pytest.fixture
def session_factory(tmp_path: Path) -> Iterator[sessionmaker[Session]]:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    ensure_ledger_schema(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def ledger(session_factory: sessionmaker[Session], clock: FakeClock) -> ChampionshipLedger:
    return ChampionshipLedger(session_factory, clock=clock)
