"""Database repository helpers."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from models import Base


def ensure_ledger_schema(engine: Engine) -> None:
    """Create the players, matches and championship_reigns tables if missing."""
    Base.metadata.create_all(bind=engine)


__all__ = ["ensure_ledger_schema"]
