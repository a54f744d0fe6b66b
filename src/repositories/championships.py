"""Persistence helpers for championship reigns."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session, joinedload

from domain.reigns import ReignSpan
from models import ChampionshipReign


def fetch_open_reigns(session: Session) -> list[ChampionshipReign]:
    statement = (
        select(ChampionshipReign)
        .where(ChampionshipReign.ended_at.is_(None))
        .order_by(ChampionshipReign.started_at.desc(), ChampionshipReign.id.desc())
    )
    return list(session.execute(statement).scalars())


def insert_reign(session: Session, *, player_id: int, started_at: datetime) -> ChampionshipReign:
    reign = ChampionshipReign(player_id=player_id, started_at=started_at, ended_at=None)
    session.add(reign)
    session.flush()
    return reign


def insert_reign_spans(session: Session, spans: Sequence[ReignSpan]) -> None:
    """Bulk insert reconstructed reigns."""
    if not spans:
        return

    payload = [
        {
            "player_id": span.player_id,
            "started_at": span.started_at,
            "ended_at": span.ended_at,
        }
        for span in spans
    ]
    session.execute(insert(ChampionshipReign), payload)


def list_reigns(
    session: Session,
    *,
    limit: int | None = None,
    player_id: int | None = None,
) -> list[ChampionshipReign]:
    """Fetch reigns newest first with their players eagerly loaded."""
    statement = (
        select(ChampionshipReign)
        .options(joinedload(ChampionshipReign.player))
        .order_by(ChampionshipReign.started_at.desc(), ChampionshipReign.id.desc())
    )
    if player_id is not None:
        statement = statement.where(ChampionshipReign.player_id == player_id)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.execute(statement).scalars())


def delete_reigns_for_player(session: Session, player_id: int) -> None:
    session.execute(delete(ChampionshipReign).where(ChampionshipReign.player_id == player_id))


def delete_all_reigns(session: Session) -> None:
    session.execute(delete(ChampionshipReign))
