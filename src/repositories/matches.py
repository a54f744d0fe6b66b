"""Persistence helpers for recorded matches."""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from models import Match


def get_match(session: Session, match_id: int) -> Match | None:
    return session.get(Match, match_id)


def _involving(player_id: int):
    return or_(Match.player_a_id == player_id, Match.player_b_id == player_id)


def list_matches(
    session: Session,
    *,
    player_id: int | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Match]:
    """Fetch matches newest first, optionally restricted to one player."""
    statement = select(Match).order_by(Match.played_at.desc(), Match.id.desc()).offset(offset)
    if player_id is not None:
        statement = statement.where(_involving(player_id))
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.execute(statement).scalars())


def count_matches(session: Session, *, player_id: int | None = None) -> int:
    statement = select(func.count(Match.id))
    if player_id is not None:
        statement = statement.where(_involving(player_id))
    result = session.scalar(statement)
    return int(result or 0)


def fetch_matches_chronological(session: Session) -> list[Match]:
    """Fetch every match in deterministic replay order."""
    statement = select(Match).order_by(Match.played_at, Match.id)
    return list(session.execute(statement).scalars())


def delete_match(session: Session, match: Match) -> None:
    session.delete(match)
    session.flush()
