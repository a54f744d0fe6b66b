"""Persistence helpers for players."""

from __future__ import annotations

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from models import Player

# rating desc, then experience desc, then id asc: a strict total order
LEADERBOARD_ORDER = (
    Player.rating.desc(),
    Player.total_matches.desc(),
    Player.id.asc(),
)


def insert_player(session: Session, *, name: str, rating: float) -> Player:
    player = Player(name=name, rating=rating, wins=0, losses=0, draws=0)
    session.add(player)
    session.flush()
    return player


def get_player(session: Session, player_id: int) -> Player | None:
    return session.get(Player, player_id)


def get_player_by_name(session: Session, name: str) -> Player | None:
    statement = select(Player).where(Player.name == name)
    return session.execute(statement).scalar_one_or_none()


def search_players(session: Session, query: str, *, limit: int) -> list[Player]:
    """Case-insensitive substring match on player name, best rated first."""
    pattern = f"%{query.lower()}%"
    statement = (
        select(Player)
        .where(func.lower(Player.name).like(pattern))
        .order_by(*LEADERBOARD_ORDER)
        .limit(limit)
    )
    return list(session.execute(statement).scalars())


def list_ranked_players(
    session: Session,
    *,
    limit: int | None,
    offset: int = 0,
    active_only: bool = True,
) -> list[Player]:
    statement = select(Player).order_by(*LEADERBOARD_ORDER).offset(offset)
    if active_only:
        statement = statement.where(Player.total_matches > 0)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.execute(statement).scalars())


def count_players(session: Session, *, active_only: bool = False) -> int:
    statement = select(func.count(Player.id))
    if active_only:
        statement = statement.where(Player.total_matches > 0)
    result = session.scalar(statement)
    return int(result or 0)


def count_players_ranked_ahead(session: Session, player: Player) -> int:
    """Count players strictly ahead of ``player`` in the leaderboard order."""
    total_matches = player.total_matches
    statement = select(func.count(Player.id)).where(
        or_(
            Player.rating > player.rating,
            and_(Player.rating == player.rating, Player.total_matches > total_matches),
            and_(
                Player.rating == player.rating,
                Player.total_matches == total_matches,
                Player.id < player.id,
            ),
        )
    )
    result = session.scalar(statement)
    return int(result or 0)


def delete_player(session: Session, player: Player) -> None:
    session.delete(player)
    session.flush()
