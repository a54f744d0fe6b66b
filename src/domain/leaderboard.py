"""Leaderboard view derived on demand from stored player ratings."""

from __future__ import annotations

from sqlalchemy.orm import Session

from domain.errors import InvalidInput, NotFound
from domain.ranking import percentile
from models import Player
from repositories.players import (
    count_players,
    count_players_ranked_ahead,
    get_player,
    list_ranked_players,
)


class Leaderboard:
    """Ordered ranking of players: rating desc, total matches desc, id asc.

    "Active" players have at least one recorded match; only they can hold rank 1
    for championship purposes.
    """

    def rank(
        self,
        session: Session,
        *,
        limit: int = 100,
        offset: int = 0,
        active_only: bool = True,
    ) -> tuple[list[Player], int]:
        if limit <= 0:
            raise InvalidInput("limit must be greater than 0")
        if offset < 0:
            raise InvalidInput("offset must be >= 0")

        players = list_ranked_players(session, limit=limit, offset=offset, active_only=active_only)
        return players, count_players(session, active_only=active_only)

    def rank_of(self, session: Session, player_id: int) -> tuple[int, float, int]:
        """Return ``(rank, percentile, total_players)`` in the full ordering."""
        player = get_player(session, player_id)
        if player is None:
            raise NotFound(f"player_id={player_id} does not exist")

        rank = count_players_ranked_ahead(session, player) + 1
        total_players = count_players(session)
        return rank, percentile(rank, total_players), total_players

    def leader(self, session: Session) -> Player | None:
        players = list_ranked_players(session, limit=1, active_only=True)
        return players[0] if players else None

    def top(self, session: Session, n: int = 10) -> list[Player]:
        if n <= 0:
            raise InvalidInput("n must be greater than 0")
        return list_ranked_players(session, limit=n, active_only=True)
