"""Player registry: creation, lookup, rating mutation and cascading removal."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from domain.errors import InvalidInput, InvariantViolation, NotFound, PlayerExists
from domain.ratings.common import Outcome
from domain.ratings.elo.calculator import EloParameters, k_factor_for
from domain.records import PlayerSnapshot
from models import Player
from repositories.players import (
    delete_player,
    get_player,
    get_player_by_name,
    insert_player,
    search_players,
)

if TYPE_CHECKING:
    from domain.matches import MatchLedger

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 128

_COUNTER_BY_OUTCOME = {
    Outcome.WIN: "wins",
    Outcome.LOSS: "losses",
    Outcome.DRAW: "draws",
}


def _normalize_name(name: str) -> str:
    normalized = name.strip() if isinstance(name, str) else ""
    if not normalized:
        raise InvalidInput("player name is required")
    if len(normalized) > MAX_NAME_LENGTH:
        raise InvalidInput(f"player name must be at most {MAX_NAME_LENGTH} characters")
    return normalized


class PlayerRegistry:
    """Owns every write to a player's rating and counters."""

    def __init__(self, params: EloParameters, *, provisional_max_matches: int = 5) -> None:
        self.params = params
        self.provisional_max_matches = provisional_max_matches

    def create(self, session: Session, name: str) -> Player:
        normalized = _normalize_name(name)
        if get_player_by_name(session, normalized) is not None:
            raise PlayerExists(f"player with name {normalized!r} already exists")

        player = insert_player(session, name=normalized, rating=self.params.initial_rating)
        logger.info("created player id=%s name=%r rating=%.1f", player.id, player.name, player.rating)
        return player

    def get(self, session: Session, player_id: int) -> Player:
        player = get_player(session, player_id)
        if player is None:
            raise NotFound(f"player_id={player_id} does not exist")
        return player

    def find_by_name(self, session: Session, name: str) -> Player:
        player = get_player_by_name(session, name)
        if player is None:
            raise NotFound(f"player named {name!r} does not exist")
        return player

    def search(self, session: Session, query: str, *, limit: int = 20) -> list[Player]:
        query = query.strip() if isinstance(query, str) else ""
        if not query:
            raise InvalidInput("search query is required")
        if limit <= 0:
            raise InvalidInput("limit must be greater than 0")
        return search_players(session, query, limit=limit)

    def rename(self, session: Session, player_id: int, name: str) -> Player:
        player = self.get(session, player_id)
        normalized = _normalize_name(name)
        if normalized == player.name:
            return player

        existing = get_player_by_name(session, normalized)
        if existing is not None and existing.id != player.id:
            raise PlayerExists(f"player with name {normalized!r} already exists")

        logger.info("renamed player id=%s %r -> %r", player.id, player.name, normalized)
        player.name = normalized
        session.flush()
        return player

    def delete(self, session: Session, player_id: int, *, matches: MatchLedger) -> int:
        """Reverse and remove every match of the player, then remove the player.

        Returns the number of matches removed.
        """
        player = self.get(session, player_id)
        player_name = player.name
        player_matches = matches.for_player(session, player.id)
        for match in player_matches:
            matches.remove(session, match)

        delete_player(session, player)
        logger.info(
            "deleted player id=%s name=%r cascaded_matches=%s",
            player_id,
            player_name,
            len(player_matches),
        )
        return len(player_matches)

    def apply_outcome(self, player: Player, delta: float, outcome: Outcome) -> None:
        player.rating = round(player.rating + delta, self.params.rating_precision)
        counter = _COUNTER_BY_OUTCOME[outcome]
        setattr(player, counter, getattr(player, counter) + 1)

    def reverse_outcome(self, player: Player, delta: float, outcome: Outcome) -> None:
        counter = _COUNTER_BY_OUTCOME[outcome]
        current = getattr(player, counter)
        if current <= 0:
            raise InvariantViolation(
                f"player_id={player.id} has {counter}={current}; cannot reverse a {outcome.value}"
            )
        player.rating = round(player.rating - delta, self.params.rating_precision)
        setattr(player, counter, current - 1)

    def is_provisional(self, player: Player) -> bool:
        return player.total_matches <= self.provisional_max_matches

    def k_factor(self, player: Player) -> float:
        return k_factor_for(player.total_matches, self.params.k_factor_tiers)

    def snapshot(self, player: Player) -> PlayerSnapshot:
        return PlayerSnapshot(
            id=player.id,
            name=player.name,
            rating=player.rating,
            wins=player.wins,
            losses=player.losses,
            draws=player.draws,
            total_matches=player.total_matches,
            win_rate=player.win_rate,
            is_provisional=self.is_provisional(player),
            k_factor=self.k_factor(player),
        )
