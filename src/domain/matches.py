"""Match ledger: apply, reverse and list recorded matches."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from domain.errors import InvalidInput, InvalidMatch, MatchPlayerNotFound, NotFound
from domain.players import PlayerRegistry
from domain.ratings.elo.calculator import calculate_rating_update
from domain.reigns import RatedMatch
from models import Match, Player
from repositories.matches import (
    count_matches,
    delete_match,
    fetch_matches_chronological,
    get_match,
    list_matches,
)
from repositories.players import get_player

logger = logging.getLogger(__name__)


def _validate_score(label: str, score: int) -> None:
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidMatch(f"{label} must be an integer, got {score!r}")
    if score < 0:
        raise InvalidMatch(f"{label} cannot be negative, got {score}")


class MatchLedger:
    """Append-only, revocable record of matches.

    Every match keeps its own before/after ratings and deltas. Reversal subtracts
    exactly the stored deltas, so it is exact no matter what happened since. Later
    matches are never re-rated when an earlier one is removed.
    """

    def __init__(self, players: PlayerRegistry) -> None:
        self.players = players

    def _load_participant(self, session: Session, label: str, player_id: int) -> Player:
        player = get_player(session, player_id)
        if player is None:
            raise MatchPlayerNotFound(f"{label}={player_id} does not exist")
        return player

    def record(
        self,
        session: Session,
        player_a_id: int,
        player_b_id: int,
        score_a: int,
        score_b: int,
        *,
        played_at: datetime,
    ) -> Match:
        if player_a_id == player_b_id:
            raise InvalidMatch(f"player_id={player_a_id} cannot play against themselves")
        _validate_score("score_a", score_a)
        _validate_score("score_b", score_b)

        player_a = self._load_participant(session, "player_a_id", player_a_id)
        player_b = self._load_participant(session, "player_b_id", player_b_id)

        rating_a_before = player_a.rating
        rating_b_before = player_b.rating

        update = calculate_rating_update(
            rating_a_before,
            rating_b_before,
            score_a,
            score_b,
            player_a.total_matches,
            player_b.total_matches,
            self.players.params,
        )

        self.players.apply_outcome(player_a, update.delta_a, update.outcome_a)
        self.players.apply_outcome(player_b, update.delta_b, update.outcome_b)

        match = Match(
            player_a_id=player_a.id,
            player_b_id=player_b.id,
            score_a=score_a,
            score_b=score_b,
            rating_a_before=rating_a_before,
            rating_b_before=rating_b_before,
            rating_a_after=player_a.rating,
            rating_b_after=player_b.rating,
            delta_a=update.delta_a,
            delta_b=update.delta_b,
            expected_score_a=update.expected_score_a,
            k_factor_a=update.k_factor_a,
            k_factor_b=update.k_factor_b,
            margin_multiplier=update.margin_multiplier,
            played_at=played_at,
        )
        match.player_a = player_a
        match.player_b = player_b
        session.add(match)
        session.flush()

        logger.info(
            "recorded match id=%s %s(%s) %s-%s %s(%s) delta_a=%+.1f delta_b=%+.1f",
            match.id,
            player_a.name,
            player_a.id,
            score_a,
            score_b,
            player_b.name,
            player_b.id,
            update.delta_a,
            update.delta_b,
        )
        return match

    def get(self, session: Session, match_id: int) -> Match:
        match = get_match(session, match_id)
        if match is None:
            raise NotFound(f"match_id={match_id} does not exist")
        return match

    def remove(self, session: Session, match: Match) -> None:
        """Reverse a match's rating effect on both players and drop the record."""
        player_a = self.players.get(session, match.player_a_id)
        player_b = self.players.get(session, match.player_b_id)

        self.players.reverse_outcome(player_a, match.delta_a, match.outcome_a)
        self.players.reverse_outcome(player_b, match.delta_b, match.outcome_b)

        match_id = match.id
        delete_match(session, match)
        logger.info(
            "reversed match id=%s player_a=%s(%+.1f) player_b=%s(%+.1f)",
            match_id,
            player_a.id,
            -match.delta_a,
            player_b.id,
            -match.delta_b,
        )

    def delete(self, session: Session, match_id: int) -> None:
        self.remove(session, self.get(session, match_id))

    def page(
        self,
        session: Session,
        *,
        player_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Match], int]:
        """Return one page of matches (newest first) and the unpaged total."""
        if limit <= 0:
            raise InvalidInput("limit must be greater than 0")
        if offset < 0:
            raise InvalidInput("offset must be >= 0")
        if player_id is not None:
            self.players.get(session, player_id)

        matches = list_matches(session, player_id=player_id, limit=limit, offset=offset)
        return matches, count_matches(session, player_id=player_id)

    def for_player(self, session: Session, player_id: int) -> list[Match]:
        return list_matches(session, player_id=player_id)

    def chronological(self, session: Session) -> list[RatedMatch]:
        return [
            RatedMatch(
                played_at=match.played_at,
                player_a_id=match.player_a_id,
                player_b_id=match.player_b_id,
                rating_a_after=match.rating_a_after,
                rating_b_after=match.rating_b_after,
            )
            for match in fetch_matches_chronological(session)
        ]
