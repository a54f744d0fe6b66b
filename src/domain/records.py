"""Immutable snapshots returned by ledger operations.

Snapshots are detached from any database session, so callers can keep them after
the transaction that produced them has ended.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from domain.reigns import reign_days
from models import ChampionshipReign, Match


@dataclass(frozen=True)
class PlayerSnapshot:
    id: int
    name: str
    rating: float
    wins: int
    losses: int
    draws: int
    total_matches: int
    win_rate: float
    is_provisional: bool
    k_factor: float


@dataclass(frozen=True)
class MatchSnapshot:
    id: int
    player_a_id: int
    player_b_id: int
    player_a_name: str
    player_b_name: str
    score_a: int
    score_b: int
    winner_id: int | None
    rating_a_before: float
    rating_b_before: float
    rating_a_after: float
    rating_b_after: float
    delta_a: float
    delta_b: float
    expected_score_a: float
    k_factor_a: float
    k_factor_b: float
    margin_multiplier: float
    played_at: datetime

    @classmethod
    def from_model(cls, match: Match) -> MatchSnapshot:
        return cls(
            id=match.id,
            player_a_id=match.player_a_id,
            player_b_id=match.player_b_id,
            player_a_name=match.player_a.name,
            player_b_name=match.player_b.name,
            score_a=match.score_a,
            score_b=match.score_b,
            winner_id=match.winner_id,
            rating_a_before=match.rating_a_before,
            rating_b_before=match.rating_b_before,
            rating_a_after=match.rating_a_after,
            rating_b_after=match.rating_b_after,
            delta_a=match.delta_a,
            delta_b=match.delta_b,
            expected_score_a=match.expected_score_a,
            k_factor_a=match.k_factor_a,
            k_factor_b=match.k_factor_b,
            margin_multiplier=match.margin_multiplier,
            played_at=match.played_at,
        )


@dataclass(frozen=True)
class ReignSnapshot:
    id: int
    player_id: int
    player_name: str
    started_at: datetime
    ended_at: datetime | None
    days: int

    @property
    def is_active(self) -> bool:
        return self.ended_at is None

    @classmethod
    def from_model(cls, reign: ChampionshipReign, *, now: datetime) -> ReignSnapshot:
        return cls(
            id=reign.id,
            player_id=reign.player_id,
            player_name=reign.player.name,
            started_at=reign.started_at,
            ended_at=reign.ended_at,
            days=reign_days(reign.started_at, reign.ended_at, now),
        )


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    player: PlayerSnapshot


@dataclass(frozen=True)
class LeaderboardPage:
    entries: tuple[LeaderboardEntry, ...]
    total: int
    limit: int
    offset: int


@dataclass(frozen=True)
class MatchPage:
    matches: tuple[MatchSnapshot, ...]
    total: int
    limit: int
    offset: int


@dataclass(frozen=True)
class PlayerRank:
    player_id: int
    rank: int
    percentile: float
    total_players: int


@dataclass(frozen=True)
class MatchPrediction:
    player_a_id: int
    player_b_id: int
    win_probability_a: float
    win_probability_b: float
    elo_difference: float
