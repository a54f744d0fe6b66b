"""Pure championship-reign arithmetic: durations, per-player stats and history replay."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from domain.ranking import ranking_key

SECONDS_PER_DAY = 86_400


@dataclass(frozen=True)
class ReignSpan:
    """One reign interval; ``ended_at`` is None while the reign is open."""

    player_id: int
    started_at: datetime
    ended_at: datetime | None
    player_name: str = ""


@dataclass(frozen=True)
class ChampionStats:
    """Aggregated championship record for one player."""

    player_id: int
    player_name: str
    total_reigns: int
    total_days: int
    longest_reign_days: int
    first_crowned: datetime
    last_crowned: datetime
    current_champion: bool


@dataclass(frozen=True)
class RatedMatch:
    """Post-match ratings of one recorded match, as needed for history replay."""

    played_at: datetime
    player_a_id: int
    player_b_id: int
    rating_a_after: float
    rating_b_after: float


def reign_days(started_at: datetime, ended_at: datetime | None, now: datetime) -> int:
    """Whole days covered by a reign; open reigns run until ``now``."""
    end = ended_at if ended_at is not None else now
    seconds = (end - started_at).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // SECONDS_PER_DAY)


def aggregate_champion_stats(spans: Iterable[ReignSpan], now: datetime) -> list[ChampionStats]:
    """Fold reigns into per-player stats, longest total tenure first.

    Ties are broken by reign count (more first), earliest coronation, then player id.
    """
    grouped: dict[int, list[ReignSpan]] = {}
    for span in spans:
        grouped.setdefault(span.player_id, []).append(span)

    stats: list[ChampionStats] = []
    for player_id, player_spans in grouped.items():
        durations = [reign_days(span.started_at, span.ended_at, now) for span in player_spans]
        stats.append(
            ChampionStats(
                player_id=player_id,
                player_name=player_spans[0].player_name,
                total_reigns=len(player_spans),
                total_days=sum(durations),
                longest_reign_days=max(durations),
                first_crowned=min(span.started_at for span in player_spans),
                last_crowned=max(span.started_at for span in player_spans),
                current_champion=any(span.ended_at is None for span in player_spans),
            )
        )

    stats.sort(key=lambda item: (-item.total_days, -item.total_reigns, item.first_crowned, item.player_id))
    return stats


def reconstruct_reigns(matches: Iterable[RatedMatch]) -> list[ReignSpan]:
    """Replay matches in the given order and derive every rank-1 change.

    Only players who have appeared in at least one replayed match are ranked. The
    last span returned is left open.
    """
    ratings: dict[int, float] = {}
    match_counts: dict[int, int] = {}
    spans: list[ReignSpan] = []
    champion_id: int | None = None
    reign_started_at: datetime | None = None

    for match in matches:
        ratings[match.player_a_id] = match.rating_a_after
        ratings[match.player_b_id] = match.rating_b_after
        match_counts[match.player_a_id] = match_counts.get(match.player_a_id, 0) + 1
        match_counts[match.player_b_id] = match_counts.get(match.player_b_id, 0) + 1

        leader_id = min(
            ratings,
            key=lambda player_id: ranking_key(ratings[player_id], match_counts[player_id], player_id),
        )
        if leader_id == champion_id:
            continue

        if champion_id is not None and reign_started_at is not None:
            spans.append(ReignSpan(player_id=champion_id, started_at=reign_started_at, ended_at=match.played_at))
        champion_id = leader_id
        reign_started_at = match.played_at

    if champion_id is not None and reign_started_at is not None:
        spans.append(ReignSpan(player_id=champion_id, started_at=reign_started_at, ended_at=None))
    return spans


__all__ = [
    "ChampionStats",
    "RatedMatch",
    "ReignSpan",
    "SECONDS_PER_DAY",
    "aggregate_champion_stats",
    "reconstruct_reigns",
    "reign_days",
]
