"""Pure leaderboard ordering helpers."""

from __future__ import annotations


def ranking_key(rating: float, total_matches: int, player_id: int) -> tuple[float, int, int]:
    """Sort key matching the stored leaderboard order (ascending sort, best first)."""
    return (-rating, -total_matches, player_id)


def percentile(rank: int, total_players: int) -> float:
    """Share of the field at or below ``rank``; rank 1 of N is 1.0."""
    if total_players <= 0:
        raise ValueError("total_players must be > 0")
    if rank < 1 or rank > total_players:
        raise ValueError(f"rank must be within 1..{total_players}, got {rank}")
    return 1.0 - (rank - 1) / total_players
