"""Two-player Elo logic with experience-tiered K-factors and a score-margin multiplier."""

from __future__ import annotations

from dataclasses import dataclass
from math import isfinite

from domain.errors import InvalidInput
from domain.ratings.common import Outcome


@dataclass(frozen=True)
class KFactorTier:
    """K-factor applied to players with at least ``min_matches`` recorded matches."""

    min_matches: int
    k_factor: float


DEFAULT_K_FACTOR_TIERS: tuple[KFactorTier, ...] = (
    KFactorTier(min_matches=0, k_factor=40.0),
    KFactorTier(min_matches=10, k_factor=32.0),
    KFactorTier(min_matches=30, k_factor=16.0),
)


@dataclass(frozen=True)
class EloParameters:
    initial_rating: float = 1000.0
    scale_factor: float = 400.0
    rating_precision: int = 1
    k_factor_tiers: tuple[KFactorTier, ...] = DEFAULT_K_FACTOR_TIERS
    margin_threshold: float = 0.6
    margin_slope: float = 2.0
    margin_ceiling: float = 2.0


@dataclass(frozen=True)
class RatingUpdate:
    """Everything the rating model derived for one match."""

    expected_score_a: float
    expected_score_b: float
    outcome_a: Outcome
    outcome_b: Outcome
    k_factor_a: float
    k_factor_b: float
    margin_multiplier: float
    delta_a: float
    delta_b: float


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float = 400.0) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def k_factor_for(match_count: int, tiers: tuple[KFactorTier, ...] = DEFAULT_K_FACTOR_TIERS) -> float:
    """Return the K-factor of the highest tier whose threshold ``match_count`` reaches."""
    if match_count < 0:
        raise InvalidInput(f"match_count must be >= 0, got {match_count}")

    selected = tiers[0].k_factor
    for tier in tiers:
        if match_count >= tier.min_matches:
            selected = tier.k_factor
    return selected


def margin_multiplier(
    score_a: int,
    score_b: int,
    *,
    threshold: float = 0.6,
    slope: float = 2.0,
    ceiling: float = 2.0,
) -> float:
    """Scale rating changes by how lopsided the score was.

    The winner's share of points ``m`` is ramped linearly above ``threshold`` and
    clamped to ``ceiling``. Draws always return 1.0.
    """
    if score_a == score_b:
        return 1.0

    winner_share = max(score_a, score_b) / max(1, score_a + score_b)
    return min(ceiling, 1.0 + slope * max(0.0, winner_share - threshold))


def _validate_inputs(
    rating_a: float,
    rating_b: float,
    score_a: int,
    score_b: int,
    match_count_a: int,
    match_count_b: int,
) -> None:
    for label, rating in (("rating_a", rating_a), ("rating_b", rating_b)):
        if not isfinite(rating) or rating < 0.0:
            raise InvalidInput(f"{label} must be a finite non-negative number, got {rating!r}")
    for label, score in (("score_a", score_a), ("score_b", score_b)):
        if score < 0:
            raise InvalidInput(f"{label} must be >= 0, got {score}")
    for label, count in (("match_count_a", match_count_a), ("match_count_b", match_count_b)):
        if count < 0:
            raise InvalidInput(f"{label} must be >= 0, got {count}")


def calculate_rating_update(
    rating_a: float,
    rating_b: float,
    score_a: int,
    score_b: int,
    match_count_a: int,
    match_count_b: int,
    params: EloParameters | None = None,
) -> RatingUpdate:
    """Compute both players' rating deltas for one match.

    Each side uses its own K-factor, so deltas are only mirror images when both
    players sit in the same experience tier.
    """
    params = params or EloParameters()
    _validate_inputs(rating_a, rating_b, score_a, score_b, match_count_a, match_count_b)

    expected_a = calculate_expected_score(rating_a, rating_b, params.scale_factor)
    expected_b = 1.0 - expected_a

    outcome_a = Outcome.from_scores(score_a, score_b)
    outcome_b = outcome_a.flipped()

    k_factor_a = k_factor_for(match_count_a, params.k_factor_tiers)
    k_factor_b = k_factor_for(match_count_b, params.k_factor_tiers)
    multiplier = margin_multiplier(
        score_a,
        score_b,
        threshold=params.margin_threshold,
        slope=params.margin_slope,
        ceiling=params.margin_ceiling,
    )

    delta_a = round(k_factor_a * multiplier * (outcome_a.actual_score - expected_a), params.rating_precision)
    delta_b = round(k_factor_b * multiplier * (outcome_b.actual_score - expected_b), params.rating_precision)

    return RatingUpdate(
        expected_score_a=expected_a,
        expected_score_b=expected_b,
        outcome_a=outcome_a,
        outcome_b=outcome_b,
        k_factor_a=k_factor_a,
        k_factor_b=k_factor_b,
        margin_multiplier=multiplier,
        delta_a=delta_a,
        delta_b=delta_b,
    )
