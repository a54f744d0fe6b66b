"""Elo rating model."""

from domain.ratings.elo.calculator import (
    DEFAULT_K_FACTOR_TIERS,
    EloParameters,
    KFactorTier,
    RatingUpdate,
    calculate_expected_score,
    calculate_rating_update,
    k_factor_for,
    margin_multiplier,
)

__all__ = [
    "DEFAULT_K_FACTOR_TIERS",
    "EloParameters",
    "KFactorTier",
    "RatingUpdate",
    "calculate_expected_score",
    "calculate_rating_update",
    "k_factor_for",
    "margin_multiplier",
]
