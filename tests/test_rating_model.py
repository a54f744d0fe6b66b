"""Unit tests for the two-player Elo rating model."""

from __future__ import annotations

import math

import pytest

from domain.errors import InvalidInput
from domain.ratings.common import Outcome
from domain.ratings.elo import (
    EloParameters,
    KFactorTier,
    calculate_expected_score,
    calculate_rating_update,
    k_factor_for,
    margin_multiplier,
)


def test_elo_parameters_defaults_are_expected_constants() -> None:
    params = EloParameters()
    assert params.initial_rating == pytest.approx(1000.0)
    assert params.scale_factor == pytest.approx(400.0)
    assert params.rating_precision == 1
    assert [(tier.min_matches, tier.k_factor) for tier in params.k_factor_tiers] == [
        (0, 40.0),
        (10, 32.0),
        (30, 16.0),
    ]


def test_expected_score_equal_ratings_is_half() -> None:
    assert calculate_expected_score(1000.0, 1000.0) == pytest.approx(0.5)


def test_expected_scores_sum_to_one() -> None:
    expected_a = calculate_expected_score(1200.0, 1000.0)
    expected_b = calculate_expected_score(1000.0, 1200.0)
    assert expected_a + expected_b == pytest.approx(1.0)
    assert expected_a > 0.5


def test_four_hundred_point_gap_is_ten_to_one() -> None:
    assert calculate_expected_score(1400.0, 1000.0) == pytest.approx(10.0 / 11.0)


@pytest.mark.parametrize(
    ("match_count", "expected"),
    [(0, 40.0), (9, 40.0), (10, 32.0), (29, 32.0), (30, 16.0), (500, 16.0)],
)
def test_k_factor_tiers(match_count: int, expected: float) -> None:
    assert k_factor_for(match_count) == pytest.approx(expected)


def test_k_factor_rejects_negative_count() -> None:
    with pytest.raises(InvalidInput):
        k_factor_for(-1)


def test_k_factor_uses_custom_tiers() -> None:
    tiers = (KFactorTier(0, 50.0), KFactorTier(3, 10.0))
    assert k_factor_for(2, tiers) == pytest.approx(50.0)
    assert k_factor_for(3, tiers) == pytest.approx(10.0)


def test_margin_multiplier_is_neutral_for_draws_and_close_games() -> None:
    assert margin_multiplier(5, 5) == pytest.approx(1.0)
    assert margin_multiplier(0, 0) == pytest.approx(1.0)
    assert margin_multiplier(3, 2) == pytest.approx(1.0)
    assert margin_multiplier(6, 4) == pytest.approx(1.0)


def test_margin_multiplier_grows_with_dominance_and_is_capped() -> None:
    assert margin_multiplier(7, 3) == pytest.approx(1.2)
    assert margin_multiplier(10, 0) == pytest.approx(1.8)
    assert margin_multiplier(0, 10) == pytest.approx(1.8)
    assert margin_multiplier(10, 0, slope=5.0) == pytest.approx(2.0)


def test_margin_multiplier_handles_single_point_win() -> None:
    assert margin_multiplier(1, 0) == pytest.approx(1.8)


def test_fresh_players_dominant_win() -> None:
    update = calculate_rating_update(1000.0, 1000.0, 10, 0, 0, 0)
    assert update.expected_score_a == pytest.approx(0.5)
    assert update.expected_score_b == pytest.approx(0.5)
    assert update.outcome_a is Outcome.WIN
    assert update.outcome_b is Outcome.LOSS
    assert update.k_factor_a == pytest.approx(40.0)
    assert update.k_factor_b == pytest.approx(40.0)
    assert update.margin_multiplier > 1.0
    assert update.delta_a > 20.0
    assert update.delta_a == pytest.approx(36.0)
    assert update.delta_b == pytest.approx(-update.delta_a)


def test_draw_between_equals_changes_nothing() -> None:
    update = calculate_rating_update(1000.0, 1000.0, 3, 3, 4, 4)
    assert update.outcome_a is Outcome.DRAW
    assert update.delta_a == pytest.approx(0.0)
    assert update.delta_b == pytest.approx(0.0)


def test_draw_moves_favourite_down() -> None:
    update = calculate_rating_update(1200.0, 1000.0, 2, 2, 0, 0)
    assert update.delta_a < 0.0
    assert update.delta_b > 0.0


def test_different_tiers_break_zero_sum() -> None:
    update = calculate_rating_update(1000.0, 1000.0, 3, 2, 0, 40)
    assert update.k_factor_a == pytest.approx(40.0)
    assert update.k_factor_b == pytest.approx(16.0)
    assert update.delta_a == pytest.approx(20.0)
    assert update.delta_b == pytest.approx(-8.0)


def test_deltas_are_rounded_to_precision() -> None:
    update = calculate_rating_update(1037.3, 1000.0, 3, 1, 2, 7)
    assert update.delta_a == round(update.delta_a, 1)
    assert update.delta_b == round(update.delta_b, 1)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"rating_a": math.nan},
        {"rating_b": math.inf},
        {"rating_a": -1.0},
        {"score_a": -1},
        {"match_count_b": -3},
    ],
)
def test_invalid_inputs_are_rejected(kwargs: dict[str, float]) -> None:
    arguments = {
        "rating_a": 1000.0,
        "rating_b": 1000.0,
        "score_a": 1,
        "score_b": 0,
        "match_count_a": 0,
        "match_count_b": 0,
    }
    arguments.update(kwargs)
    with pytest.raises(InvalidInput):
        calculate_rating_update(**arguments)


def test_outcome_helpers() -> None:
    assert Outcome.from_scores(2, 1) is Outcome.WIN
    assert Outcome.from_scores(1, 2) is Outcome.LOSS
    assert Outcome.from_scores(2, 2) is Outcome.DRAW
    assert Outcome.WIN.flipped() is Outcome.LOSS
    assert Outcome.DRAW.flipped() is Outcome.DRAW
    assert Outcome.DRAW.actual_score == pytest.approx(0.5)


def test_rating_update_is_deterministic() -> None:
    first = calculate_rating_update(1123.4, 987.6, 7, 3, 12, 4)
    second = calculate_rating_update(1123.4, 987.6, 7, 3, 12, 4)
    assert first == second


def test_win_against_weaker_opponent_never_earns_more() -> None:
    deltas = [
        calculate_rating_update(1500.0 + gap, 1500.0, 10, 0, 5, 5).delta_a
        for gap in range(-800, 801)
    ]
    increases = [
        (gap, previous, current)
        for gap, (previous, current) in enumerate(zip(deltas, deltas[1:]), start=-799)
        if current > previous
    ]
    assert increases == []
    assert deltas[0] > deltas[800] > deltas[-1]


def test_dominant_win_moves_ratings_at_least_as_much_as_narrow_win() -> None:
    for rating_a, rating_b in ((1000.0, 1000.0), (1200.0, 1000.0), (1000.0, 1300.0)):
        dominant = calculate_rating_update(rating_a, rating_b, 10, 0, 3, 3)
        narrow = calculate_rating_update(rating_a, rating_b, 6, 5, 3, 3)
        assert abs(dominant.delta_a) >= abs(narrow.delta_a)
        assert abs(dominant.delta_b) >= abs(narrow.delta_b)
