"""Win-probability predictions."""

from __future__ import annotations

import pytest

from domain.errors import InvalidInput, NotFound, PredictionPlayerNotFound
from domain.ledger import ChampionshipLedger


def test_fresh_players_are_even(ledger: ChampionshipLedger) -> None:
    alice = ledger.create_player("Alice")
    bob = ledger.create_player("Bob")

    prediction = ledger.predict_match(alice.id, bob.id)
    assert prediction.win_probability_a == pytest.approx(50.0)
    assert prediction.win_probability_b == pytest.approx(50.0)
    assert prediction.elo_difference == pytest.approx(0.0)


def test_prediction_favours_higher_rating(ledger: ChampionshipLedger) -> None:
    alice = ledger.create_player("Alice")
    bob = ledger.create_player("Bob")
    ledger.record_match(alice.id, bob.id, 10, 0)

    prediction = ledger.predict_match(alice.id, bob.id)
    assert prediction.elo_difference == pytest.approx(72.0)
    assert prediction.win_probability_a > 50.0
    assert prediction.win_probability_a + prediction.win_probability_b == pytest.approx(100.0)

    mirrored = ledger.predict_match(bob.id, alice.id)
    assert mirrored.win_probability_a == pytest.approx(prediction.win_probability_b)
    assert mirrored.elo_difference == pytest.approx(-72.0)


def test_prediction_does_not_change_ratings(ledger: ChampionshipLedger) -> None:
    alice = ledger.create_player("Alice")
    bob = ledger.create_player("Bob")
    ledger.predict_match(alice.id, bob.id)
    assert ledger.get_player(alice.id) == alice
    assert ledger.list_matches().total == 0


def test_prediction_rejects_self_pair_and_missing_players(ledger: ChampionshipLedger) -> None:
    alice = ledger.create_player("Alice")

    with pytest.raises(InvalidInput):
        ledger.predict_match(alice.id, alice.id)

    with pytest.raises(PredictionPlayerNotFound) as error:
        ledger.predict_match(alice.id, 999)
    assert isinstance(error.value, InvalidInput)
    assert isinstance(error.value, NotFound)
