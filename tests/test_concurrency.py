"""Concurrent writers must serialize into a consistent ledger."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from domain.ledger import ChampionshipLedger


def test_parallel_record_match_keeps_counters_and_reigns_consistent(ledger: ChampionshipLedger) -> None:
    player_ids = [ledger.create_player(f"Player {index}").id for index in range(4)]
    pairings = [
        (player_ids[index % 4], player_ids[(index + 1) % 4], (index % 5) + 1, index % 3)
        for index in range(40)
    ]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda pairing: ledger.record_match(*pairing), pairings))

    assert len({match.id for match in results}) == 40
    assert ledger.list_matches().total == 40

    players = [ledger.get_player(player_id) for player_id in player_ids]
    assert sum(player.total_matches for player in players) == 80
    assert sum(player.wins for player in players) == sum(player.losses for player in players)

    # equal tiers throughout would make this exactly zero-sum; allow rounding drift
    total_delta = sum(match.delta_a + match.delta_b for match in results)
    assert sum(player.rating for player in players) == pytest.approx(4000.0 + total_delta)

    champion = ledger.get_current_champion()
    assert champion is not None
    assert champion.player_id == ledger.get_top_players(1)[0].player.id
    open_reigns = [reign for reign in ledger.get_championship_history(limit=0) if reign.ended_at is None]
    assert len(open_reigns) == 1


def test_parallel_deletes_reverse_every_match(ledger: ChampionshipLedger) -> None:
    alice = ledger.create_player("Alice")
    bob = ledger.create_player("Bob")
    matches = [ledger.record_match(alice.id, bob.id, index % 4, 2) for index in range(12)]

    with ThreadPoolExecutor(max_workers=6) as pool:
        list(pool.map(lambda match: ledger.delete_match(match.id), matches))

    for player_id in (alice.id, bob.id):
        player = ledger.get_player(player_id)
        assert player.total_matches == 0
        assert player.rating == 1000.0
    assert ledger.get_current_champion() is None
