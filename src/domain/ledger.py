"""Ledger facade: the operation set offered to API and CLI callers.

Every mutating operation runs under one process-wide lock and inside one database
transaction, so rating changes, the ledger entry and the reign update commit
together or not at all.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy.orm import Session, sessionmaker

from domain.championship import ReignTracker
from domain.errors import InvariantViolation
from domain.leaderboard import Leaderboard
from domain.matches import MatchLedger
from domain.players import PlayerRegistry
from domain.prediction import PredictionService
from domain.ratings.elo.config import LedgerSystemConfig, default_ledger_config
from domain.records import (
    LeaderboardEntry,
    LeaderboardPage,
    MatchPage,
    MatchPrediction,
    MatchSnapshot,
    PlayerRank,
    PlayerSnapshot,
    ReignSnapshot,
)
from domain.reigns import ChampionStats, ReignSpan, reconstruct_reigns

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


@dataclass(frozen=True)
class RebuildSummary:
    """Outcome of a championship history rebuild."""

    processed_matches: int
    reigns: tuple[ReignSpan, ...]
    dry_run: bool


class ChampionshipLedger:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        config: LedgerSystemConfig | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.config = config or default_ledger_config()
        self._session_factory = session_factory
        self._clock = clock
        self._lock = threading.RLock()

        self.players = PlayerRegistry(
            self.config.parameters,
            provisional_max_matches=self.config.provisional_max_matches,
        )
        self.matches = MatchLedger(self.players)
        self.leaderboard = Leaderboard()
        self.predictions = PredictionService(self.config.parameters)
        self.reigns = ReignTracker(self.leaderboard)

    @contextmanager
    def _write(self, operation: str) -> Iterator[Session]:
        with self._lock:
            try:
                with self._session_factory() as session, session.begin():
                    yield session
            except InvariantViolation:
                logger.exception("invariant violation during %s; transaction rolled back", operation)
                raise

    @contextmanager
    def _read(self, operation: str) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except InvariantViolation:
            logger.exception("invariant violation during %s", operation)
            raise

    # players

    def create_player(self, name: str) -> PlayerSnapshot:
        with self._write("create_player") as session:
            player = self.players.create(session, name)
            return self.players.snapshot(player)

    def get_player(self, player_id: int) -> PlayerSnapshot:
        with self._read("get_player") as session:
            return self.players.snapshot(self.players.get(session, player_id))

    def find_player(self, name: str) -> PlayerSnapshot:
        with self._read("find_player") as session:
            return self.players.snapshot(self.players.find_by_name(session, name.strip()))

    def rename_player(self, player_id: int, name: str) -> PlayerSnapshot:
        with self._write("rename_player") as session:
            return self.players.snapshot(self.players.rename(session, player_id, name))

    def search_players(self, query: str, limit: int = 20) -> list[PlayerSnapshot]:
        with self._read("search_players") as session:
            return [self.players.snapshot(player) for player in self.players.search(session, query, limit=limit)]

    def delete_player(self, player_id: int) -> None:
        with self._write("delete_player") as session:
            self.players.get(session, player_id)
            self.reigns.forget_player(session, player_id)
            self.players.delete(session, player_id, matches=self.matches)
            self.reigns.evaluate(session, self._clock())

    # matches

    def record_match(self, player_a_id: int, player_b_id: int, score_a: int, score_b: int) -> MatchSnapshot:
        with self._write("record_match") as session:
            now = self._clock()
            match = self.matches.record(session, player_a_id, player_b_id, score_a, score_b, played_at=now)
            self.reigns.evaluate(session, now)
            return MatchSnapshot.from_model(match)

    def get_match(self, match_id: int) -> MatchSnapshot:
        with self._read("get_match") as session:
            return MatchSnapshot.from_model(self.matches.get(session, match_id))

    def list_matches(self, player_id: int | None = None, limit: int = 50, offset: int = 0) -> MatchPage:
        with self._read("list_matches") as session:
            matches, total = self.matches.page(session, player_id=player_id, limit=limit, offset=offset)
            return MatchPage(
                matches=tuple(MatchSnapshot.from_model(match) for match in matches),
                total=total,
                limit=limit,
                offset=offset,
            )

    def delete_match(self, match_id: int) -> None:
        with self._write("delete_match") as session:
            self.matches.delete(session, match_id)
            self.reigns.evaluate(session, self._clock())

    # leaderboard and prediction

    def get_leaderboard(self, limit: int = 100, offset: int = 0, *, include_inactive: bool = False) -> LeaderboardPage:
        with self._read("get_leaderboard") as session:
            players, total = self.leaderboard.rank(
                session,
                limit=limit,
                offset=offset,
                active_only=not include_inactive,
            )
            entries = tuple(
                LeaderboardEntry(rank=offset + index, player=self.players.snapshot(player))
                for index, player in enumerate(players, start=1)
            )
            return LeaderboardPage(entries=entries, total=total, limit=limit, offset=offset)

    def get_top_players(self, n: int = 10) -> list[LeaderboardEntry]:
        with self._read("get_top_players") as session:
            return [
                LeaderboardEntry(rank=index, player=self.players.snapshot(player))
                for index, player in enumerate(self.leaderboard.top(session, n), start=1)
            ]

    def get_player_rank(self, player_id: int) -> PlayerRank:
        with self._read("get_player_rank") as session:
            rank, percentile, total_players = self.leaderboard.rank_of(session, player_id)
            return PlayerRank(
                player_id=player_id,
                rank=rank,
                percentile=percentile,
                total_players=total_players,
            )

    def predict_match(self, player_a_id: int, player_b_id: int) -> MatchPrediction:
        with self._read("predict_match") as session:
            return self.predictions.predict(session, player_a_id, player_b_id)

    # championships

    def get_current_champion(self) -> ReignSnapshot | None:
        with self._read("get_current_champion") as session:
            reign = self.reigns.current(session)
            if reign is None:
                return None
            return ReignSnapshot.from_model(reign, now=self._clock())

    def get_championship_history(self, limit: int | None = None, player_id: int | None = None) -> list[ReignSnapshot]:
        if limit is None:
            limit = self.config.history_limit
        with self._read("get_championship_history") as session:
            if player_id is not None:
                self.players.get(session, player_id)
            now = self._clock()
            return [
                ReignSnapshot.from_model(reign, now=now)
                for reign in self.reigns.history(session, limit=limit, player_id=player_id)
            ]

    def get_champion_stats(self) -> list[ChampionStats]:
        with self._read("get_champion_stats") as session:
            return self.reigns.stats(session, self._clock())

    def rebuild_championship_history(self, *, dry_run: bool = False) -> RebuildSummary:
        """Replay the match ledger to regenerate every reign.

        With ``dry_run`` the replay is computed and returned without touching storage.
        """
        if dry_run:
            with self._read("rebuild_championship_history") as session:
                matches = self.matches.chronological(session)
            return RebuildSummary(
                processed_matches=len(matches),
                reigns=tuple(reconstruct_reigns(matches)),
                dry_run=True,
            )

        with self._write("rebuild_championship_history") as session:
            matches = self.matches.chronological(session)
            spans = self.reigns.rebuild(session, matches, self._clock())
            return RebuildSummary(processed_matches=len(matches), reigns=tuple(spans), dry_run=False)
