"""Championship reign tracker.

The open reign row is the only record of who was rank 1 last time the tracker
looked; there is no separate "current champion" state to drift out of sync.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from domain.errors import InvariantViolation
from domain.leaderboard import Leaderboard
from domain.reigns import ChampionStats, RatedMatch, ReignSpan, aggregate_champion_stats, reconstruct_reigns
from models import ChampionshipReign
from repositories.championships import (
    delete_all_reigns,
    delete_reigns_for_player,
    fetch_open_reigns,
    insert_reign,
    insert_reign_spans,
    list_reigns,
)

logger = logging.getLogger(__name__)


class ReignTracker:
    def __init__(self, leaderboard: Leaderboard) -> None:
        self.leaderboard = leaderboard

    def current(self, session: Session) -> ChampionshipReign | None:
        open_reigns = fetch_open_reigns(session)
        if len(open_reigns) > 1:
            reign_ids = [reign.id for reign in open_reigns]
            raise InvariantViolation(f"found {len(open_reigns)} open championship reigns: ids={reign_ids}")
        return open_reigns[0] if open_reigns else None

    def _close(self, reign: ChampionshipReign, now: datetime) -> None:
        # a clock stepping backwards must not produce a negative interval
        reign.ended_at = max(now, reign.started_at)
        logger.info(
            "closed championship reign id=%s player_id=%s started_at=%s ended_at=%s",
            reign.id,
            reign.player_id,
            reign.started_at,
            reign.ended_at,
        )

    def evaluate(self, session: Session, now: datetime) -> ChampionshipReign | None:
        """Bring the reign records in line with the current rank-1 player."""
        session.flush()
        current = self.current(session)
        leader = self.leader_id(session)

        if leader is None:
            if current is not None:
                self._close(current, now)
                session.flush()
            return None

        if current is not None and current.player_id == leader:
            return current

        started_at = now
        if current is not None:
            self._close(current, now)
            session.flush()
            started_at = current.ended_at or now
        reign = insert_reign(session, player_id=leader, started_at=started_at)
        logger.info("opened championship reign id=%s player_id=%s started_at=%s", reign.id, leader, started_at)
        return reign

    def leader_id(self, session: Session) -> int | None:
        leader = self.leaderboard.leader(session)
        return None if leader is None else leader.id

    def history(
        self,
        session: Session,
        *,
        limit: int = 50,
        player_id: int | None = None,
    ) -> list[ChampionshipReign]:
        """Reigns newest first; a non-positive limit returns the full history."""
        return list_reigns(session, limit=limit if limit > 0 else None, player_id=player_id)

    def stats(self, session: Session, now: datetime) -> list[ChampionStats]:
        self.current(session)
        spans = [
            ReignSpan(
                player_id=reign.player_id,
                started_at=reign.started_at,
                ended_at=reign.ended_at,
                player_name=reign.player.name,
            )
            for reign in list_reigns(session)
        ]
        return aggregate_champion_stats(spans, now)

    def forget_player(self, session: Session, player_id: int) -> None:
        delete_reigns_for_player(session, player_id)
        session.flush()

    def rebuild(self, session: Session, matches: list[RatedMatch], now: datetime) -> list[ReignSpan]:
        """Replace every stored reign with the history replayed from ``matches``.

        After the replay the tracker reconciles with the live leaderboard, which can
        differ from the replay when matches were deleted after later ones were rated.
        """
        spans = reconstruct_reigns(matches)
        delete_all_reigns(session)
        insert_reign_spans(session, spans)
        session.flush()
        session.expire_all()
        self.evaluate(session, now)
        logger.info("rebuilt championship history reigns=%s from matches=%s", len(spans), len(matches))
        return spans
