"""matches table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from domain.ratings.common import Outcome
from models.base import Base
from models.player import Player


class Match(Base):
    """One recorded two-player match with the rating snapshots needed to undo it."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("player_a_id <> player_b_id", name="ck_matches_distinct_players"),
        CheckConstraint("score_a >= 0 AND score_b >= 0", name="ck_matches_scores"),
        CheckConstraint(
            "expected_score_a >= 0.0 AND expected_score_a <= 1.0",
            name="ck_matches_expected_score",
        ),
        Index("idx_matches_player_a", "player_a_id"),
        Index("idx_matches_player_b", "player_b_id"),
        Index("idx_matches_played_at", "played_at", "id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_a_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    player_b_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    score_a: Mapped[int] = mapped_column(Integer, nullable=False)
    score_b: Mapped[int] = mapped_column(Integer, nullable=False)
    rating_a_before: Mapped[float] = mapped_column(Float, nullable=False)
    rating_b_before: Mapped[float] = mapped_column(Float, nullable=False)
    rating_a_after: Mapped[float] = mapped_column(Float, nullable=False)
    rating_b_after: Mapped[float] = mapped_column(Float, nullable=False)
    delta_a: Mapped[float] = mapped_column(Float, nullable=False)
    delta_b: Mapped[float] = mapped_column(Float, nullable=False)
    expected_score_a: Mapped[float] = mapped_column(Float, nullable=False)
    k_factor_a: Mapped[float] = mapped_column(Float, nullable=False)
    k_factor_b: Mapped[float] = mapped_column(Float, nullable=False)
    margin_multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    played_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    player_a: Mapped[Player] = relationship(Player, foreign_keys=[player_a_id])
    player_b: Mapped[Player] = relationship(Player, foreign_keys=[player_b_id])

    @property
    def outcome_a(self) -> Outcome:
        return Outcome.from_scores(self.score_a, self.score_b)

    @property
    def outcome_b(self) -> Outcome:
        return Outcome.from_scores(self.score_b, self.score_a)

    @property
    def winner_id(self) -> int | None:
        if self.score_a > self.score_b:
            return self.player_a_id
        if self.score_b > self.score_a:
            return self.player_b_id
        return None
