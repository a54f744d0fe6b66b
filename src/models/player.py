"""players table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, Index, Integer, String, func
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Player(Base):
    """Current rating and win/loss/draw counters for one player."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("wins >= 0", name="ck_players_wins"),
        CheckConstraint("losses >= 0", name="ck_players_losses"),
        CheckConstraint("draws >= 0", name="ck_players_draws"),
        Index("idx_players_rating", "rating"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=1000.0)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    draws: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @hybrid_property
    def total_matches(self) -> int:
        return self.wins + self.losses + self.draws

    @property
    def win_rate(self) -> float:
        total = self.total_matches
        if total == 0:
            return 0.0
        return self.wins / total

    def __repr__(self) -> str:
        return f"Player(id={self.id!r}, name={self.name!r}, rating={self.rating!r})"
