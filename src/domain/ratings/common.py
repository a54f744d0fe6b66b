"""Shared types for the rating model."""

from __future__ import annotations

from enum import Enum


class Outcome(str, Enum):
    """Result of a match from one participant's point of view."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"

    @classmethod
    def from_scores(cls, score: int, opponent_score: int) -> Outcome:
        if score > opponent_score:
            return cls.WIN
        if score < opponent_score:
            return cls.LOSS
        return cls.DRAW

    @property
    def actual_score(self) -> float:
        if self is Outcome.WIN:
            return 1.0
        if self is Outcome.LOSS:
            return 0.0
        return 0.5

    def flipped(self) -> Outcome:
        if self is Outcome.WIN:
            return Outcome.LOSS
        if self is Outcome.LOSS:
            return Outcome.WIN
        return Outcome.DRAW


__all__ = ["Outcome"]
