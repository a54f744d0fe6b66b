"""Typed errors raised by ledger operations."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for every error a ledger operation can raise."""

    kind = "ledger_error"


class NotFound(LedgerError, LookupError):
    """A referenced player, match or reign does not exist."""

    kind = "not_found"


class InvalidMatch(LedgerError, ValueError):
    """A match submission is malformed (self-match, negative score, unknown player)."""

    kind = "invalid_match"


class InvalidInput(LedgerError, ValueError):
    """A read or admin request is malformed."""

    kind = "invalid_input"


class InvariantViolation(LedgerError, RuntimeError):
    """Internal state is inconsistent. Indicates a bug; never corrected silently."""

    kind = "invariant_violation"


class PlayerExists(InvalidInput):
    kind = "player_exists"


class MatchPlayerNotFound(InvalidMatch, NotFound):
    kind = "invalid_match"


class PredictionPlayerNotFound(InvalidInput, NotFound):
    kind = "invalid_input"


__all__ = [
    "InvalidInput",
    "InvalidMatch",
    "InvariantViolation",
    "LedgerError",
    "MatchPlayerNotFound",
    "NotFound",
    "PlayerExists",
    "PredictionPlayerNotFound",
]
