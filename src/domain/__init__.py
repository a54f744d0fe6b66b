"""Championship ledger domain modules."""

from domain.errors import (
    InvalidInput,
    InvalidMatch,
    InvariantViolation,
    LedgerError,
    NotFound,
)

__all__ = [
    "InvalidInput",
    "InvalidMatch",
    "InvariantViolation",
    "LedgerError",
    "NotFound",
]
