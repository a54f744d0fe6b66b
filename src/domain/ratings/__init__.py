"""Rating-model domain modules."""

from domain.ratings.common import Outcome

__all__ = ["Outcome"]
