"""Common value objects shared across all domain modules."""

from .ids import LearningSessionId, UserId

__all__ = [
    "LearningSessionId",
    "UserId",
]
