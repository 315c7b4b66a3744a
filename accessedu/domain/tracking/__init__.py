"""Tracking module domain layer: learning sessions and profile rollups."""

from .entities import LearningSession, Profile, SessionState
from .events import LearningSessionClosed, LearningSessionOpened

__all__ = [
    "LearningSession",
    "LearningSessionClosed",
    "LearningSessionOpened",
    "Profile",
    "SessionState",
]
