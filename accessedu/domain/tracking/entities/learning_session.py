"""
LearningSession aggregate root.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

from accessedu.domain.common.aggregate_root import AggregateRoot
from accessedu.domain.common.exceptions import InvariantViolationError
from accessedu.domain.common.value_objects import LearningSessionId, UserId
from accessedu.domain.tracking.events import LearningSessionClosed, LearningSessionOpened
from accessedu.domain.tracking.exceptions import SessionAlreadyClosedError


class SessionState(StrEnum):
    OPEN = "open"
    CLOSED = "closed"


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def compute_duration_minutes(login_at: datetime, logout_at: datetime) -> int:
    """
    Whole minutes between two timestamps, rounded half up and floored at 0.

    10:00:00 -> 10:15:30 is 15.5 minutes, which rounds to 16.
    """
    seconds = (ensure_utc(logout_at) - ensure_utc(login_at)).total_seconds()
    return max(0, math.floor(seconds / 60 + 0.5))


@dataclass
class LearningSession(AggregateRoot[LearningSessionId]):
    """
    Learning session aggregate root.

    One continuous interval of an authenticated user's activity,
    bounded by login_at and logout_at.

    Business Rules:
    - A session is open iff logout_at is None
    - logout_at and duration_minutes are set together, exactly once
    - duration_minutes is never negative
    - OPEN --close--> CLOSED; CLOSED is terminal
    """

    id: LearningSessionId
    user_id: UserId
    login_at: datetime
    logout_at: datetime | None = None
    duration_minutes: int | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        self.login_at = ensure_utc(self.login_at)
        if self.logout_at is not None:
            self.logout_at = ensure_utc(self.logout_at)

        if (self.logout_at is None) != (self.duration_minutes is None):
            raise InvariantViolationError(
                "LearningSession", "logout_at and duration_minutes must be set together"
            )
        if self.duration_minutes is not None and self.duration_minutes < 0:
            raise InvariantViolationError("LearningSession", "duration_minutes cannot be negative")

    @property
    def is_open(self) -> bool:
        return self.logout_at is None

    @property
    def state(self) -> SessionState:
        return SessionState.OPEN if self.is_open else SessionState.CLOSED

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.user_id == user_id

    def close(self, logout_at: datetime | None = None) -> int:
        """
        Close the session and compute its duration.

        Args:
            logout_at: Close time, defaults to now

        Returns:
            Duration in minutes

        Raises:
            SessionAlreadyClosedError: If the session was closed before
        """
        if not self.is_open:
            raise SessionAlreadyClosedError(self.id)

        closed_at = ensure_utc(logout_at) if logout_at else datetime.now(UTC)
        duration = compute_duration_minutes(self.login_at, closed_at)

        self.logout_at = closed_at
        self.duration_minutes = duration
        self._record_event(
            LearningSessionClosed(
                session_id=self.id,
                user_id=self.user_id,
                logout_at=closed_at,
                duration_minutes=duration,
            )
        )
        return duration

    @classmethod
    def open(cls, user_id: UserId, login_at: datetime | None = None) -> "LearningSession":
        """
        Factory method for opening a new session.

        Args:
            user_id: Owning user
            login_at: Open time, defaults to now

        Returns:
            New open LearningSession with a generated id
        """
        opened_at = ensure_utc(login_at) if login_at else datetime.now(UTC)
        session = cls(
            id=LearningSessionId.generate(),
            user_id=user_id,
            login_at=opened_at,
        )
        session._record_event(
            LearningSessionOpened(session_id=session.id, user_id=user_id, login_at=opened_at)
        )
        return session
