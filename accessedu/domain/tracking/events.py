"""Domain events raised by the learning session lifecycle."""

from dataclasses import dataclass
from datetime import datetime

from accessedu.domain.common.domain_event import DomainEvent
from accessedu.domain.common.value_objects import LearningSessionId, UserId


@dataclass(frozen=True, kw_only=True)
class LearningSessionOpened(DomainEvent):
    session_id: LearningSessionId
    user_id: UserId
    login_at: datetime


@dataclass(frozen=True, kw_only=True)
class LearningSessionClosed(DomainEvent):
    session_id: LearningSessionId
    user_id: UserId
    logout_at: datetime
    duration_minutes: int
