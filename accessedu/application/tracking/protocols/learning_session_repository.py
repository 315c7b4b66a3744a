from typing import Protocol

from accessedu.domain.common.value_objects.ids import LearningSessionId, UserId
from accessedu.domain.tracking.entities.learning_session import LearningSession


class LearningSessionRepositoryProtocol(Protocol):
    def add(self, session: LearningSession) -> LearningSession: ...

    def find_by_id(self, session_id: LearningSessionId) -> LearningSession | None: ...

    def mark_closed(self, session: LearningSession) -> bool: ...

    def find_by_user(self, user_id: UserId, limit: int, offset: int) -> list[LearningSession]: ...

    def count_by_user(self, user_id: UserId) -> int: ...
