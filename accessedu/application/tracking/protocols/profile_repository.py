from datetime import datetime
from typing import Protocol

from accessedu.domain.common.value_objects.ids import UserId
from accessedu.domain.tracking.entities.profile import Profile


class ProfileRepositoryProtocol(Protocol):
    def find_by_id(self, user_id: UserId) -> Profile | None: ...

    def add(self, profile: Profile) -> Profile: ...

    def record_login(self, user_id: UserId, at: datetime) -> bool: ...

    def record_logout(self, user_id: UserId, at: datetime, duration_minutes: int) -> bool: ...
