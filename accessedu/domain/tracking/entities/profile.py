"""Profile aggregate: per-user rollup of learning activity."""

from dataclasses import dataclass
from datetime import datetime

from accessedu.domain.common.aggregate_root import AggregateRoot
from accessedu.domain.common.exceptions import ValidationError
from accessedu.domain.common.value_objects import UserId
from accessedu.domain.tracking.entities.learning_session import ensure_utc

DEFAULT_PROFILE_NAME = "Student"
MAX_NAME_LENGTH = 100


@dataclass
class Profile(AggregateRoot[UserId]):
    """
    Profile aggregate root, one per user and keyed by the user's id.

    Business Rules:
    - total_active_minutes is non-negative and never decreases
    - total_active_minutes equals the sum of closed session durations
    - last_login_at / last_logout_at track the latest open / close
    """

    id: UserId
    name: str
    email: str
    role: str = "student"
    last_login_at: datetime | None = None
    last_logout_at: datetime | None = None
    total_active_minutes: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.last_login_at is not None:
            self.last_login_at = ensure_utc(self.last_login_at)
        if self.last_logout_at is not None:
            self.last_logout_at = ensure_utc(self.last_logout_at)
        if self.total_active_minutes < 0:
            raise ValidationError(
                "total_active_minutes cannot be negative",
                field="total_active_minutes",
                value=self.total_active_minutes,
            )
        if len(self.name) > MAX_NAME_LENGTH:
            raise ValidationError("Name is too long", field="name", value=self.name)

    def record_login(self, at: datetime) -> None:
        self.last_login_at = ensure_utc(at)

    def record_logout(self, at: datetime, duration_minutes: int) -> None:
        """Fold a closed session's duration into the running total."""
        if duration_minutes < 0:
            raise ValidationError(
                "Duration cannot be negative", field="duration_minutes", value=duration_minutes
            )
        self.last_logout_at = ensure_utc(at)
        self.total_active_minutes += duration_minutes

    @classmethod
    def create(
        cls, user_id: UserId, email: str, name: str | None = None, role: str = "student"
    ) -> "Profile":
        """
        Create the profile for a freshly registered user.

        A blank name falls back to DEFAULT_PROFILE_NAME.
        """
        clean_name = (name or "").strip() or DEFAULT_PROFILE_NAME
        return cls(
            id=user_id,
            name=clean_name,
            email=email.strip(),
            role=role,
        )
