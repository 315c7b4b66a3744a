from dataclasses import dataclass
from uuid import UUID, uuid4

from ..entity import EntityId


@dataclass(frozen=True)
class UserId(EntityId):
    """Strongly-typed user identifier."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("UserId must be non-negative")


@dataclass(frozen=True)
class LearningSessionId(EntityId):
    """Strongly-typed learning session identifier (generated, not database-assigned)."""

    value: UUID

    def __post_init__(self) -> None:
        if not isinstance(self.value, UUID):
            raise TypeError("LearningSessionId must wrap a UUID")

    @classmethod
    def generate(cls) -> "LearningSessionId":
        return cls(uuid4())

    @classmethod
    def parse(cls, raw: str | UUID) -> "LearningSessionId":
        """
        Build an id from its string form.

        Raises:
            ValueError: If the string is not a valid UUID
        """
        if isinstance(raw, UUID):
            return cls(raw)
        return cls(UUID(raw))
