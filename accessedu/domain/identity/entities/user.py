"""User entity for identity management."""

from dataclasses import dataclass
from datetime import datetime

from accessedu.domain.common.entity import Entity
from accessedu.domain.common.exceptions import ValidationError
from accessedu.domain.common.value_objects.ids import UserId

# Domain constraints
MAX_EMAIL_LENGTH = 255


@dataclass
class User(Entity[UserId]):
    """
    User entity representing an authenticated account.

    Business Rules:
    - Email must be unique (enforced at repository level)
    - Email must be non-empty and at most MAX_EMAIL_LENGTH chars
    - Password hashing is an infrastructure concern
    """

    id: UserId
    email: str
    hashed_password: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.email:
            raise ValidationError("Email cannot be empty", field="email", value=self.email)
        if len(self.email) > MAX_EMAIL_LENGTH:
            raise ValidationError(
                "Email cannot exceed MAX_EMAIL_LENGTH characters", field="email", value=self.email
            )

    def has_password(self) -> bool:
        """Check if this user has a password set."""
        return self.hashed_password is not None

    @classmethod
    def create(cls, email: str, hashed_password: str | None = None) -> "User":
        """
        Create a new user.

        Args:
            email: User's email address (trimmed)
            hashed_password: User's hashed password

        Returns:
            New User instance

        Raises:
            ValidationError: If email is invalid
        """
        return cls(
            id=UserId.generate(),
            email=email.strip(),
            hashed_password=hashed_password,
        )

    @classmethod
    def create_with_id(
        cls,
        id: UserId,
        email: str,
        hashed_password: str | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        """Reconstitute a user from persistence."""
        return cls(
            id=id,
            email=email,
            hashed_password=hashed_password,
            created_at=created_at,
            updated_at=updated_at,
        )
