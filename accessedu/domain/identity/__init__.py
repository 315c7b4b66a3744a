"""Identity domain layer."""

from accessedu.domain.identity.entities.user import User
from accessedu.domain.identity.exceptions import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    RegistrationDisabledError,
    UserNotFoundError,
)

__all__ = [
    "EmailAlreadyExistsError",
    "InvalidCredentialsError",
    "RegistrationDisabledError",
    "User",
    "UserNotFoundError",
]
