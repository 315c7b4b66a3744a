"""Custom exception hierarchy for the AccessEdu application."""

from fastapi import HTTPException
from starlette import status


class AccessEduError(Exception):
    """Base exception for all AccessEdu errors."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        """Initialize exception with message and optional status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(AccessEduError):
    """Resource not found error."""

    def __init__(self, message: str) -> None:
        """Initialize with message and 404 status code."""
        super().__init__(message, status_code=404)


class ValidationError(AccessEduError):
    """Validation error."""

    def __init__(self, message: str) -> None:
        """Initialize with message and 400 status code."""
        super().__init__(message, status_code=400)


class ForbiddenError(AccessEduError):
    """Caller is authenticated but may not touch the resource."""

    def __init__(self, message: str) -> None:
        """Initialize with message and 403 status code."""
        super().__init__(message, status_code=403)


class ServiceError(AccessEduError):
    """Service layer error."""


CredentialsException = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)
