"""Tracking module domain exceptions."""

from accessedu.domain.common.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    EntityNotFoundError,
)


class LearningSessionNotFoundError(EntityNotFoundError):
    """Raised when a learning session cannot be found."""

    def __init__(self, session_id: object) -> None:
        super().__init__("LearningSession", session_id)


class ProfileNotFoundError(EntityNotFoundError):
    """Raised when a user's profile cannot be found."""

    def __init__(self, user_id: object) -> None:
        super().__init__("Profile", user_id)


class SessionOwnershipError(AuthorizationError):
    """Raised when a caller acts on a session owned by another user."""

    def __init__(self, session_id: object) -> None:
        super().__init__(f"Not authorized to access session {session_id}")
        self.session_id = session_id


class SessionAlreadyClosedError(BusinessRuleViolationError):
    """Raised when closing a session that already has a logout time."""

    def __init__(self, session_id: object) -> None:
        super().__init__("session_closed_once", f"Session {session_id} is already closed")
        self.session_id = session_id
