from .session_lifecycle_use_case import (
    CloseSessionResult,
    SessionLifecycleUseCase,
    SessionPage,
)

__all__ = ["CloseSessionResult", "SessionLifecycleUseCase", "SessionPage"]
