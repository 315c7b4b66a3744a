"""Tracking context schemas."""

from accessedu.infrastructure.tracking.schemas.session_schemas import (
    BeaconCloseRequest,
    BeaconCloseResponse,
    CloseSessionRequest,
    CloseSessionResponse,
    LearningSessionResponse,
    LearningSessionsResponse,
    OpenSessionRequest,
    OpenSessionResponse,
    ProfileResponse,
)

__all__ = [
    "BeaconCloseRequest",
    "BeaconCloseResponse",
    "CloseSessionRequest",
    "CloseSessionResponse",
    "LearningSessionResponse",
    "LearningSessionsResponse",
    "OpenSessionRequest",
    "OpenSessionResponse",
    "ProfileResponse",
]
