"""Pydantic schemas for learning session API request/response validation."""

from datetime import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, StrictInt, StrictStr

from accessedu.domain.tracking.entities.learning_session import LearningSession
from accessedu.domain.tracking.entities.profile import Profile


class OpenSessionRequest(BaseModel):
    """Body for POST /sessions; user_id, when sent, must be the caller."""

    user_id: int | None = Field(None, description="Owning user (defaults to the caller)")


class OpenSessionResponse(BaseModel):
    session_id: str = Field(..., description="Identifier of the opened session")
    login_at: dt


class CloseSessionRequest(BaseModel):
    session_id: str | None = Field(None, description="Must match the path id when given")


class CloseSessionResponse(BaseModel):
    session_id: str
    duration_minutes: int = Field(..., ge=0)
    already_closed: bool = Field(False, description="True if an earlier request closed it")


class BeaconCloseRequest(BaseModel):
    """
    Payload sent by navigator.sendBeacon on page unload.

    Every field is optional here so that missing ids can be reported as
    400 rather than the framework's 422.
    """

    session_id: str | None = None
    user_id: StrictInt | StrictStr | None = None
    logout_at: dt | None = None


class BeaconCloseResponse(BaseModel):
    success: bool
    duration_minutes: int = Field(..., ge=0)


class LearningSessionResponse(BaseModel):
    id: str
    user_id: int
    state: Literal["open", "closed"]
    login_at: dt
    logout_at: dt | None
    duration_minutes: int | None
    created_at: dt | None

    @classmethod
    def from_domain(cls, session: LearningSession) -> "LearningSessionResponse":
        return cls(
            id=str(session.id),
            user_id=session.user_id.value,
            state=session.state.value,
            login_at=session.login_at,
            logout_at=session.logout_at,
            duration_minutes=session.duration_minutes,
            created_at=session.created_at,
        )


class LearningSessionsResponse(BaseModel):
    """Schema for paginated learning sessions response."""

    sessions: list[LearningSessionResponse] = Field(..., description="Sessions, newest first")
    total: int = Field(..., ge=0, description="Total number of sessions")
    offset: int = Field(..., ge=0, description="Current offset")
    limit: int = Field(..., ge=1, description="Current limit")


class ProfileResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    last_login_at: dt | None
    last_logout_at: dt | None
    total_active_minutes: int = Field(..., ge=0)

    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id.value,
            name=profile.name,
            email=profile.email,
            role=profile.role,
            last_login_at=profile.last_login_at,
            last_logout_at=profile.last_logout_at,
            total_active_minutes=profile.total_active_minutes,
        )
