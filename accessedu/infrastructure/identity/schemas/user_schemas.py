"""Pydantic schemas for identity API request/response validation."""

from pydantic import BaseModel, Field, field_validator

from accessedu.infrastructure.common.schemas import SuccessResponse
from accessedu.infrastructure.identity.services.token_service import TokenWithRefresh


class UserRegisterRequest(BaseModel):
    """Schema for registering a new account."""

    email: str = Field(..., min_length=3, max_length=255, description="Account email")
    password: str = Field(..., min_length=8, max_length=128, description="Plain text password")
    name: str | None = Field(None, max_length=100, description="Display name for the profile")

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip()
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value


class UserDetailsResponse(BaseModel):
    id: int
    email: str


class LoginResponse(TokenWithRefresh):
    """Token pair plus the learning session opened at login, if requested."""

    session_id: str | None = Field(None, description="Learning session opened by this login")


class RefreshTokenRequest(BaseModel):
    """Request body for refresh token (used by non-browser clients)."""

    refresh_token: str | None = None


class LogoutRequest(BaseModel):
    session_id: str | None = Field(None, description="Learning session to close on logout")


class LogoutResponse(SuccessResponse):
    duration_minutes: int | None = Field(None, description="Duration of the closed session")
