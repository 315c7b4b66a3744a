"""Identity context schemas."""

from accessedu.infrastructure.identity.schemas.user_schemas import (
    LoginResponse,
    LogoutRequest,
    LogoutResponse,
    RefreshTokenRequest,
    UserDetailsResponse,
    UserRegisterRequest,
)

__all__ = [
    "LoginResponse",
    "LogoutRequest",
    "LogoutResponse",
    "RefreshTokenRequest",
    "UserDetailsResponse",
    "UserRegisterRequest",
]
