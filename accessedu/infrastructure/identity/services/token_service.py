"""JWT access/refresh tokens carrying the user id as `sub`."""

from datetime import UTC, datetime, timedelta
from typing import Literal

import jwt
from jwt import InvalidTokenError
from pydantic import BaseModel

from accessedu.config import get_settings

TokenKind = Literal["access", "refresh"]

settings = get_settings()
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS

_SECRETS: dict[TokenKind, str] = {
    "access": settings.SECRET_KEY,
    "refresh": settings.REFRESH_TOKEN_SECRET_KEY or settings.SECRET_KEY,
}
_LIFETIMES: dict[TokenKind, timedelta] = {
    "access": timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    "refresh": timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
}


class TokenWithRefresh(BaseModel):
    """Token pair returned by register, login and refresh."""

    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int


def _encode(user_id: int, kind: TokenKind) -> str:
    claims = {
        "sub": str(user_id),
        "type": kind,
        "exp": datetime.now(UTC) + _LIFETIMES[kind],
    }
    return jwt.encode(claims, _SECRETS[kind], algorithm=ALGORITHM)


def _decode_user_id(token: str, kind: TokenKind) -> int | None:
    """Return the user id if the token is valid, unexpired, and of the given kind."""
    try:
        claims = jwt.decode(token, _SECRETS[kind], algorithms=[ALGORITHM])
        if claims.get("type") != kind:
            return None
        return int(claims["sub"])
    except (InvalidTokenError, KeyError, ValueError):
        return None


def create_access_token(user_id: int) -> str:
    return _encode(user_id, "access")


def verify_access_token(token: str) -> int | None:
    return _decode_user_id(token, "access")


def verify_refresh_token(token: str) -> int | None:
    return _decode_user_id(token, "refresh")


def create_token_pair(user_id: int) -> TokenWithRefresh:
    return TokenWithRefresh(
        access_token=_encode(user_id, "access"),
        refresh_token=_encode(user_id, "refresh"),
        token_type="bearer",  # noqa: S106
        expires_in=int(_LIFETIMES["access"].total_seconds()),
    )
