import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, Query, Request, Response
from fastapi.security import OAuth2PasswordRequestForm
from starlette import status

from accessedu.application.identity.use_cases.authentication_use_case import (
    AuthenticationUseCase,
)
from accessedu.application.tracking.use_cases.session_lifecycle_use_case import (
    SessionLifecycleUseCase,
)
from accessedu.config import get_settings
from accessedu.core import container
from accessedu.domain.identity.exceptions import InvalidCredentialsError
from accessedu.domain.tracking.exceptions import (
    LearningSessionNotFoundError,
    SessionOwnershipError,
)
from accessedu.infrastructure.common.di import inject_use_case
from accessedu.infrastructure.common.rate_limit import limiter
from accessedu.infrastructure.identity.dependencies import CurrentUser
from accessedu.infrastructure.identity.schemas import (
    LoginResponse,
    LogoutRequest,
    LogoutResponse,
    RefreshTokenRequest,
)
from accessedu.infrastructure.identity.services.token_service import (
    REFRESH_TOKEN_EXPIRE_DAYS,
    TokenWithRefresh,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Set the refresh token as an httpOnly cookie."""
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
        path=f"{settings.API_V1_PREFIX}/auth",
        max_age=REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )


def _clear_refresh_cookie(response: Response) -> None:
    """Clear the refresh token cookie."""
    response.delete_cookie(
        key="refresh_token",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
        path=f"{settings.API_V1_PREFIX}/auth",
    )


@router.post("/login")
@limiter.limit("5/minute")  # type: ignore[misc]
async def login(
    request: Request,
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    open_session: bool = Query(
        False, description="Open a learning session as part of this login"
    ),
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
    lifecycle: SessionLifecycleUseCase = Depends(
        inject_use_case(container.session_lifecycle_use_case)
    ),
) -> LoginResponse:
    """
    Authenticate with email (sent as `username`) and password.

    Clients that have no learning session cached for the tab pass
    `open_session=true` to get one opened in the same round trip.
    """
    try:
        user, token_pair = use_case.authenticate_user(form_data.username, form_data.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    session_id = None
    if open_session:
        try:
            session_id = str(lifecycle.open_session(user.id.value).id)
        except Exception:
            # Login still succeeds; the client can open a session later
            logger.error(f"Failed to open session at login for user {user.id.value}", exc_info=True)

    set_refresh_cookie(response, token_pair.refresh_token)
    return LoginResponse(**token_pair.model_dump(), session_id=session_id)


@router.post("/refresh")
@limiter.limit("10/minute")  # type: ignore[misc]
async def refresh(
    request: Request,
    response: Response,
    body: RefreshTokenRequest | None = None,
    refresh_token: Annotated[str | None, Cookie()] = None,
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> TokenWithRefresh:
    """
    Refresh the access token using a refresh token.

    The refresh token can be provided either:
    - In an httpOnly cookie (for web clients)
    - In the request body (for other clients)
    """
    token = refresh_token
    if not token and body and body.refresh_token:
        token = body.refresh_token

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token required",
        )

    try:
        _, token_pair = use_case.refresh_access_token(token)
        set_refresh_cookie(response, token_pair.refresh_token)
        return token_pair
    except InvalidCredentialsError:
        _clear_refresh_cookie(response)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        ) from None


@router.post("/logout")
async def logout(
    response: Response,
    current_user: CurrentUser,
    body: LogoutRequest | None = None,
    lifecycle: SessionLifecycleUseCase = Depends(
        inject_use_case(container.session_lifecycle_use_case)
    ),
) -> LogoutResponse:
    """
    Log out, closing the caller's learning session when one is given.

    The refresh cookie is cleared even if the session close is rejected.
    """
    _clear_refresh_cookie(response)
    # HTTPException responses do not carry headers set on `response`
    clear_cookie_headers = {"set-cookie": response.headers["set-cookie"]}

    if body is None or not body.session_id:
        return LogoutResponse(success=True, message="Logged out successfully")

    try:
        result = lifecycle.close_session(body.session_id, current_user.id.value)
    except (LearningSessionNotFoundError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
            headers=clear_cookie_headers,
        ) from None
    except SessionOwnershipError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this session",
            headers=clear_cookie_headers,
        ) from None

    return LogoutResponse(
        success=True,
        message="User logged out successfully",
        duration_minutes=result.duration_minutes,
    )
