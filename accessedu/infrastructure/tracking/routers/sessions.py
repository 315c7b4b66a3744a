"""API routes for learning sessions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from accessedu.application.tracking.use_cases.session_lifecycle_use_case import (
    SessionLifecycleUseCase,
)
from accessedu.core import container
from accessedu.domain.identity.entities.user import User
from accessedu.domain.identity.exceptions import UserNotFoundError
from accessedu.domain.tracking.exceptions import (
    LearningSessionNotFoundError,
    SessionOwnershipError,
)
from accessedu.infrastructure.common.di import inject_use_case
from accessedu.infrastructure.identity.dependencies import get_current_user
from accessedu.infrastructure.tracking.schemas import (
    CloseSessionRequest,
    CloseSessionResponse,
    LearningSessionResponse,
    LearningSessionsResponse,
    OpenSessionRequest,
    OpenSessionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post(
    "",
    response_model=OpenSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def open_session(
    current_user: Annotated[User, Depends(get_current_user)],
    request: Annotated[OpenSessionRequest | None, Body()] = None,
    use_case: SessionLifecycleUseCase = Depends(
        inject_use_case(container.session_lifecycle_use_case)
    ),
) -> OpenSessionResponse:
    """
    Open a learning session for the caller.

    A `user_id` in the body is accepted for compatibility but must be the
    caller's own id.
    """
    user_id = current_user.id.value
    if request is not None and request.user_id is not None and request.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot open a session for another user",
        )

    try:
        session = use_case.open_session(user_id)
        return OpenSessionResponse(session_id=str(session.id), login_at=session.login_at)
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        ) from None
    except Exception as e:
        logger.error(f"Failed to open session for user {user_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post(
    "/{session_id}/close",
    response_model=CloseSessionResponse,
    status_code=status.HTTP_200_OK,
)
async def close_session(
    session_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    request: Annotated[CloseSessionRequest | None, Body()] = None,
    use_case: SessionLifecycleUseCase = Depends(
        inject_use_case(container.session_lifecycle_use_case)
    ),
) -> CloseSessionResponse:
    """
    Close one of the caller's sessions and credit its duration to the profile.

    Closing a session that is already closed returns its stored duration
    and changes nothing.
    """
    if request is not None and request.session_id and request.session_id != session_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Body session_id does not match the path",
        )

    try:
        result = use_case.close_session(session_id, current_user.id.value)
        return CloseSessionResponse(
            session_id=str(result.session.id),
            duration_minutes=result.duration_minutes,
            already_closed=result.already_closed,
        )
    except (LearningSessionNotFoundError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        ) from None
    except SessionOwnershipError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this session",
        ) from None
    except Exception as e:
        logger.error(f"Failed to close session {session_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get(
    "",
    response_model=LearningSessionsResponse,
    status_code=status.HTTP_200_OK,
)
async def list_sessions(
    current_user: Annotated[User, Depends(get_current_user)],
    limit: int = Query(30, ge=1, le=1000, description="Maximum sessions to return"),
    offset: int = Query(0, ge=0, description="Number of sessions to skip"),
    use_case: SessionLifecycleUseCase = Depends(
        inject_use_case(container.session_lifecycle_use_case)
    ),
) -> LearningSessionsResponse:
    """List the caller's learning sessions, newest first."""
    page = use_case.list_sessions(current_user.id.value, limit=limit, offset=offset)
    return LearningSessionsResponse(
        sessions=[LearningSessionResponse.from_domain(s) for s in page.sessions],
        total=page.total,
        offset=page.offset,
        limit=page.limit,
    )


@router.get(
    "/{session_id}",
    response_model=LearningSessionResponse,
    status_code=status.HTTP_200_OK,
)
async def get_session(
    session_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    use_case: SessionLifecycleUseCase = Depends(
        inject_use_case(container.session_lifecycle_use_case)
    ),
) -> LearningSessionResponse:
    try:
        session = use_case.get_session(session_id, current_user.id.value)
    except (LearningSessionNotFoundError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        ) from None
    except SessionOwnershipError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this session",
        ) from None
    return LearningSessionResponse.from_domain(session)
