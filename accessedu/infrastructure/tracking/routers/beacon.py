"""
Unload beacon endpoint.

Browsers send this request with navigator.sendBeacon while the tab is
closing. The request carries no Authorization header and usually arrives
as text/plain, so the body is parsed by hand and the ids in the payload
are checked against the session's owner instead.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError as PydanticValidationError

from accessedu.application.tracking.use_cases.session_lifecycle_use_case import (
    SessionLifecycleUseCase,
)
from accessedu.core import container
from accessedu.domain.common.value_objects import LearningSessionId
from accessedu.domain.tracking.exceptions import (
    LearningSessionNotFoundError,
    SessionOwnershipError,
)
from accessedu.infrastructure.common.di import inject_use_case
from accessedu.infrastructure.common.rate_limit import limiter
from accessedu.infrastructure.tracking.schemas import BeaconCloseRequest, BeaconCloseResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions"])


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@router.post(
    "/close-session",
    response_model=BeaconCloseResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit("30/minute")  # type: ignore[misc]
async def close_session_beacon(
    request: Request,
    use_case: SessionLifecycleUseCase = Depends(
        inject_use_case(container.session_lifecycle_use_case)
    ),
) -> BeaconCloseResponse:
    """Close a session from an unload beacon."""
    raw = await request.body()
    if not raw:
        raise _bad_request("Missing session_id or user_id")

    try:
        payload = BeaconCloseRequest.model_validate_json(raw)
    except PydanticValidationError:
        raise _bad_request("Malformed beacon payload") from None

    if not payload.session_id or payload.user_id in (None, ""):
        raise _bad_request("Missing session_id or user_id")

    try:
        session_id = LearningSessionId.parse(payload.session_id)
        user_id = int(payload.user_id)  # type: ignore[arg-type]
    except ValueError:
        raise _bad_request("Malformed session_id or user_id") from None
    if user_id < 0:
        raise _bad_request("Malformed session_id or user_id")

    try:
        result = use_case.close_session(session_id, user_id, logout_at=payload.logout_at)
    except LearningSessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        ) from None
    except SessionOwnershipError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this session",
        ) from None
    except Exception as e:
        logger.error(f"Failed to close session {session_id} from beacon: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e

    return BeaconCloseResponse(success=True, duration_minutes=result.duration_minutes)
