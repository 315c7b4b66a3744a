"""API routes for the caller's activity profile."""

from fastapi import APIRouter, Depends, HTTPException, status

from accessedu.application.tracking.use_cases.session_lifecycle_use_case import (
    SessionLifecycleUseCase,
)
from accessedu.core import container
from accessedu.domain.tracking.exceptions import ProfileNotFoundError
from accessedu.infrastructure.common.di import inject_use_case
from accessedu.infrastructure.identity.dependencies import CurrentUser
from accessedu.infrastructure.tracking.schemas import ProfileResponse

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
async def get_my_profile(
    current_user: CurrentUser,
    use_case: SessionLifecycleUseCase = Depends(
        inject_use_case(container.session_lifecycle_use_case)
    ),
) -> ProfileResponse:
    """Get the caller's last login/logout times and total active minutes."""
    try:
        profile = use_case.get_profile(current_user.id.value)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
        ) from None
    return ProfileResponse.from_domain(profile)
