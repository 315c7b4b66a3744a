import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from accessedu.application.identity.use_cases.register_user_use_case import RegisterUserUseCase
from accessedu.core import container
from accessedu.domain.identity.exceptions import (
    EmailAlreadyExistsError,
    RegistrationDisabledError,
)
from accessedu.exceptions import AccessEduError
from accessedu.infrastructure.common.di import inject_use_case
from accessedu.infrastructure.common.rate_limit import limiter
from accessedu.infrastructure.identity.dependencies import CurrentUser
from accessedu.infrastructure.identity.routers.auth import set_refresh_cookie
from accessedu.infrastructure.identity.schemas import UserDetailsResponse, UserRegisterRequest
from accessedu.infrastructure.identity.services.token_service import TokenWithRefresh

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register")
@limiter.limit("5/minute")  # type: ignore[misc]
async def register(
    request: Request,
    response: Response,
    register_data: UserRegisterRequest,
    use_case: RegisterUserUseCase = Depends(inject_use_case(container.register_user_use_case)),
) -> TokenWithRefresh:
    """
    Register a new user account.

    Creates the user and its profile, and returns a token pair for
    immediate login.
    """
    try:
        _, token_pair = use_case.register_user(
            register_data.email, register_data.password, register_data.name
        )
        set_refresh_cookie(response, token_pair.refresh_token)
        return token_pair
    except RegistrationDisabledError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User registration is currently disabled",
        ) from None
    except EmailAlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        ) from None
    except AccessEduError:
        raise
    except Exception as e:
        logger.error(f"Failed to register user: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("/me")
async def get_me(current_user: CurrentUser) -> UserDetailsResponse:
    """Get the current user's account information."""
    return UserDetailsResponse(email=current_user.email, id=current_user.id.value)
