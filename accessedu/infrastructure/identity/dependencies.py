"""FastAPI dependencies for identity and authentication."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from accessedu.config import get_settings
from accessedu.core import container
from accessedu.database import DatabaseSession
from accessedu.domain.identity.entities.user import User
from accessedu.domain.identity.exceptions import UserNotFoundError
from accessedu.exceptions import CredentialsException
from accessedu.infrastructure.identity.services.token_service import verify_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{get_settings().API_V1_PREFIX}/auth/login")


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)], db: DatabaseSession
) -> User:
    """
    Get the current authenticated user from the access token.

    Raises:
        CredentialsException: If token is invalid or user not found
    """
    user_id = verify_access_token(token)
    if user_id is None:
        raise CredentialsException

    container.db.override(db)
    try:
        return container.authentication_use_case().get_user_by_id(user_id)
    except UserNotFoundError:
        raise CredentialsException from None
    finally:
        container.db.reset_override()


CurrentUser = Annotated[User, Depends(get_current_user)]
