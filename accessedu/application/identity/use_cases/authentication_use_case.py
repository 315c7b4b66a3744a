"""Sign-in, token refresh and bearer-token user lookup."""

import structlog

from accessedu.application.identity.protocols.password_service import PasswordServiceProtocol
from accessedu.application.identity.protocols.token_service import TokenServiceProtocol
from accessedu.application.identity.protocols.user_repository import UserRepositoryProtocol
from accessedu.domain.common.value_objects.ids import UserId
from accessedu.domain.identity.entities.user import User
from accessedu.domain.identity.exceptions import InvalidCredentialsError, UserNotFoundError
from accessedu.infrastructure.identity.services.token_service import TokenWithRefresh

logger = structlog.get_logger(__name__)


class AuthenticationUseCase:
    """
    Issues token pairs for the session endpoints.

    Opening a learning session at login is the caller's job; this use case
    only establishes who the caller is.
    """

    def __init__(
        self,
        user_repository: UserRepositoryProtocol,
        password_service: PasswordServiceProtocol,
        token_service: TokenServiceProtocol,
    ) -> None:
        self.user_repository = user_repository
        self.password_service = password_service
        self.token_service = token_service

    def authenticate_user(self, email: str, password: str) -> tuple[User, TokenWithRefresh]:
        """
        Check an email/password pair and issue tokens.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        user = self.user_repository.find_by_email(email.strip())
        # Unknown emails still pay for a hash so timing does not reveal them
        stored_hash = user.hashed_password if user else None
        password_ok = self.password_service.verify_password(
            password, stored_hash or self.password_service.get_dummy_hash()
        )
        if user is None or not stored_hash or not password_ok:
            logger.info("login_rejected")
            raise InvalidCredentialsError
        return user, self._issue(user, "user_authenticated")

    def refresh_access_token(self, refresh_token: str) -> tuple[User, TokenWithRefresh]:
        """
        Trade a refresh token for a new pair.

        Raises:
            InvalidCredentialsError: If the token is invalid or its user is gone
        """
        user_id = self.token_service.verify_refresh_token(refresh_token)
        user = self.user_repository.find_by_id(UserId(user_id)) if user_id is not None else None
        if user is None:
            raise InvalidCredentialsError
        return user, self._issue(user, "access_token_refreshed")

    def get_user_by_id(self, user_id: int) -> User:
        user = self.user_repository.find_by_id(UserId(user_id))
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def _issue(self, user: User, event: str) -> TokenWithRefresh:
        tokens = self.token_service.create_token_pair(user.id.value)
        logger.info(event, user_id=user.id.value)
        return tokens
