"""Use case for user registration."""

import structlog

from accessedu.application.common.unit_of_work import UnitOfWork
from accessedu.application.identity.protocols.password_service import PasswordServiceProtocol
from accessedu.application.identity.protocols.token_service import TokenServiceProtocol
from accessedu.application.identity.protocols.user_repository import UserRepositoryProtocol
from accessedu.application.tracking.protocols.profile_repository import (
    ProfileRepositoryProtocol,
)
from accessedu.domain.identity.entities.user import User
from accessedu.domain.identity.exceptions import EmailAlreadyExistsError, RegistrationDisabledError
from accessedu.domain.tracking.entities.profile import Profile
from accessedu.feature_flags import is_user_registrations_enabled
from accessedu.infrastructure.identity.services.token_service import TokenWithRefresh

logger = structlog.get_logger(__name__)


class RegisterUserUseCase:
    """Use case for user registration operations."""

    def __init__(
        self,
        user_repository: UserRepositoryProtocol,
        profile_repository: ProfileRepositoryProtocol,
        password_service: PasswordServiceProtocol,
        token_service: TokenServiceProtocol,
        unit_of_work: UnitOfWork,
        default_role: str = "student",
    ) -> None:
        """Initialize use case with dependencies."""
        self.user_repository = user_repository
        self.profile_repository = profile_repository
        self.password_service = password_service
        self.token_service = token_service
        self.unit_of_work = unit_of_work
        self.default_role = default_role

    def register_user(
        self, email: str, password: str, name: str | None = None
    ) -> tuple[User, TokenWithRefresh]:
        """
        Register a new account together with its profile.

        The user row and the profile row are committed in one transaction,
        so an account never exists without its profile.

        Args:
            email: User's email address
            password: User's plain text password (will be hashed)
            name: Display name for the profile

        Returns:
            Tuple of (created user, token pair for immediate login)

        Raises:
            RegistrationDisabledError: If registration is disabled
            EmailAlreadyExistsError: If email is already registered
        """
        if not is_user_registrations_enabled():
            raise RegistrationDisabledError

        if self.user_repository.find_by_email(email.strip()) is not None:
            raise EmailAlreadyExistsError(email.strip())

        hashed_password = self.password_service.hash_password(password)

        with self.unit_of_work:
            user = self.user_repository.add(User.create(email=email, hashed_password=hashed_password))
            self.profile_repository.add(
                Profile.create(user.id, email=user.email, name=name, role=self.default_role)
            )
            self.unit_of_work.commit()

        token_pair = self.token_service.create_token_pair(user.id.value)

        logger.info("user_registered", user_id=user.id.value)

        return user, token_pair
