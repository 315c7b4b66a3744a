from dependency_injector import containers, providers
from sqlalchemy.orm import Session

from accessedu.application.common.clock import utc_now
from accessedu.application.identity.use_cases.authentication_use_case import (
    AuthenticationUseCase,
)
from accessedu.application.identity.use_cases.register_user_use_case import RegisterUserUseCase
from accessedu.application.tracking.use_cases.session_lifecycle_use_case import (
    SessionLifecycleUseCase,
)
from accessedu.config import get_settings
from accessedu.infrastructure.common.unit_of_work import SqlAlchemyUnitOfWork
from accessedu.infrastructure.identity.repositories.user_repository import UserRepository
from accessedu.infrastructure.identity.services.password_service_adapter import (
    PasswordServiceAdapter,
)
from accessedu.infrastructure.identity.services.token_service_adapter import TokenServiceAdapter
from accessedu.infrastructure.tracking.repositories import (
    LearningSessionRepository,
    ProfileRepository,
)


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Declare db as a dependency that will be provided at runtime
    db = providers.Dependency(instance_of=Session)

    settings = providers.Singleton(get_settings)

    # Time source, overridable in tests
    clock = providers.Object(utc_now)

    unit_of_work = providers.Factory(SqlAlchemyUnitOfWork, db=db)

    # Repositories
    user_repository = providers.Factory(UserRepository, db=db)
    profile_repository = providers.Factory(ProfileRepository, db=db)
    learning_session_repository = providers.Factory(LearningSessionRepository, db=db)

    # Identity services
    password_service = providers.Singleton(PasswordServiceAdapter)
    token_service = providers.Singleton(TokenServiceAdapter)

    # Tracking module use cases
    session_lifecycle_use_case = providers.Factory(
        SessionLifecycleUseCase,
        session_repository=learning_session_repository,
        profile_repository=profile_repository,
        user_repository=user_repository,
        unit_of_work=unit_of_work,
        clock=clock,
        default_role=settings.provided.DEFAULT_PROFILE_ROLE,
    )

    # Identity use cases
    authentication_use_case = providers.Factory(
        AuthenticationUseCase,
        user_repository=user_repository,
        password_service=password_service,
        token_service=token_service,
    )

    register_user_use_case = providers.Factory(
        RegisterUserUseCase,
        user_repository=user_repository,
        profile_repository=profile_repository,
        password_service=password_service,
        token_service=token_service,
        unit_of_work=unit_of_work,
        default_role=settings.provided.DEFAULT_PROFILE_ROLE,
    )


# Initialize container
container = Container()
