"""Mapper for LearningSession ORM ↔ Domain conversion."""

from accessedu.domain.common.value_objects import LearningSessionId, UserId
from accessedu.domain.tracking.entities.learning_session import LearningSession
from accessedu.models import LearningSession as LearningSessionORM


class LearningSessionMapper:
    """Mapper for LearningSession ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: LearningSessionORM) -> LearningSession:
        """
        Convert ORM model to domain entity.

        Uses the constructor directly (NOT the open() factory) so no
        domain events are recorded on reconstitution.
        """
        return LearningSession(
            id=LearningSessionId(orm_model.id),
            user_id=UserId(orm_model.user_id),
            login_at=orm_model.login_at,
            logout_at=orm_model.logout_at,
            duration_minutes=orm_model.duration_minutes,
            created_at=orm_model.created_at,
        )

    def to_orm(self, domain_entity: LearningSession) -> LearningSessionORM:
        """Convert a new domain entity to an ORM model."""
        return LearningSessionORM(
            id=domain_entity.id.value,
            user_id=domain_entity.user_id.value,
            login_at=domain_entity.login_at,
            logout_at=domain_entity.logout_at,
            duration_minutes=domain_entity.duration_minutes,
        )
