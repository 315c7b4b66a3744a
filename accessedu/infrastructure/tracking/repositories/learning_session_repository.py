"""
Domain-centric repository for the LearningSession aggregate.

Returns domain entities instead of ORM models. Writes are flushed
into the current transaction; committing is the Unit of Work's job.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from accessedu.domain.common.value_objects import LearningSessionId, UserId
from accessedu.domain.tracking.entities.learning_session import LearningSession
from accessedu.exceptions import ServiceError
from accessedu.infrastructure.tracking.mappers.learning_session_mapper import (
    LearningSessionMapper,
)
from accessedu.models import LearningSession as LearningSessionORM

logger = logging.getLogger(__name__)


class LearningSessionRepository:
    """Repository for LearningSession persistence (domain-centric)."""

    def __init__(self, db: Session) -> None:
        """
        Initialize repository.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db
        self.mapper = LearningSessionMapper()

    def add(self, session: LearningSession) -> LearningSession:
        """Insert a newly opened session."""
        orm_model = self.mapper.to_orm(session)
        self.db.add(orm_model)
        self.db.flush()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def find_by_id(self, session_id: LearningSessionId) -> LearningSession | None:
        """
        Get a session by id regardless of owner.

        Ownership is checked by the caller so that a foreign session
        is reported as forbidden rather than missing.
        """
        stmt = (
            select(LearningSessionORM)
            .where(LearningSessionORM.id == session_id.value)
            .execution_options(populate_existing=True)
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def mark_closed(self, session: LearningSession) -> bool:
        """
        Persist logout_at and duration_minutes if the row is still open.

        The WHERE logout_at IS NULL guard makes the close win at most once
        even when the logout request and the unload beacon race.

        Returns:
            True if this call closed the row, False if it was already closed
        """
        if session.is_open:
            raise ServiceError(f"Session {session.id} must be closed before it is persisted")

        stmt = (
            update(LearningSessionORM)
            .where(
                LearningSessionORM.id == session.id.value,
                LearningSessionORM.logout_at.is_(None),
            )
            .values(logout_at=session.logout_at, duration_minutes=session.duration_minutes)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        closed = result.rowcount == 1
        if not closed:
            logger.info(f"Session {session.id} was already closed by a concurrent request")
        return closed

    def find_by_user(self, user_id: UserId, limit: int, offset: int) -> list[LearningSession]:
        """Get a user's sessions ordered by login_at DESC."""
        stmt = (
            select(LearningSessionORM)
            .where(LearningSessionORM.user_id == user_id.value)
            .order_by(LearningSessionORM.login_at.desc())
            .offset(offset)
            .limit(limit)
        )
        orms = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orms]

    def count_by_user(self, user_id: UserId) -> int:
        stmt = select(func.count(LearningSessionORM.id)).where(
            LearningSessionORM.user_id == user_id.value
        )
        return self.db.execute(stmt).scalar() or 0
