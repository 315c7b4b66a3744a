"""Repository for User domain entities."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from accessedu.domain.common.value_objects.ids import UserId
from accessedu.domain.identity.entities.user import User
from accessedu.domain.identity.exceptions import EmailAlreadyExistsError
from accessedu.infrastructure.identity.mappers.user_mapper import UserMapper
from accessedu.models import User as UserORM

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for User domain entities. Writes are flushed, never committed."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = UserMapper()

    def find_by_id(self, user_id: UserId) -> User | None:
        stmt = select(UserORM).where(UserORM.id == user_id.value)
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_by_email(self, email: str) -> User | None:
        stmt = select(UserORM).where(UserORM.email == email)
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def add(self, user: User) -> User:
        """
        Insert a new user and flush to obtain its id.

        Raises:
            EmailAlreadyExistsError: If the email is already registered
        """
        orm_model = self.mapper.to_orm(user)
        self.db.add(orm_model)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise EmailAlreadyExistsError(user.email) from e
        self.db.refresh(orm_model)
        logger.info(f"Created user {orm_model.id}")
        return self.mapper.to_domain(orm_model)
