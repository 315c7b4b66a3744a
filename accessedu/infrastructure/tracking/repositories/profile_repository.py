"""Repository for the Profile aggregate."""

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from accessedu.domain.common.value_objects import UserId
from accessedu.domain.tracking.entities.profile import Profile
from accessedu.infrastructure.tracking.mappers.profile_mapper import ProfileMapper
from accessedu.models import Profile as ProfileORM

logger = logging.getLogger(__name__)


class ProfileRepository:
    """Repository for Profile persistence. Writes are flushed, never committed."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ProfileMapper()

    def find_by_id(self, user_id: UserId) -> Profile | None:
        stmt = (
            select(ProfileORM)
            .where(ProfileORM.id == user_id.value)
            .execution_options(populate_existing=True)
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def add(self, profile: Profile) -> Profile:
        orm_model = self.mapper.to_orm(profile)
        self.db.add(orm_model)
        self.db.flush()
        self.db.refresh(orm_model)
        logger.info(f"Created profile for user {profile.id.value}")
        return self.mapper.to_domain(orm_model)

    def record_login(self, user_id: UserId, at: datetime) -> bool:
        """Set last_login_at. Returns False if the profile does not exist."""
        stmt = (
            update(ProfileORM)
            .where(ProfileORM.id == user_id.value)
            .values(last_login_at=at)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1

    def record_logout(self, user_id: UserId, at: datetime, duration_minutes: int) -> bool:
        """
        Set last_logout_at and add duration_minutes to the running total.

        The increment happens in SQL so concurrent closes for the same
        user cannot overwrite each other's contribution.
        """
        stmt = (
            update(ProfileORM)
            .where(ProfileORM.id == user_id.value)
            .values(
                last_logout_at=at,
                total_active_minutes=ProfileORM.total_active_minutes + duration_minutes,
            )
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1
