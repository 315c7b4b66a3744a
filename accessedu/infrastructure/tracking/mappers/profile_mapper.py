"""Mapper for Profile ORM ↔ Domain conversion."""

from accessedu.domain.common.value_objects import UserId
from accessedu.domain.tracking.entities.profile import Profile
from accessedu.models import Profile as ProfileORM


class ProfileMapper:
    """Mapper for Profile ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: ProfileORM) -> Profile:
        return Profile(
            id=UserId(orm_model.id),
            name=orm_model.name,
            email=orm_model.email,
            role=orm_model.role,
            last_login_at=orm_model.last_login_at,
            last_logout_at=orm_model.last_logout_at,
            total_active_minutes=orm_model.total_active_minutes,
            created_at=orm_model.created_at,
            updated_at=orm_model.updated_at,
        )

    def to_orm(self, domain_entity: Profile) -> ProfileORM:
        return ProfileORM(
            id=domain_entity.id.value,
            name=domain_entity.name,
            email=domain_entity.email,
            role=domain_entity.role,
            last_login_at=domain_entity.last_login_at,
            last_logout_at=domain_entity.last_logout_at,
            total_active_minutes=domain_entity.total_active_minutes,
        )
