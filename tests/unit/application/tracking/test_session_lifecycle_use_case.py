"""Tests for SessionLifecycleUseCase against a real SQLAlchemy session."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.orm import Session

from accessedu import models
from accessedu.application.tracking.use_cases.session_lifecycle_use_case import (
    SessionLifecycleUseCase,
)
from accessedu.domain.common.value_objects import LearningSessionId, UserId
from accessedu.domain.identity.exceptions import UserNotFoundError
from accessedu.domain.tracking.entities.learning_session import LearningSession
from accessedu.domain.tracking.exceptions import (
    LearningSessionNotFoundError,
    ProfileNotFoundError,
    SessionOwnershipError,
)
from accessedu.infrastructure.common.unit_of_work import SqlAlchemyUnitOfWork
from accessedu.infrastructure.identity.repositories.user_repository import UserRepository
from accessedu.infrastructure.tracking.repositories import (
    LearningSessionRepository,
    ProfileRepository,
)
from tests.conftest import FakeClock, create_test_user


class StaleReadSessionRepository(LearningSessionRepository):
    """Serves one pre-captured open copy, as a request that lost a race would see."""

    def __init__(self, db: Session, stale: LearningSession) -> None:
        super().__init__(db)
        self._stale: LearningSession | None = stale

    def find_by_id(self, session_id: LearningSessionId) -> LearningSession | None:
        if self._stale is not None:
            stale, self._stale = self._stale, None
            return stale
        return super().find_by_id(session_id)


def _use_case(
    db_session: Session,
    clock: FakeClock,
    session_repository: LearningSessionRepository | None = None,
    profile_repository: ProfileRepository | None = None,
) -> SessionLifecycleUseCase:
    return SessionLifecycleUseCase(
        session_repository=session_repository or LearningSessionRepository(db_session),
        profile_repository=profile_repository or ProfileRepository(db_session),
        user_repository=UserRepository(db_session),
        unit_of_work=SqlAlchemyUnitOfWork(db_session),
        clock=clock,
    )


@pytest.fixture
def user(db_session: Session) -> models.User:
    return create_test_user(db_session)


def test_open_session_persists_and_stamps_login(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    use_case = _use_case(db_session, clock)

    session = use_case.open_session(user.id)

    assert session.is_open
    assert session.login_at == clock.now
    profile = use_case.get_profile(user.id)
    assert profile.last_login_at == clock.now
    assert profile.total_active_minutes == 0


def test_open_session_explicit_time(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    use_case = _use_case(db_session, clock)
    earlier = clock.now - timedelta(minutes=30)

    session = use_case.open_session(user.id, now=earlier)

    assert session.login_at == earlier


def test_open_session_unknown_user(db_session: Session, clock: FakeClock) -> None:
    use_case = _use_case(db_session, clock)

    with pytest.raises(UserNotFoundError):
        use_case.open_session(999)
    assert db_session.query(models.LearningSession).count() == 0


def test_open_session_survives_profile_stamp_failure(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    profiles = ProfileRepository(db_session)
    failing = MagicMock(wraps=profiles)
    failing.record_login.side_effect = RuntimeError("database went away")
    use_case = _use_case(db_session, clock, profile_repository=failing)

    session = use_case.open_session(user.id)

    stored = LearningSessionRepository(db_session).find_by_id(session.id)
    assert stored is not None
    assert stored.is_open
    assert profiles.find_by_id(UserId(user.id)).last_login_at is None


def test_close_session_updates_profile_in_one_step(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    use_case = _use_case(db_session, clock)
    session = use_case.open_session(user.id)
    clock.advance(minutes=15, seconds=30)

    result = use_case.close_session(str(session.id), user.id)

    assert result.duration_minutes == 16
    assert result.already_closed is False
    profile = use_case.get_profile(user.id)
    assert profile.total_active_minutes == 16
    assert profile.last_logout_at == clock.now


def test_close_session_twice_counts_once(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    use_case = _use_case(db_session, clock)
    session = use_case.open_session(user.id)
    clock.advance(minutes=4)
    use_case.close_session(session.id, user.id)
    clock.advance(minutes=4)

    again = use_case.close_session(session.id, user.id)

    assert again.already_closed is True
    assert again.duration_minutes == 4
    assert use_case.get_profile(user.id).total_active_minutes == 4


def test_close_race_loser_reports_already_closed(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    use_case = _use_case(db_session, clock)
    session = use_case.open_session(user.id)
    stale = LearningSessionRepository(db_session).find_by_id(session.id)
    clock.advance(minutes=6)
    use_case.close_session(session.id, user.id)
    clock.advance(minutes=1)

    racer = _use_case(
        db_session,
        clock,
        session_repository=StaleReadSessionRepository(db_session, stale),
    )
    result = racer.close_session(session.id, user.id)

    assert result.already_closed is True
    assert result.duration_minutes == 6
    assert use_case.get_profile(user.id).total_active_minutes == 6


def test_close_unknown_session(db_session: Session, clock: FakeClock, user: models.User) -> None:
    use_case = _use_case(db_session, clock)

    with pytest.raises(LearningSessionNotFoundError):
        use_case.close_session(LearningSessionId.generate(), user.id)
    assert use_case.get_profile(user.id).last_logout_at is None


def test_close_rejects_other_owner(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    other = create_test_user(db_session, email="other@example.com")
    use_case = _use_case(db_session, clock)
    session = use_case.open_session(user.id)

    with pytest.raises(SessionOwnershipError):
        use_case.close_session(session.id, other.id)
    assert use_case.get_session(session.id, user.id).is_open


def test_close_without_owner_check_credits_owner(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    other = create_test_user(db_session, email="other@example.com")
    use_case = _use_case(db_session, clock)
    session = use_case.open_session(user.id)
    clock.advance(minutes=2)

    result = use_case.close_session(session.id, other.id, require_owner=False)

    assert result.duration_minutes == 2
    assert use_case.get_profile(user.id).total_active_minutes == 2
    assert use_case.get_profile(other.id).total_active_minutes == 0


def test_close_with_missing_profile_still_closes(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    use_case = _use_case(db_session, clock)
    session = use_case.open_session(user.id)
    db_session.query(models.Profile).filter_by(id=user.id).delete()
    db_session.commit()
    clock.advance(minutes=9)

    result = use_case.close_session(session.id, user.id)

    assert result.duration_minutes == 9
    assert not use_case.get_session(session.id, user.id).is_open
    with pytest.raises(ProfileNotFoundError):
        use_case.get_profile(user.id)


def test_close_clamps_future_logout(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    use_case = _use_case(db_session, clock)
    session = use_case.open_session(user.id)
    clock.advance(minutes=5)

    result = use_case.close_session(
        session.id, user.id, logout_at=clock.now + timedelta(days=1)
    )

    assert result.duration_minutes == 5


def test_profile_write_failure_rolls_back_close(
    db_session: Session, clock: FakeClock, user: models.User
) -> None:
    profiles = ProfileRepository(db_session)
    failing = MagicMock(wraps=profiles)
    failing.record_logout.side_effect = RuntimeError("database went away")
    use_case = _use_case(db_session, clock, profile_repository=failing)
    session = use_case.open_session(user.id)
    clock.advance(minutes=3)

    with pytest.raises(RuntimeError):
        use_case.close_session(session.id, user.id)

    assert _use_case(db_session, clock).get_session(session.id, user.id).is_open
    assert profiles.find_by_id(UserId(user.id)).total_active_minutes == 0


def test_list_sessions_totals(db_session: Session, clock: FakeClock, user: models.User) -> None:
    use_case = _use_case(db_session, clock)
    for _ in range(3):
        use_case.open_session(user.id)
        clock.advance(minutes=1)

    page = use_case.list_sessions(user.id, limit=2, offset=0)

    assert page.total == 3
    assert len(page.sessions) == 2
    assert page.sessions[0].login_at > page.sessions[1].login_at
