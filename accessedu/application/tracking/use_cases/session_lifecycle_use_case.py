"""Use case driving the learning session lifecycle: open, close, and queries."""

from dataclasses import dataclass
from datetime import datetime

import structlog

from accessedu.application.common.clock import Clock, utc_now
from accessedu.application.common.unit_of_work import UnitOfWork
from accessedu.application.identity.protocols.user_repository import UserRepositoryProtocol
from accessedu.application.tracking.protocols.learning_session_repository import (
    LearningSessionRepositoryProtocol,
)
from accessedu.application.tracking.protocols.profile_repository import (
    ProfileRepositoryProtocol,
)
from accessedu.domain.common.value_objects import LearningSessionId, UserId
from accessedu.domain.identity.exceptions import UserNotFoundError
from accessedu.domain.tracking.entities.learning_session import LearningSession, ensure_utc
from accessedu.domain.tracking.entities.profile import Profile
from accessedu.domain.tracking.exceptions import (
    LearningSessionNotFoundError,
    ProfileNotFoundError,
    SessionOwnershipError,
)

logger = structlog.get_logger(__name__)


def _to_session_id(raw: str | LearningSessionId) -> LearningSessionId:
    return raw if isinstance(raw, LearningSessionId) else LearningSessionId.parse(raw)


@dataclass
class CloseSessionResult:
    """Outcome of a close request."""

    session: LearningSession
    duration_minutes: int
    already_closed: bool = False


@dataclass
class SessionPage:
    sessions: list[LearningSession]
    total: int
    limit: int
    offset: int


class SessionLifecycleUseCase:
    """
    Opens and closes learning sessions and keeps the profile rollup in step.

    Both the explicit logout path and the unload beacon path go through
    close_session, so a session is credited to its profile exactly once
    whichever path reaches the server first.
    """

    def __init__(
        self,
        session_repository: LearningSessionRepositoryProtocol,
        profile_repository: ProfileRepositoryProtocol,
        user_repository: UserRepositoryProtocol,
        unit_of_work: UnitOfWork,
        clock: Clock = utc_now,
        default_role: str = "student",
    ) -> None:
        """Initialize use case with dependencies."""
        self.session_repository = session_repository
        self.profile_repository = profile_repository
        self.user_repository = user_repository
        self.unit_of_work = unit_of_work
        self.clock = clock
        self.default_role = default_role

    def open_session(self, user_id: int, now: datetime | None = None) -> LearningSession:
        """
        Open a new learning session and stamp the profile's last login.

        Creates the profile first if the account predates profiles. The
        session row is committed before the profile stamp; a failure to
        stamp last_login_at is logged and does not fail the call.

        Args:
            user_id: Owning user
            now: Login time, defaults to the clock

        Returns:
            The new open session

        Raises:
            UserNotFoundError: If the user does not exist
        """
        uid = UserId(user_id)
        login_at = self.clock() if now is None else ensure_utc(now)

        with self.unit_of_work:
            profile = self._ensure_profile(uid)
            session = self.session_repository.add(LearningSession.open(uid, login_at=login_at))
            self.unit_of_work.commit()

        try:
            with self.unit_of_work:
                profile.record_login(session.login_at)
                self.profile_repository.record_login(uid, session.login_at)
                self.unit_of_work.commit()
        except Exception:
            logger.error(
                "profile_login_stamp_failed",
                session_id=str(session.id),
                user_id=user_id,
                exc_info=True,
            )

        logger.info(
            "session_opened",
            session_id=str(session.id),
            user_id=user_id,
            login_at=session.login_at.isoformat(),
        )
        return session

    def close_session(
        self,
        session_id: str | LearningSessionId,
        user_id: int,
        logout_at: datetime | None = None,
        *,
        require_owner: bool = True,
    ) -> CloseSessionResult:
        """
        Close a session, record its duration, and fold it into the profile total.

        Closing an already-closed session returns the stored duration and
        leaves the profile untouched. A logout_at in the future is clamped
        to the current time.

        Args:
            session_id: Session to close
            user_id: Caller's user id; must own the session
            logout_at: Close time, defaults to now
            require_owner: Reject callers that do not own the session

        Returns:
            CloseSessionResult with the session's duration

        Raises:
            LearningSessionNotFoundError: If the session does not exist
            SessionOwnershipError: If the session belongs to another user
        """
        sid = _to_session_id(session_id)
        uid = UserId(user_id)

        session = self._get_owned_session(sid, uid, require_owner=require_owner)
        if not session.is_open:
            return self._already_closed(session)

        now = self.clock()
        closed_at = now if logout_at is None else min(ensure_utc(logout_at), now)
        duration = session.close(closed_at)

        with self.unit_of_work:
            if not self.session_repository.mark_closed(session):
                # Another close committed between our read and our write
                self.unit_of_work.rollback()
                current = self.session_repository.find_by_id(sid)
                if current is None:
                    raise LearningSessionNotFoundError(sid)
                return self._already_closed(current)

            # Credit the owner, who is not the caller when require_owner is off
            owner = session.user_id
            profile = self.profile_repository.find_by_id(owner)
            if profile is None:
                logger.warning(
                    "profile_missing_on_close", session_id=str(sid), user_id=owner.value
                )
            else:
                profile.record_logout(closed_at, duration)
                self.profile_repository.record_logout(owner, closed_at, duration)

            self.unit_of_work.commit()

        logger.info(
            "session_closed",
            session_id=str(sid),
            user_id=session.user_id.value,
            closed_by=user_id,
            duration_minutes=duration,
        )
        return CloseSessionResult(session=session, duration_minutes=duration)

    def get_session(self, session_id: str | LearningSessionId, user_id: int) -> LearningSession:
        """
        Get one of the caller's sessions.

        Raises:
            LearningSessionNotFoundError: If the session does not exist
            SessionOwnershipError: If the session belongs to another user
        """
        sid = _to_session_id(session_id)
        return self._get_owned_session(sid, UserId(user_id))

    def list_sessions(self, user_id: int, limit: int = 30, offset: int = 0) -> SessionPage:
        """List the caller's sessions, newest login first."""
        uid = UserId(user_id)
        sessions = self.session_repository.find_by_user(uid, limit=limit, offset=offset)
        total = self.session_repository.count_by_user(uid)
        return SessionPage(sessions=sessions, total=total, limit=limit, offset=offset)

    def get_profile(self, user_id: int) -> Profile:
        """
        Get the caller's activity profile.

        Raises:
            ProfileNotFoundError: If no profile exists yet
        """
        profile = self.profile_repository.find_by_id(UserId(user_id))
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    def _get_owned_session(
        self, sid: LearningSessionId, uid: UserId, require_owner: bool = True
    ) -> LearningSession:
        session = self.session_repository.find_by_id(sid)
        if session is None:
            logger.warning("session_not_found", session_id=str(sid), user_id=uid.value)
            raise LearningSessionNotFoundError(sid)
        if require_owner and not session.is_owned_by(uid):
            logger.warning(
                "session_owner_mismatch",
                session_id=str(sid),
                user_id=uid.value,
                owner_id=session.user_id.value,
            )
            raise SessionOwnershipError(sid)
        return session

    def _already_closed(self, session: LearningSession) -> CloseSessionResult:
        logger.info("session_close_skipped_already_closed", session_id=str(session.id))
        return CloseSessionResult(
            session=session,
            duration_minutes=session.duration_minutes or 0,
            already_closed=True,
        )

    def _ensure_profile(self, uid: UserId) -> Profile:
        profile = self.profile_repository.find_by_id(uid)
        if profile is not None:
            return profile
        user = self.user_repository.find_by_id(uid)
        if user is None:
            raise UserNotFoundError(uid.value)
        profile = self.profile_repository.add(
            Profile.create(uid, email=user.email, role=self.default_role)
        )
        logger.info("profile_created_on_open", user_id=uid.value)
        return profile
