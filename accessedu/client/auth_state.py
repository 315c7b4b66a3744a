"""Sign-in state machine that opens and closes learning sessions."""

import logging
from enum import StrEnum

from accessedu.client.api import AccessEduClient, AccessEduClientError
from accessedu.client.beacon import UnloadBeaconHandler
from accessedu.client.session_cache import SessionCache

logger = logging.getLogger(__name__)


class AuthState(StrEnum):
    SIGNED_OUT = "signed_out"
    SIGNED_IN = "signed_in"


class AuthSessionController:
    """
    Drives session bookkeeping from auth transitions.

    Transitions:
    - restore: app start with a live auth session; reuse the tab's session
      or open one
    - sign_in: authenticate; keep this tab's cached session for the same
      user rather than opening a duplicate
    - sign_out: close the session, then always clear local state
    - handle_unload: fire the beacon for the cached session
    """

    def __init__(
        self,
        api: AccessEduClient,
        cache: SessionCache,
        beacon: UnloadBeaconHandler,
    ) -> None:
        self.api = api
        self.cache = cache
        self.beacon = beacon
        self.state = AuthState.SIGNED_OUT
        self.user_id: int | None = None

    def restore(self, user_id: int) -> str:
        """
        Resume a signed-in tab, e.g. after a page reload.

        The API client must already hold the tokens from the earlier login.

        Raises:
            AccessEduClientError: If the API client has no tokens
        """
        if not self.api.is_authenticated:
            raise AccessEduClientError("Cannot restore without an access token", status_code=401)
        cached = self.cache.get_session_id()
        if cached is not None and self.cache.get_user_id() == user_id:
            session_id = cached
        else:
            session_id = self.api.open_session(user_id)
            self.cache.remember(session_id, user_id)
        self.user_id = user_id
        self.state = AuthState.SIGNED_IN
        return session_id

    def sign_in(self, email: str, password: str) -> str:
        """
        Authenticate and make sure the tab has a session.

        Raises:
            AccessEduClientError: If authentication fails
        """
        keep_cached = self.cache.has_session()
        session_id = self.api.login(email, password, open_session=not keep_cached)
        user_id = self.api.get_me()["id"]

        if keep_cached and self.cache.get_user_id() == user_id:
            session_id = self.cache.get_session_id()
        else:
            if keep_cached:
                # The previous user's session is still open; close it the way an unload would
                logger.info(
                    f"Closing session {self.cache.get_session_id()} left by user "
                    f"{self.cache.get_user_id()}"
                )
                self.beacon.handle_unload()
            if session_id is None:
                session_id = self.api.open_session(user_id)

        self.cache.remember(session_id, user_id)  # type: ignore[arg-type]
        self.user_id = user_id
        self.state = AuthState.SIGNED_IN
        logger.info(f"Signed in user {user_id} with session {session_id}")
        return session_id  # type: ignore[return-value]

    def sign_out(self) -> int | None:
        """
        Close the cached session and sign out.

        Local state is cleared even when the server call fails.

        Returns:
            Duration of the closed session, if the server reported one
        """
        duration = None
        try:
            duration = self.api.logout(self.cache.get_session_id())
        except AccessEduClientError as e:
            logger.warning(f"Failed to close session on sign out: {e.message}")
        finally:
            self.cache.clear()
            self.api.clear_tokens()
            self.user_id = None
            self.state = AuthState.SIGNED_OUT
        return duration

    def handle_unload(self) -> bool:
        return self.beacon.handle_unload()
