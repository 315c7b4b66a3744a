"""AccessEdu REST API client with JWT authentication."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class AccessEduClientError(Exception):
    """Raised when the API rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AccessEduClient:
    """HTTP client for the AccessEdu REST API.

    Holds the bearer token obtained at login and exposes the session
    endpoints the auth state machine drives.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._access_token = access_token
        self._refresh_token = refresh_token
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    def set_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        """Adopt tokens from an earlier login, e.g. after a page reload."""
        self._access_token = access_token
        self._refresh_token = refresh_token

    def clear_tokens(self) -> None:
        self._access_token = None
        self._refresh_token = None

    def _request(self, method: str, path: str, *, auth: bool = True, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        if auth:
            if not self._access_token:
                raise AccessEduClientError("Not signed in", status_code=401)
            headers["Authorization"] = f"Bearer {self._access_token}"

        try:
            response = self._client.request(method, f"{API_PREFIX}{path}", headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise AccessEduClientError(f"{method} {path} failed: {e!s}") from e

        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            raise AccessEduClientError(str(detail), status_code=response.status_code)
        return response.json()

    # --- Auth endpoints ---

    def login(self, email: str, password: str, open_session: bool = True) -> str | None:
        """
        Authenticate and store tokens.

        Returns:
            The id of the session opened by the server, if one was requested
        """
        data = self._request(
            "POST",
            "/auth/login",
            auth=False,
            data={"username": email, "password": password},
            params={"open_session": str(open_session).lower()},
        )
        self._access_token = data["access_token"]
        self._refresh_token = data.get("refresh_token")
        logger.info("Authenticated with AccessEdu API")
        return data.get("session_id")

    def logout(self, session_id: str | None) -> int | None:
        """Log out, closing the given session. Returns its duration if one was closed."""
        body = {"session_id": session_id} if session_id else None
        data = self._request("POST", "/auth/logout", json=body)
        return data.get("duration_minutes")

    def get_me(self) -> dict:
        return self._request("GET", "/users/me")

    # --- Session endpoints ---

    def open_session(self, user_id: int | None = None) -> str:
        """Open a learning session and return its id."""
        body = {"user_id": user_id} if user_id is not None else None
        data = self._request("POST", "/sessions", json=body)
        return data["session_id"]

    def close_session(self, session_id: str) -> int:
        """Close a session and return its duration in minutes."""
        data = self._request("POST", f"/sessions/{session_id}/close")
        return data["duration_minutes"]

    def list_sessions(self, limit: int = 30, offset: int = 0) -> dict:
        return self._request("GET", "/sessions", params={"limit": limit, "offset": offset})

    def get_profile(self) -> dict:
        return self._request("GET", "/profile/me")
