import json

import httpx
import pytest

from accessedu.client.api import AccessEduClient, AccessEduClientError
from accessedu.client.auth_state import AuthSessionController, AuthState
from accessedu.client.beacon import UnloadBeaconHandler
from accessedu.client.session_cache import SessionCache, TabSessionStorage


class FakeServer:
    """Minimal stand-in for the session endpoints."""

    def __init__(self, user_id: int = 7) -> None:
        self.user_id = user_id
        self.opened: list[str] = []
        self.closed: list[str] = []
        self.login_params: list[str] = []
        self.fail_logout = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/v1/auth/login":
            self.login_params.append(request.url.params.get("open_session", ""))
            session_id = None
            if request.url.params.get("open_session") == "true":
                session_id = self._open()
            return httpx.Response(
                200,
                json={
                    "access_token": "access",
                    "refresh_token": "refresh",
                    "token_type": "bearer",
                    "session_id": session_id,
                },
            )
        if path == "/api/v1/users/me":
            return httpx.Response(200, json={"id": self.user_id, "email": "s@example.com"})
        if path == "/api/v1/sessions" and request.method == "POST":
            return httpx.Response(201, json={"session_id": self._open(), "login_at": "x"})
        if path == "/api/v1/auth/logout":
            if self.fail_logout:
                return httpx.Response(500, json={"detail": "boom"})
            body = json.loads(request.content) if request.content else None
            duration = None
            if body and body.get("session_id"):
                self.closed.append(body["session_id"])
                duration = 3
            return httpx.Response(
                200, json={"success": True, "message": "ok", "duration_minutes": duration}
            )
        return httpx.Response(404, json={"detail": "Not Found"})

    def _open(self) -> str:
        session_id = f"session-{len(self.opened) + 1}"
        self.opened.append(session_id)
        return session_id


class RecordingTransport:
    def __init__(self) -> None:
        self.sent: list[bytes] = []

    def send(self, url: str, body: bytes) -> None:
        self.sent.append(body)


def _controller(
    server: FakeServer,
    storage: TabSessionStorage | None = None,
    access_token: str | None = None,
) -> tuple[AuthSessionController, RecordingTransport]:
    api = AccessEduClient(
        "http://api.test", transport=httpx.MockTransport(server), access_token=access_token
    )
    cache = SessionCache(storage)
    beacon_transport = RecordingTransport()
    beacon = UnloadBeaconHandler("http://api.test", cache, beacon_transport)
    return AuthSessionController(api, cache, beacon), beacon_transport


def test_sign_in_opens_and_caches_session() -> None:
    server = FakeServer()
    controller, _ = _controller(server)

    session_id = controller.sign_in("s@example.com", "pw")

    assert controller.state == AuthState.SIGNED_IN
    assert session_id == "session-1"
    assert controller.cache.get_session_id() == "session-1"
    assert controller.cache.get_user_id() == 7
    assert server.login_params == ["true"]


def test_sign_in_after_reload_reuses_cached_session() -> None:
    server = FakeServer()
    storage = TabSessionStorage()
    first, _ = _controller(server, storage)
    first.sign_in("s@example.com", "pw")

    reloaded, _ = _controller(server, storage)
    session_id = reloaded.sign_in("s@example.com", "pw")

    assert session_id == "session-1"
    assert server.opened == ["session-1"]
    assert server.login_params == ["true", "false"]


def test_sign_in_with_foreign_cache_opens_new_session() -> None:
    server = FakeServer(user_id=8)
    storage = TabSessionStorage()
    SessionCache(storage).remember("someone-elses", 7)
    controller, beacon_transport = _controller(server, storage)

    session_id = controller.sign_in("s@example.com", "pw")

    assert session_id == "session-1"
    assert controller.cache.get_user_id() == 8
    assert len(beacon_transport.sent) == 1
    left_behind = json.loads(beacon_transport.sent[0])
    assert left_behind["session_id"] == "someone-elses"
    assert left_behind["user_id"] == 7


def test_sign_in_after_reload_sends_no_beacon() -> None:
    server = FakeServer()
    storage = TabSessionStorage()
    first, _ = _controller(server, storage)
    first.sign_in("s@example.com", "pw")

    reloaded, beacon_transport = _controller(server, storage)
    reloaded.sign_in("s@example.com", "pw")

    assert beacon_transport.sent == []


def test_restore_reuses_or_opens() -> None:
    server = FakeServer()
    storage = TabSessionStorage()
    controller, _ = _controller(server, storage, access_token="access")

    assert controller.restore(7) == "session-1"
    assert controller.restore(7) == "session-1"
    assert server.opened == ["session-1"]
    assert controller.state == AuthState.SIGNED_IN


def test_sign_out_closes_session_and_clears() -> None:
    server = FakeServer()
    controller, _ = _controller(server)
    controller.sign_in("s@example.com", "pw")

    duration = controller.sign_out()

    assert duration == 3
    assert server.closed == ["session-1"]
    assert controller.state == AuthState.SIGNED_OUT
    assert not controller.cache.has_session()
    assert not controller.api.is_authenticated


def test_sign_out_clears_even_when_server_fails() -> None:
    server = FakeServer()
    controller, _ = _controller(server)
    controller.sign_in("s@example.com", "pw")
    server.fail_logout = True

    assert controller.sign_out() is None

    assert controller.state == AuthState.SIGNED_OUT
    assert not controller.cache.has_session()


def test_unload_sends_one_beacon() -> None:
    server = FakeServer()
    controller, beacon_transport = _controller(server)
    controller.sign_in("s@example.com", "pw")

    assert controller.handle_unload() is True

    assert len(beacon_transport.sent) == 1
    assert json.loads(beacon_transport.sent[0])["session_id"] == "session-1"


def test_unload_when_signed_out_sends_nothing() -> None:
    controller, beacon_transport = _controller(FakeServer())

    assert controller.handle_unload() is False
    assert beacon_transport.sent == []


def test_failed_login_raises() -> None:
    def reject(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"detail": "Incorrect email or password"})

    api = AccessEduClient("http://api.test", transport=httpx.MockTransport(reject))
    cache = SessionCache()
    controller = AuthSessionController(
        api, cache, UnloadBeaconHandler("http://api.test", cache, RecordingTransport())
    )

    with pytest.raises(AccessEduClientError) as exc_info:
        controller.sign_in("s@example.com", "bad")
    assert exc_info.value.status_code == 401
    assert controller.state == AuthState.SIGNED_OUT


def test_restore_after_reload_with_saved_tokens() -> None:
    server = FakeServer()
    storage = TabSessionStorage()
    first, _ = _controller(server, storage)
    first.sign_in("s@example.com", "pw")

    reloaded, _ = _controller(server, storage)
    reloaded.api.set_tokens("access", "refresh")

    assert reloaded.restore(7) == "session-1"
    assert server.opened == ["session-1"]


def test_restore_new_tab_opens_session_with_saved_tokens() -> None:
    server = FakeServer()
    controller, _ = _controller(server, access_token="access")

    assert controller.restore(7) == "session-1"
    assert controller.cache.get_session_id() == "session-1"


def test_restore_without_tokens_raises() -> None:
    server = FakeServer()
    controller, _ = _controller(server)

    with pytest.raises(AccessEduClientError) as exc_info:
        controller.restore(7)

    assert exc_info.value.status_code == 401
    assert controller.state == AuthState.SIGNED_OUT
    assert server.opened == []
