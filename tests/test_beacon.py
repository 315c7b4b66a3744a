"""Tests for the unload beacon endpoint."""

import json
from datetime import timedelta

from fastapi import status
from fastapi.testclient import TestClient

from accessedu import models
from tests.conftest import TEST_PASSWORD, FakeClock, auth_headers

BEACON_URL = "/api/v1/close-session"


def _open(client: TestClient, user: models.User) -> str:
    response = client.post("/api/v1/sessions", headers=auth_headers(user.id))
    return response.json()["session_id"]


def _beacon(client: TestClient, payload: dict | str) -> object:
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return client.post(
        BEACON_URL, content=body, headers={"Content-Type": "text/plain;charset=UTF-8"}
    )


def _total(client: TestClient, user: models.User) -> int:
    profile = client.get("/api/v1/profile/me", headers=auth_headers(user.id)).json()
    return profile["total_active_minutes"]


def test_beacon_closes_session_with_text_plain_body(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    session_id = _open(client, test_user)
    clock.advance(minutes=7)

    response = _beacon(client, {"session_id": session_id, "user_id": test_user.id})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "duration_minutes": 7}
    assert _total(client, test_user) == 7


def test_beacon_accepts_json_content_type(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    session_id = _open(client, test_user)
    clock.advance(minutes=2)

    response = client.post(BEACON_URL, json={"session_id": session_id, "user_id": test_user.id})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["duration_minutes"] == 2


def test_beacon_accepts_string_user_id(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    session_id = _open(client, test_user)
    clock.advance(minutes=4)

    response = _beacon(client, {"session_id": session_id, "user_id": str(test_user.id)})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["duration_minutes"] == 4


def test_beacon_uses_client_logout_time(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    session_id = _open(client, test_user)
    logout_at = clock.now + timedelta(minutes=5)
    clock.advance(minutes=9)

    response = _beacon(
        client,
        {"session_id": session_id, "user_id": test_user.id, "logout_at": logout_at.isoformat()},
    )

    assert response.json()["duration_minutes"] == 5


def test_beacon_clamps_future_logout_time(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    session_id = _open(client, test_user)
    clock.advance(minutes=3)
    future = clock.now + timedelta(hours=2)

    response = _beacon(
        client,
        {"session_id": session_id, "user_id": test_user.id, "logout_at": future.isoformat()},
    )

    assert response.json()["duration_minutes"] == 3


def test_beacon_missing_ids_returns_400(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    session_id = _open(client, test_user)

    assert _beacon(client, {"user_id": test_user.id}).status_code == status.HTTP_400_BAD_REQUEST
    assert _beacon(client, {"session_id": session_id}).status_code == status.HTTP_400_BAD_REQUEST
    assert _beacon(client, "").status_code == status.HTTP_400_BAD_REQUEST
    assert _total(client, test_user) == 0


def test_beacon_malformed_payload_returns_400(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    session_id = _open(client, test_user)

    assert _beacon(client, "{not json").status_code == status.HTTP_400_BAD_REQUEST
    assert (
        _beacon(client, {"session_id": "nope", "user_id": test_user.id}).status_code
        == status.HTTP_400_BAD_REQUEST
    )
    assert (
        _beacon(client, {"session_id": session_id, "user_id": "abc"}).status_code
        == status.HTTP_400_BAD_REQUEST
    )


def test_beacon_unknown_session_returns_404(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    response = _beacon(
        client,
        {"session_id": "00000000-0000-0000-0000-000000000000", "user_id": test_user.id},
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert _total(client, test_user) == 0


def test_beacon_owner_mismatch_is_forbidden(
    client: TestClient,
    test_user: models.User,
    other_user: models.User,
    clock: FakeClock,
) -> None:
    session_id = _open(client, test_user)
    clock.advance(minutes=6)

    response = _beacon(client, {"session_id": session_id, "user_id": other_user.id})

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert _total(client, test_user) == 0
    assert _total(client, other_user) == 0


def test_beacon_after_logout_does_not_double_count(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    session_id = _open(client, test_user)
    clock.advance(minutes=8)
    client.post(
        "/api/v1/auth/logout",
        json={"session_id": session_id},
        headers=auth_headers(test_user.id),
    )
    clock.advance(seconds=1)

    response = _beacon(client, {"session_id": session_id, "user_id": test_user.id})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["duration_minutes"] == 8
    assert _total(client, test_user) == 8


def test_beacon_then_explicit_logout_accumulates(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    """Tab closed after 7 minutes, next visit signed out after 3: 10 minutes total."""
    login = client.post(
        "/api/v1/auth/login",
        params={"open_session": "true"},
        data={"username": test_user.email, "password": TEST_PASSWORD},
    )
    first_session = login.json()["session_id"]
    clock.advance(minutes=7)

    _beacon(client, {"session_id": first_session, "user_id": test_user.id})
    assert _total(client, test_user) == 7

    clock.advance(hours=1)
    login = client.post(
        "/api/v1/auth/login",
        params={"open_session": "true"},
        data={"username": test_user.email, "password": TEST_PASSWORD},
    )
    second_session = login.json()["session_id"]
    token = login.json()["access_token"]
    clock.advance(minutes=3)

    logout = client.post(
        "/api/v1/auth/logout",
        json={"session_id": second_session},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert logout.json()["duration_minutes"] == 3
    assert _total(client, test_user) == 10


def test_beacon_boolean_user_id_returns_400(
    client: TestClient, test_user: models.User, clock: FakeClock
) -> None:
    session_id = _open(client, test_user)
    clock.advance(minutes=5)

    response = _beacon(client, {"session_id": session_id, "user_id": True})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert _total(client, test_user) == 0
