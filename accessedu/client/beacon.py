"""
Fire-and-forget session close on tab unload.

Mirrors navigator.sendBeacon: the request is handed to a background
worker and the caller never waits for, or learns about, the outcome.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from typing import Protocol

import httpx

from accessedu.client.session_cache import SessionCache

logger = logging.getLogger(__name__)

BEACON_PATH = "/api/v1/close-session"


class BeaconTransport(Protocol):
    def send(self, url: str, body: bytes) -> None:
        """Queue the body for delivery and return immediately."""
        ...


class HttpxBeaconTransport:
    """Posts beacons with httpx from a single background worker thread."""

    def __init__(
        self,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="beacon")

    def send(self, url: str, body: bytes) -> None:
        self._executor.submit(self._post, url, body)

    def _post(self, url: str, body: bytes) -> None:
        try:
            response = self._client.post(
                url, content=body, headers={"Content-Type": "text/plain;charset=UTF-8"}
            )
            if response.is_error:
                logger.warning(f"Beacon to {url} rejected with status {response.status_code}")
        except httpx.HTTPError as e:
            logger.warning(f"Beacon to {url} failed: {e!s}")

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker; with wait=True, queued beacons are delivered first."""
        self._executor.shutdown(wait=wait)
        self._client.close()


class UnloadBeaconHandler:
    """Sends one close-session beacon for the cached session, if any."""

    def __init__(self, base_url: str, cache: SessionCache, transport: BeaconTransport) -> None:
        self.url = f"{base_url.rstrip('/')}{BEACON_PATH}"
        self.cache = cache
        self.transport = transport

    def handle_unload(self, now: datetime | None = None) -> bool:
        """
        Fire the beacon if both ids are cached.

        Returns:
            True if a beacon was handed to the transport
        """
        session_id = self.cache.get_session_id()
        user_id = self.cache.get_user_id()
        if session_id is None or user_id is None:
            return False

        logout_at = (now or datetime.now(UTC)).isoformat()
        body = json.dumps(
            {"session_id": session_id, "user_id": user_id, "logout_at": logout_at}
        ).encode("utf-8")
        self.transport.send(self.url, body)
        return True
