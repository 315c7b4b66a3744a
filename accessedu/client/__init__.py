"""
Python client for the AccessEdu session protocol.

Plays the browser's part: keeps the tab's session id, opens and closes
sessions around sign-in and sign-out, and fires the unload beacon.
"""

from accessedu.client.api import AccessEduClient, AccessEduClientError
from accessedu.client.auth_state import AuthSessionController, AuthState
from accessedu.client.beacon import BeaconTransport, HttpxBeaconTransport, UnloadBeaconHandler
from accessedu.client.session_cache import SessionCache, SessionStorage, TabSessionStorage

__all__ = [
    "AccessEduClient",
    "AccessEduClientError",
    "AuthSessionController",
    "AuthState",
    "BeaconTransport",
    "HttpxBeaconTransport",
    "SessionCache",
    "SessionStorage",
    "TabSessionStorage",
    "UnloadBeaconHandler",
]
