"""Tab-scoped cache of the current learning session id."""

from typing import Protocol

SESSION_ID_KEY = "learning_session_id"
USER_ID_KEY = "user_id"


class SessionStorage(Protocol):
    """Key/value storage scoped to one browser tab."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class TabSessionStorage:
    """
    In-memory stand-in for the browser's sessionStorage.

    Share one instance between controllers to model a page reload within
    the same tab; a new instance models a new tab.
    """

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class SessionCache:
    """Holds the open session id and its owner for the current tab."""

    def __init__(self, storage: SessionStorage | None = None) -> None:
        self.storage = storage if storage is not None else TabSessionStorage()

    def get_session_id(self) -> str | None:
        return self.storage.get_item(SESSION_ID_KEY)

    def get_user_id(self) -> int | None:
        raw = self.storage.get_item(USER_ID_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def has_session(self) -> bool:
        return self.get_session_id() is not None and self.get_user_id() is not None

    def remember(self, session_id: str, user_id: int) -> None:
        self.storage.set_item(SESSION_ID_KEY, session_id)
        self.storage.set_item(USER_ID_KEY, str(user_id))

    def clear(self) -> None:
        self.storage.remove_item(SESSION_ID_KEY)
        self.storage.remove_item(USER_ID_KEY)
