from collections.abc import MutableMapping
from typing import Any, Protocol

FLASH_SUCCESS = "success"
FLASH_ERROR = "error"


class FlashStore(Protocol):
    def set(self, key: str, message: str) -> None: ...

    def get_and_clear(self, key: str) -> str | None: ...


class SessionFlashStore:
    """Flash messages kept in the signed session cookie under a single key."""

    session_key = "_flash"

    def __init__(self, session: MutableMapping[str, Any]):
        self._session = session

    def set(self, key: str, message: str) -> None:
        bucket = dict(self._session.get(self.session_key) or {})
        bucket[key] = message
        self._session[self.session_key] = bucket

    def get_and_clear(self, key: str) -> str | None:
        bucket = dict(self._session.get(self.session_key) or {})
        message = bucket.pop(key, None)
        if message is None:
            return None
        if bucket:
            self._session[self.session_key] = bucket
        else:
            self._session.pop(self.session_key, None)
        return message
