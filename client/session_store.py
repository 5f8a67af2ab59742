"""
Client-side session storage.

A small key-value store standing in for the browser's cookie jar. It keeps the
auth token and the logged-in user's identity under the same keys the web client
uses (`authToken`, `uid`, `username`). When given a path, every write is
persisted to that JSON file; without one it lives in memory only.
"""

import json
import logging
from pathlib import Path

from client.models import Session

TOKEN_KEY     = "authToken"
USER_ID_KEY   = "uid"
USER_NAME_KEY = "username"

log = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, path: Path | None = None):
        self.path = path
        self._values: dict[str, str] = self._read()

    # ------------------------------------------------------------------
    # Key-value access
    # ------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._write()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._write()

    def clear(self) -> None:
        self._values = {}
        self._write()

    # ------------------------------------------------------------------
    # Session helpers
    # ------------------------------------------------------------------

    def load_session(self) -> Session | None:
        """Return the stored session, or None if no user is logged in."""
        user_id = self.get(USER_ID_KEY)
        if not user_id:
            return None
        return Session(
            user_id=user_id,
            user_name=self.get(USER_NAME_KEY) or "",
            token=self.get(TOKEN_KEY),
        )

    def save_session(self, session: Session) -> None:
        self._values[USER_ID_KEY] = session.user_id
        self._values[USER_NAME_KEY] = session.user_name
        if session.token:
            self._values[TOKEN_KEY] = session.token
        else:
            self._values.pop(TOKEN_KEY, None)
        self._write()
        log.info("Session stored for user %s", session.user_id)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring malformed session file %s", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._values, indent=2), encoding="utf-8")
