"""Session credential storage"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from core.enums import SessionState
from core.exceptions import AuthError
from core.interfaces import KeyValueStore
from core.models import CredentialPair


logger = logging.getLogger(__name__)

# Persisted keys; a restored session needs every one of them
IS_LOGGED_IN = "isLoggedIn"
USER_INITIAL = "userInitial"
ACCESS_TOKEN = "accessToken"
REFRESH_TOKEN = "refreshToken"
USERNAME = "username"

SESSION_KEYS = (IS_LOGGED_IN, USER_INITIAL, ACCESS_TOKEN, REFRESH_TOKEN, USERNAME)


class MemoryKeyValueStore(KeyValueStore):
    """In-process store"""

    def __init__(self, data: Optional[dict[str, str]] = None):
        self._data = dict(data or {})

    def load(self) -> dict[str, str]:
        return dict(self._data)

    def save(self, data: dict[str, str]) -> None:
        self._data = dict(data)


class FileKeyValueStore(KeyValueStore):
    """JSON file store; writes go to a temp file that replaces the original"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=self.path.name, suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class SessionStore:
    """
    Owns the credential pair for the running client.

    Every mutation replaces the whole pair (in memory and on disk) in one
    step, so readers never see an access token without its refresh token
    or a subject without credentials.
    """

    def __init__(self, kv: KeyValueStore):
        self._kv = kv
        self._pair: Optional[CredentialPair] = None
        self._state = SessionState.ANONYMOUS
        self._generation = 0

    @property
    def pair(self) -> Optional[CredentialPair]:
        return self._pair

    @property
    def access(self) -> Optional[str]:
        return self._pair.access if self._pair else None

    @property
    def subject(self) -> Optional[str]:
        return self._pair.subject if self._pair else None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def generation(self) -> int:
        """Bumped on every establish/clear; stale calls compare against it"""
        return self._generation

    @property
    def is_authenticated(self) -> bool:
        return self._pair is not None

    def restore(self) -> Optional[CredentialPair]:
        """
        Load a previously persisted session.

        Only a complete set of keys is accepted; anything partial is wiped
        and the session stays anonymous.
        """
        data = self._kv.load()
        values = {key: data.get(key) for key in SESSION_KEYS}

        if all(values.values()) and values[IS_LOGGED_IN] == "true":
            self._pair = CredentialPair(
                access=values[ACCESS_TOKEN],
                refresh=values[REFRESH_TOKEN],
                subject=values[USERNAME],
            )
            self._state = SessionState.AUTHENTICATED
            self._generation += 1
            logger.debug("Restored session for %s", self._pair.subject)
            return self._pair

        if any(key in data for key in SESSION_KEYS):
            logger.info("Discarding incomplete persisted session")
            self.clear()
        else:
            self._pair = None
            self._state = SessionState.ANONYMOUS
        return None

    def begin_authentication(self) -> None:
        """Mark a login as underway"""
        self._state = SessionState.AUTHENTICATING

    def abort_authentication(self) -> None:
        """Login failed; fall back to whatever session was there before"""
        self._state = (
            SessionState.AUTHENTICATED if self._pair else SessionState.ANONYMOUS
        )

    def establish(self, pair: CredentialPair) -> None:
        """Install a fresh credential pair"""
        data = self._kv.load()
        data.update({
            IS_LOGGED_IN: "true",
            USER_INITIAL: pair.subject[0].upper(),
            ACCESS_TOKEN: pair.access,
            REFRESH_TOKEN: pair.refresh,
            USERNAME: pair.subject,
        })
        self._kv.save(data)
        self._pair = pair
        self._state = SessionState.AUTHENTICATED
        self._generation += 1
        logger.info("Session established for %s", pair.subject)

    def update(self, access: str) -> None:
        """Replace only the access token after a refresh"""
        if self._pair is None:
            raise AuthError("No session to update")
        data = self._kv.load()
        data[ACCESS_TOKEN] = access
        self._kv.save(data)
        self._pair = self._pair.model_copy(update={"access": access})
        self._state = SessionState.AUTHENTICATED

    def mark_refreshing(self) -> None:
        if self._pair is not None:
            self._state = SessionState.REFRESH_IN_FLIGHT

    def clear(self) -> None:
        """Drop the session and every persisted session key"""
        data = self._kv.load()
        for key in SESSION_KEYS:
            data.pop(key, None)
        self._kv.save(data)
        had_session = self._pair is not None
        self._pair = None
        self._state = SessionState.ANONYMOUS
        self._generation += 1
        if had_session:
            logger.info("Session cleared")
