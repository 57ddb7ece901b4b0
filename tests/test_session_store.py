import json

import pytest

from auth import FileKeyValueStore, MemoryKeyValueStore, SessionStore
from auth.store import SESSION_KEYS
from core.enums import SessionState
from core.exceptions import AuthError


COMPLETE = {
    "isLoggedIn": "true",
    "userInitial": "O",
    "accessToken": "a-token",
    "refreshToken": "r-token",
    "username": "operator",
}


def test_restore_complete_session():
    store = SessionStore(MemoryKeyValueStore(COMPLETE))

    pair = store.restore()

    assert pair.access == "a-token"
    assert pair.refresh == "r-token"
    assert pair.subject == "operator"
    assert store.state == SessionState.AUTHENTICATED


@pytest.mark.parametrize("missing", SESSION_KEYS)
def test_restore_rejects_partial_session(missing):
    data = {k: v for k, v in COMPLETE.items() if k != missing}
    kv = MemoryKeyValueStore(data)
    store = SessionStore(kv)

    assert store.restore() is None
    assert store.state == SessionState.ANONYMOUS
    assert store.access is None
    assert not any(key in kv.load() for key in SESSION_KEYS)


def test_restore_rejects_logged_out_flag():
    store = SessionStore(MemoryKeyValueStore({**COMPLETE, "isLoggedIn": "false"}))

    assert store.restore() is None
    assert store.state == SessionState.ANONYMOUS


def test_establish_writes_every_key(pair):
    kv = MemoryKeyValueStore({"theme": "dark"})
    store = SessionStore(kv)

    store.establish(pair)

    assert kv.load() == {
        "theme": "dark",
        "isLoggedIn": "true",
        "userInitial": "O",
        "accessToken": "a-token",
        "refreshToken": "r-token",
        "username": "operator",
    }
    assert store.state == SessionState.AUTHENTICATED


def test_update_replaces_only_access(pair):
    kv = MemoryKeyValueStore()
    store = SessionStore(kv)
    store.establish(pair)
    generation = store.generation

    store.update("a-token-2")

    assert store.pair.access == "a-token-2"
    assert store.pair.refresh == "r-token"
    assert store.subject == "operator"
    assert kv.load()["accessToken"] == "a-token-2"
    assert kv.load()["refreshToken"] == "r-token"
    assert store.generation == generation


def test_update_without_session_fails():
    with pytest.raises(AuthError):
        SessionStore(MemoryKeyValueStore()).update("x")


def test_clear_removes_every_session_key(pair):
    kv = MemoryKeyValueStore({"theme": "dark"})
    store = SessionStore(kv)
    store.establish(pair)

    store.clear()

    assert kv.load() == {"theme": "dark"}
    assert store.pair is None
    assert store.state == SessionState.ANONYMOUS


def test_file_store_round_trip(tmp_path, pair):
    path = tmp_path / "session.json"
    SessionStore(FileKeyValueStore(path)).establish(pair)

    restored = SessionStore(FileKeyValueStore(path)).restore()

    assert restored == pair
    assert json.loads(path.read_text())["username"] == "operator"
    assert list(tmp_path.iterdir()) == [path]


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")

    assert SessionStore(FileKeyValueStore(path)).restore() is None


def test_credentials_not_in_repr(pair):
    assert "a-token" not in repr(pair)
    assert "r-token" not in repr(pair)
