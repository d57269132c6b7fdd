try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from calendar_bot.clients.kv_store import SQLiteKeyValueStore, StoreUnavailableError


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(tmp_path, clock) -> SQLiteKeyValueStore:
    return SQLiteKeyValueStore(str(tmp_path / "kv.db"), namespace="states", clock=clock)


def test_put_get_and_overwrite(store) -> None:
    store.put("chat-1", "first")
    store.put("chat-1", "second")

    assert store.get("chat-1") == "second"
    assert store.get("missing") is None


def test_entries_expire_after_ttl(store, clock) -> None:
    store.put("state-1", "42", ttl_seconds=300)

    clock.now += 299
    assert store.get("state-1") == "42"

    clock.now += 1
    assert store.get("state-1") is None
    assert store.take("state-1") is None


def test_take_is_single_use(store) -> None:
    store.put("state-1", "42", ttl_seconds=300)

    assert store.take("state-1") == "42"
    assert store.take("state-1") is None
    assert store.get("state-1") is None


def test_namespaces_are_isolated(tmp_path, clock) -> None:
    db_path = str(tmp_path / "shared.db")
    states = SQLiteKeyValueStore(db_path, namespace="oauth_states", clock=clock)
    tokens = SQLiteKeyValueStore(db_path, namespace="oauth_tokens", clock=clock)

    states.put("key", "state-value")
    tokens.put("key", "token-value")
    states.delete("key")

    assert states.get("key") is None
    assert tokens.get("key") == "token-value"


def test_expired_rows_are_pruned_on_write(tmp_path, store, clock) -> None:
    store.put("old", "value", ttl_seconds=10)
    clock.now += 60
    store.put("new", "value")

    import sqlite3

    with sqlite3.connect(tmp_path / "kv.db") as conn:
        keys = [row[0] for row in conn.execute("SELECT key FROM kv_entries")]
    assert keys == ["new"]


def test_unusable_path_raises_store_unavailable(tmp_path) -> None:
    blocked = tmp_path / "as-directory.db"
    blocked.mkdir()

    with pytest.raises(StoreUnavailableError):
        SQLiteKeyValueStore(str(blocked), namespace="states")


def test_put_rejects_empty_key(store) -> None:
    with pytest.raises(ValueError):
        store.put("", "value")
