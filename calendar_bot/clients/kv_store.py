"""SQLite-backed key-value substrate with per-entry expiry."""

from __future__ import annotations

import logging
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

logger = logging.getLogger(__name__)


class StoreUnavailableError(Exception):
    """Raised when the key-value backend cannot be read or written."""


class SQLiteKeyValueStore:
    """Namespaced key-value store with optional TTL, keyed by (namespace, key).

    Expired entries are invisible to reads and are pruned on writes.
    """

    def __init__(
        self,
        db_path: str,
        *,
        namespace: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._db_path = Path(db_path)
        self._namespace = namespace
        self._clock = clock
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            logger.exception("Could not open key-value store at %s", self._db_path)
            raise StoreUnavailableError(str(exc)) from exc
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            logger.exception("Key-value store operation failed in %s", self._namespace)
            raise StoreUnavailableError(str(exc)) from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_entries (
                    namespace TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    expires_at REAL,
                    PRIMARY KEY (namespace, key)
                )
                """
            )

    def _prune(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            "DELETE FROM kv_entries WHERE namespace = ? "
            "AND expires_at IS NOT NULL AND expires_at <= ?",
            (self._namespace, self._clock()),
        )

    def _select_live(self, conn: sqlite3.Connection, key: str) -> Optional[str]:
        row = conn.execute(
            "SELECT value, expires_at FROM kv_entries WHERE namespace = ? AND key = ?",
            (self._namespace, key),
        ).fetchone()
        if not row:
            return None
        expires_at = row["expires_at"]
        if expires_at is not None and expires_at <= self._clock():
            return None
        return row["value"]

    def put(self, key: str, value: str, *, ttl_seconds: Optional[int] = None) -> None:
        """Insert or overwrite ``key``; entries with a TTL expire on their own."""
        if not key:
            raise ValueError("Key must be a non-empty string")
        expires_at = self._clock() + ttl_seconds if ttl_seconds is not None else None
        with self._transaction() as conn:
            self._prune(conn)
            conn.execute(
                """
                INSERT INTO kv_entries (namespace, key, value, expires_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(namespace, key) DO UPDATE SET
                    value = excluded.value,
                    expires_at = excluded.expires_at
                """,
                (self._namespace, key, value, expires_at),
            )

    def get(self, key: str) -> Optional[str]:
        with self._transaction() as conn:
            return self._select_live(conn, key)

    def delete(self, key: str) -> None:
        with self._transaction() as conn:
            conn.execute(
                "DELETE FROM kv_entries WHERE namespace = ? AND key = ?",
                (self._namespace, key),
            )

    def take(self, key: str) -> Optional[str]:
        """Atomically read and delete ``key``; only one caller can observe it."""
        with self._transaction() as conn:
            value = self._select_live(conn, key)
            conn.execute(
                "DELETE FROM kv_entries WHERE namespace = ? AND key = ?",
                (self._namespace, key),
            )
        return value


__all__ = ["SQLiteKeyValueStore", "StoreUnavailableError"]
