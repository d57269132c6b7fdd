"""Short-lived correlation between OAuth state tokens and chats."""

from __future__ import annotations

from typing import Optional

from calendar_bot.clients.kv_store import SQLiteKeyValueStore


class OAuthStateStore:
    """Map a one-time state token to the chat that started the login."""

    def __init__(self, store: SQLiteKeyValueStore, *, ttl_seconds: int = 300) -> None:
        self._store = store
        self._ttl = ttl_seconds

    def remember(self, state: str, chat_id: str) -> None:
        self._store.put(state, chat_id, ttl_seconds=self._ttl)

    def consume(self, state: str) -> Optional[str]:
        """Return the chat for ``state`` and forget it, or None if unknown or expired."""
        return self._store.take(state)


__all__ = ["OAuthStateStore"]
