"""
Persistence helpers for per-chat Google credentials.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from pydantic import ValidationError

from calendar_bot.clients.kv_store import SQLiteKeyValueStore
from calendar_bot.models.oauth import CredentialBundle

logger = logging.getLogger(__name__)


class CredentialStore:
    """Durable chat id to ``CredentialBundle`` mapping without expiry."""

    def __init__(self, store: SQLiteKeyValueStore) -> None:
        self._store = store

    def save(self, bundle: CredentialBundle) -> None:
        self._store.put(bundle.chat_id, bundle.model_dump_json())

    def get(self, chat_id: str) -> Optional[CredentialBundle]:
        raw = self._store.get(chat_id)
        if raw is None:
            return None

        try:
            record = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable credential for chat %s", chat_id)
            self._store.delete(chat_id)
            return None

        # Backward compatibility: records written as the bare token payload.
        if isinstance(record, dict) and "raw_payload" not in record:
            if not record.get("access_token"):
                logger.warning("Discarding credential without access token for chat %s", chat_id)
                self._store.delete(chat_id)
                return None
            bundle = CredentialBundle.from_token_payload(chat_id, record)
            self.save(bundle)
            return bundle

        try:
            return CredentialBundle.model_validate(record)
        except ValidationError:
            logger.warning("Discarding malformed credential for chat %s", chat_id)
            self._store.delete(chat_id)
            return None

    def delete(self, chat_id: str) -> None:
        self._store.delete(chat_id)


__all__ = ["CredentialStore"]
