"""Expose constructed client wrappers."""

from .google_auth import GoogleOAuthClient, TokenExchangeError
from .google_calendar import (
    GoogleCalendarClient,
    TransientQueryError,
    UnauthorizedResourceError,
)
from .kv_store import SQLiteKeyValueStore, StoreUnavailableError
from .telegram import TelegramBotClient, TelegramDeliveryError

__all__ = [
    "GoogleCalendarClient",
    "GoogleOAuthClient",
    "SQLiteKeyValueStore",
    "StoreUnavailableError",
    "TelegramBotClient",
    "TelegramDeliveryError",
    "TokenExchangeError",
    "TransientQueryError",
    "UnauthorizedResourceError",
]
