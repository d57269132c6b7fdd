"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_bot_request_handler,
    get_calendar_client,
    get_credential_store,
    get_google_oauth_client,
    get_oauth_callback_handler,
    get_oauth_state_store,
    get_telegram_bot_client,
)
from .config import SettingsDependency, get_app_settings, require_webhook_secret

__all__ = [
    "SettingsDependency",
    "get_app_settings",
    "get_bot_request_handler",
    "get_calendar_client",
    "get_credential_store",
    "get_google_oauth_client",
    "get_oauth_callback_handler",
    "get_oauth_state_store",
    "get_telegram_bot_client",
    "require_webhook_secret",
]
