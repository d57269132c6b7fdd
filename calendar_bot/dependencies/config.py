"""
FastAPI dependency utilities for configuration-driven request checks.
"""

from functools import lru_cache
from http import HTTPStatus
from typing import Optional

import hmac

from fastapi import Depends, Header, HTTPException, Query

from calendar_bot.core.config import AppSettings, get_settings


@lru_cache()
def _settings_singleton() -> AppSettings:
    """Ensure configuration is created once per process."""
    return get_settings()


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return _settings_singleton()


SettingsDependency = Depends(get_app_settings)


def require_webhook_secret(
    settings: AppSettings = SettingsDependency,
    token: Optional[str] = Query(None, description="Webhook secret for verification."),
    secret_header: Optional[str] = Header(
        None, alias="X-Telegram-Bot-Api-Secret-Token"
    ),
) -> None:
    """Reject webhook calls that do not carry the configured secret."""
    expected = settings.telegram.webhook_secret
    if not expected:
        return
    supplied = secret_header or token or ""
    if not hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=HTTPStatus.FORBIDDEN, detail="Invalid token")


__all__ = ["SettingsDependency", "get_app_settings", "require_webhook_secret"]
