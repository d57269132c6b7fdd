"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app and the operator scripts
share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class TelegramSettings(BaseSettings):
    """Configuration for the Telegram bot identity and webhook."""

    model_config = SettingsConfigDict(populate_by_name=True)

    bot_token: str = Field(..., alias="TELEGRAM_BOT_TOKEN")
    bot_username: Optional[str] = Field(
        None,
        alias="TELEGRAM_BOT_USERNAME",
        description="Used to accept commands addressed as /command@username.",
    )
    webhook_secret: Optional[str] = Field(
        None,
        alias="TELEGRAM_WEBHOOK_SECRET",
        description=(
            "When set, webhook calls must carry this value in the "
            "X-Telegram-Bot-Api-Secret-Token header or as ?token=."
        ),
    )
    webhook_url: Optional[AnyHttpUrl] = Field(
        None,
        alias="TELEGRAM_WEBHOOK_URL",
        description="Public URL registered with Telegram by scripts/set_webhook.py.",
    )


class GoogleSettings(BaseSettings):
    """Configuration required for interacting with Google APIs."""

    model_config = SettingsConfigDict(populate_by_name=True)

    client_id: str = Field(..., alias="GOOGLE_CLIENT_ID")
    client_secret: str = Field(..., alias="GOOGLE_CLIENT_SECRET")
    redirect_uri: AnyHttpUrl = Field(..., alias="OAUTH_REDIRECT_URI")


class OAuthSettings(BaseSettings):
    """OAuth flow configuration."""

    model_config = SettingsConfigDict(populate_by_name=True)

    state_ttl_seconds: int = Field(300, alias="OAUTH_STATE_TTL")
    scopes: Annotated[tuple[str, ...], NoDecode] = Field(
        (
            "https://www.googleapis.com/auth/calendar",
            "https://www.googleapis.com/auth/calendar.events",
        ),
        alias="OAUTH_SCOPES",
    )

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing scopes as a comma-separated string."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(value)
        return tuple(scope.strip() for scope in value.split(",") if scope.strip())


class StorageSettings(BaseSettings):
    """Location of the key-value substrate backing both OAuth stores."""

    model_config = SettingsConfigDict(populate_by_name=True)

    db_path: str = Field("data/calendar_bot.db", alias="STORAGE_DB_PATH")
    states_namespace: str = Field("oauth_states", alias="OAUTH_STATES_NAMESPACE")
    tokens_namespace: str = Field("oauth_tokens", alias="OAUTH_TOKENS_NAMESPACE")


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field("INFO", alias="APP_LOG_LEVEL")
    http_timeout_seconds: float = Field(10.0, alias="HTTP_TIMEOUT_SECONDS")
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "GoogleSettings",
    "OAuthSettings",
    "StorageSettings",
    "TelegramSettings",
    "get_settings",
]
