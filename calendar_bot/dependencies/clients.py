"""
Factory functions to provide shared clients and services as FastAPI dependencies.

Cached factories hold only immutable configuration and stateless clients;
request-scoped objects are built fresh on every call.
"""

from functools import lru_cache

from calendar_bot.clients import (
    GoogleCalendarClient,
    GoogleOAuthClient,
    SQLiteKeyValueStore,
    TelegramBotClient,
)
from calendar_bot.core.config import get_settings
from calendar_bot.services import (
    AuthenticatedAccessGate,
    AuthorizationInitiator,
    BotRequestHandler,
    CalendarQueryAdapter,
    CredentialStore,
    OAuthCallbackHandler,
    OAuthStateStore,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_google_oauth_client() -> GoogleOAuthClient:
    """Create a singleton Google OAuth client."""
    settings = _settings()
    return GoogleOAuthClient(
        settings.google, settings.oauth, timeout=settings.http_timeout_seconds
    )


@lru_cache()
def get_calendar_client() -> GoogleCalendarClient:
    """Provide Google Calendar client instance."""
    return GoogleCalendarClient(timeout=_settings().http_timeout_seconds)


@lru_cache()
def get_telegram_bot_client() -> TelegramBotClient:
    """Provide the Bot API client for outbound messages."""
    settings = _settings()
    return TelegramBotClient(
        settings.telegram.bot_token, timeout=settings.http_timeout_seconds
    )


@lru_cache()
def get_oauth_state_store() -> OAuthStateStore:
    """Provide the correlation store for pending logins."""
    settings = _settings()
    store = SQLiteKeyValueStore(
        settings.storage.db_path, namespace=settings.storage.states_namespace
    )
    return OAuthStateStore(store, ttl_seconds=settings.oauth.state_ttl_seconds)


@lru_cache()
def get_credential_store() -> CredentialStore:
    """Provide the durable per-chat credential store."""
    settings = _settings()
    store = SQLiteKeyValueStore(
        settings.storage.db_path, namespace=settings.storage.tokens_namespace
    )
    return CredentialStore(store)


def get_oauth_callback_handler() -> OAuthCallbackHandler:
    """Build the redirect handler for one callback request."""
    return OAuthCallbackHandler(
        oauth_client=get_google_oauth_client(),
        states=get_oauth_state_store(),
        credentials=get_credential_store(),
        bot=get_telegram_bot_client(),
    )


def get_bot_request_handler() -> BotRequestHandler:
    """Build the command pipeline for one webhook update."""
    credentials = get_credential_store()
    return BotRequestHandler(
        initiator=AuthorizationInitiator(get_google_oauth_client(), get_oauth_state_store()),
        gate=AuthenticatedAccessGate(credentials),
        calendar=CalendarQueryAdapter(get_calendar_client(), credentials),
        bot_username=_settings().telegram.bot_username,
    )


__all__ = [
    "get_bot_request_handler",
    "get_calendar_client",
    "get_credential_store",
    "get_google_oauth_client",
    "get_oauth_callback_handler",
    "get_oauth_state_store",
    "get_telegram_bot_client",
]
