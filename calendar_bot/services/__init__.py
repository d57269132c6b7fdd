"""Service layer exports."""

from .access_gate import AuthenticatedAccessGate
from .authorization import AuthorizationInitiator
from .bot import BotRequestHandler
from .calendar_query import CalendarQueryAdapter
from .chat import ChatContext, TelegramChatContext
from .credentials import CredentialStore
from .oauth_callback import (
    InvalidOrExpiredStateError,
    MissingParameterError,
    OAuthCallbackHandler,
)
from .oauth_states import OAuthStateStore

__all__ = [
    "AuthenticatedAccessGate",
    "AuthorizationInitiator",
    "BotRequestHandler",
    "CalendarQueryAdapter",
    "ChatContext",
    "CredentialStore",
    "InvalidOrExpiredStateError",
    "MissingParameterError",
    "OAuthCallbackHandler",
    "OAuthStateStore",
    "TelegramChatContext",
]
