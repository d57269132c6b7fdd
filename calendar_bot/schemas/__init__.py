"""Public schema exports."""

from .auth import OAuthCallbackParams
from .calendar import CalendarList, CalendarListEntry
from .telegram import TelegramMessage, TelegramUpdate

__all__ = [
    "CalendarList",
    "CalendarListEntry",
    "OAuthCallbackParams",
    "TelegramMessage",
    "TelegramUpdate",
]
