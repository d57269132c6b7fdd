"""Fetch the chat's Google calendars and render them as Telegram messages."""

from __future__ import annotations

import logging
from typing import Iterable, List

from calendar_bot.clients.google_calendar import (
    GoogleCalendarClient,
    TransientQueryError,
    UnauthorizedResourceError,
)
from calendar_bot.schemas.calendar import CalendarListEntry
from calendar_bot.services.chat import ChatContext
from calendar_bot.services.credentials import CredentialStore

logger = logging.getLogger(__name__)

TELEGRAM_MESSAGE_LIMIT = 4096
DESCRIPTION_LIMIT = 50
DESCRIPTION_KEEP = 47

FETCHING_MESSAGE = "Getting list of calendar"
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please authenticate again using /login."
FETCH_FAILED_MESSAGE = "Error fetching calendars. Please try authenticating again with /login"


def _truncate_description(description: str) -> str:
    if len(description) > DESCRIPTION_LIMIT:
        return description[:DESCRIPTION_KEEP] + "..."
    return description


def format_calendar_list(calendars: Iterable[CalendarListEntry]) -> str:
    """Render calendars as a numbered Markdown list."""
    message = "📅 *Your Calendars*\n\n"
    for index, calendar in enumerate(calendars, start=1):
        message += f"*{index}. {calendar.summary}*\n"
        if calendar.description:
            message += f"📝 {_truncate_description(calendar.description)}\n"
        message += f"🌍 {calendar.time_zone}\n\n"
    return message


def _is_high_surrogate(encoded: bytes, offset: int) -> bool:
    unit = int.from_bytes(encoded[offset : offset + 2], "little")
    return 0xD800 <= unit <= 0xDBFF


def chunk_message(message: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> List[str]:
    """Slice ``message`` into pieces of at most ``limit`` UTF-16 code units.

    Telegram measures message length in UTF-16 units, so the emoji markers
    count twice. Pieces are fixed-size and may cut an entry in two, but a
    surrogate pair is never split.
    """
    encoded = message.encode("utf-16-le")
    if len(encoded) <= limit * 2:
        return [message]

    chunks: List[str] = []
    start = 0
    while start < len(encoded):
        end = min(start + limit * 2, len(encoded))
        if end < len(encoded) and end - 2 > start and _is_high_surrogate(encoded, end - 2):
            end -= 2
        chunks.append(encoded[start:end].decode("utf-16-le"))
        start = end
    return chunks


class CalendarQueryAdapter:
    """Run ``/calendar`` for a chat that already passed the access gate."""

    def __init__(
        self, calendar_client: GoogleCalendarClient, credentials: CredentialStore
    ) -> None:
        self._calendar = calendar_client
        self._credentials = credentials

    async def run(self, ctx: ChatContext) -> None:
        await ctx.reply(FETCHING_MESSAGE)

        chat_id = ctx.chat_identifier()
        if not chat_id:
            return
        bundle = self._credentials.get(chat_id)
        access_token = bundle.access_token if bundle else ""

        try:
            calendars = await self._calendar.list_calendars(access_token)
        except UnauthorizedResourceError:
            logger.info("Google rejected credential for chat %s; forcing re-login", chat_id)
            self._credentials.delete(chat_id)
            await ctx.reply(SESSION_EXPIRED_MESSAGE)
            return
        except TransientQueryError as exc:
            # Transient and permanent failures look alike here, so both revoke.
            logger.warning("Calendar query failed for chat %s: %s", chat_id, exc)
            self._credentials.delete(chat_id)
            await ctx.reply(FETCH_FAILED_MESSAGE)
            return

        for chunk in chunk_message(format_calendar_list(calendars)):
            await ctx.reply(chunk, parse_mode="Markdown")


__all__ = [
    "CalendarQueryAdapter",
    "FETCHING_MESSAGE",
    "FETCH_FAILED_MESSAGE",
    "SESSION_EXPIRED_MESSAGE",
    "TELEGRAM_MESSAGE_LIMIT",
    "chunk_message",
    "format_calendar_list",
]
