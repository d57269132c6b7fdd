"""
Per-update command pipeline for the Telegram bot.

A ``BotRequestHandler`` is built for every webhook call from long-lived,
immutable collaborators and holds no state between updates.
"""

from __future__ import annotations

import logging
from typing import Optional

from calendar_bot.services.access_gate import AuthenticatedAccessGate
from calendar_bot.services.authorization import AuthorizationInitiator
from calendar_bot.services.calendar_query import CalendarQueryAdapter
from calendar_bot.services.chat import ChatContext

logger = logging.getLogger(__name__)

HELLO_REPLY = "hello back"


def parse_command(text: Optional[str], bot_username: Optional[str] = None) -> Optional[str]:
    """
    Return the lower-cased command name of ``text`` or None.

    ``/cmd@name`` only counts when ``name`` matches ``bot_username``; without
    a configured username any mention is accepted.
    """
    if not text or not text.startswith("/"):
        return None
    token = text.split(maxsplit=1)[0][1:]
    name, _, mention = token.partition("@")
    if not name:
        return None
    if mention and bot_username and mention.lower() != bot_username.lstrip("@").lower():
        return None
    return name.lower()


class BotRequestHandler:
    """Dispatch one chat message through hello, login, the gate and calendar."""

    def __init__(
        self,
        *,
        initiator: AuthorizationInitiator,
        gate: AuthenticatedAccessGate,
        calendar: CalendarQueryAdapter,
        bot_username: Optional[str] = None,
    ) -> None:
        self._initiator = initiator
        self._gate = gate
        self._calendar = calendar
        self._bot_username = bot_username

    async def handle(self, ctx: ChatContext, text: Optional[str]) -> str:
        """Process a message and return the name of the stage that answered it."""
        command = parse_command(text, self._bot_username)

        if command == "hello":
            await ctx.reply(HELLO_REPLY)
            return "hello"

        if command == "login" and ctx.chat_identifier():
            await self._initiator.start(ctx)
            return "login"

        if not await self._gate.allows(ctx, command):
            return "gate"

        if command == "calendar":
            await self._calendar.run(ctx)
            return "calendar"

        logger.debug("No handler for command %r", command)
        return "ignored"


__all__ = ["BotRequestHandler", "HELLO_REPLY", "parse_command"]
