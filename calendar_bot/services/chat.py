"""Transport-neutral view of the chat a command came from."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Protocol

from calendar_bot.clients.telegram import TelegramBotClient

logger = logging.getLogger(__name__)


def chat_identifier_from(chat: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Derive the key used by both OAuth stores from a Telegram chat object."""
    if not chat:
        return None
    chat_id = chat.get("id")
    if chat_id is None or isinstance(chat_id, bool):
        return None
    return str(chat_id)


class ChatContext(Protocol):
    def chat_identifier(self) -> Optional[str]:
        ...

    async def reply(
        self,
        text: str,
        *,
        parse_mode: Optional[str] = None,
        reply_markup: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        ...


class TelegramChatContext:
    """``ChatContext`` backed by the Bot API ``sendMessage`` call."""

    def __init__(self, bot: TelegramBotClient, chat: Optional[Mapping[str, Any]]) -> None:
        self._bot = bot
        self._chat_id = chat_identifier_from(chat)

    def chat_identifier(self) -> Optional[str]:
        return self._chat_id

    async def reply(
        self,
        text: str,
        *,
        parse_mode: Optional[str] = None,
        reply_markup: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        if self._chat_id is None:
            logger.warning("Dropping reply for update without a chat: %r", text)
            return None
        return await self._bot.send_message(
            self._chat_id, text, parse_mode=parse_mode, reply_markup=reply_markup
        )


__all__ = ["ChatContext", "TelegramChatContext", "chat_identifier_from"]
