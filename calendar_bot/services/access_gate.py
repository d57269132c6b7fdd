"""Allow or deny capability commands based on stored credentials."""

from __future__ import annotations

from typing import Optional

from calendar_bot.services.chat import ChatContext
from calendar_bot.services.credentials import CredentialStore

RESTART_PROMPT = "Please restart the chat"
AUTHENTICATE_PROMPT = "Please authenticate first using /login"


class AuthenticatedAccessGate:
    """Stop the pipeline unless the chat has a credential (or is logging in)."""

    def __init__(self, credentials: CredentialStore) -> None:
        self._credentials = credentials

    async def allows(self, ctx: ChatContext, command: Optional[str]) -> bool:
        chat_id = ctx.chat_identifier()
        if not chat_id:
            await ctx.reply(RESTART_PROMPT)
            return False

        if command != "login" and self._credentials.get(chat_id) is None:
            await ctx.reply(AUTHENTICATE_PROMPT)
            return False
        return True


__all__ = ["AUTHENTICATE_PROMPT", "AuthenticatedAccessGate", "RESTART_PROMPT"]
