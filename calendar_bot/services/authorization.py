"""Start the Google OAuth flow from a chat."""

from __future__ import annotations

import logging
import uuid

from calendar_bot.clients.google_auth import GoogleOAuthClient
from calendar_bot.services.chat import ChatContext
from calendar_bot.services.oauth_states import OAuthStateStore

logger = logging.getLogger(__name__)

LOGIN_PROMPT = "Please authenticate with Google to use this bot:"
LOGIN_BUTTON_TEXT = "Login with Google"


class AuthorizationInitiator:
    """Issue a fresh state token and send the consent link to the chat."""

    def __init__(self, oauth_client: GoogleOAuthClient, states: OAuthStateStore) -> None:
        self._oauth = oauth_client
        self._states = states

    async def start(self, ctx: ChatContext) -> str:
        """
        Remember ``state -> chat`` and reply with a login button.

        Earlier pending states for the same chat are left alone; each expires
        or is consumed independently. Returns the issued state token.
        """
        chat_id = ctx.chat_identifier()
        if chat_id is None:
            raise ValueError("Cannot start OAuth without a chat identifier.")

        state = uuid.uuid4().hex
        self._states.remember(state, chat_id)
        authorization_url = self._oauth.build_authorization_url(state=state)
        logger.info("Issued OAuth state for chat %s", chat_id)

        await ctx.reply(
            LOGIN_PROMPT,
            reply_markup={
                "inline_keyboard": [[{"text": LOGIN_BUTTON_TEXT, "url": authorization_url}]]
            },
        )
        return state


__all__ = ["AuthorizationInitiator", "LOGIN_BUTTON_TEXT", "LOGIN_PROMPT"]
