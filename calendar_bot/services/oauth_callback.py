"""
Complete the OAuth redirect: resolve the chat, exchange the code, store the
credential and let the chat know.
"""

from __future__ import annotations

import logging

from calendar_bot.clients.google_auth import GoogleOAuthClient
from calendar_bot.clients.telegram import TelegramBotClient, TelegramDeliveryError
from calendar_bot.models.oauth import CredentialBundle
from calendar_bot.schemas.auth import OAuthCallbackParams
from calendar_bot.services.credentials import CredentialStore
from calendar_bot.services.oauth_states import OAuthStateStore

logger = logging.getLogger(__name__)

AUTH_SUCCESS_MESSAGE = "Successfully authenticated! You can now use the bot."


class MissingParameterError(Exception):
    """Raised when the redirect lacks ``code`` or ``state``."""


class InvalidOrExpiredStateError(Exception):
    """Raised when ``state`` is unknown, already used or past its TTL."""


class OAuthCallbackHandler:
    """Turn a provider redirect into a stored credential for the originating chat."""

    def __init__(
        self,
        *,
        oauth_client: GoogleOAuthClient,
        states: OAuthStateStore,
        credentials: CredentialStore,
        bot: TelegramBotClient,
    ) -> None:
        self._oauth = oauth_client
        self._states = states
        self._credentials = credentials
        self._bot = bot

    async def handle(self, params: OAuthCallbackParams) -> str:
        """
        Run the callback and return the chat identifier that was authenticated.

        The state is consumed before the exchange, so a replayed redirect fails
        with ``InvalidOrExpiredStateError`` even if the exchange itself fails.
        ``TokenExchangeError`` from the OAuth client propagates unchanged.
        """
        if not params.code or not params.state:
            if params.error:
                logger.info("OAuth consent returned error %s", params.error)
            raise MissingParameterError("Missing code or state")

        chat_id = self._states.consume(params.state)
        if not chat_id:
            logger.info("Rejected OAuth callback with unknown or expired state")
            raise InvalidOrExpiredStateError("Invalid or expired chat")

        token_payload = await self._oauth.exchange_authorization_code(params.code)

        self._credentials.save(CredentialBundle.from_token_payload(chat_id, token_payload))
        logger.info("Stored Google credential for chat %s", chat_id)

        try:
            await self._bot.send_message(chat_id, AUTH_SUCCESS_MESSAGE)
        except TelegramDeliveryError as exc:
            logger.warning("Could not notify chat %s of login: %s", chat_id, exc)

        return chat_id


__all__ = [
    "AUTH_SUCCESS_MESSAGE",
    "InvalidOrExpiredStateError",
    "MissingParameterError",
    "OAuthCallbackHandler",
]
