"""
FastAPI routes for the calendar bot.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from calendar_bot.clients.google_auth import TokenExchangeError
from calendar_bot.clients.telegram import TelegramBotClient, TelegramDeliveryError
from calendar_bot.dependencies import (
    get_bot_request_handler,
    get_oauth_callback_handler,
    get_telegram_bot_client,
    require_webhook_secret,
)
from calendar_bot.schemas import OAuthCallbackParams, TelegramUpdate
from calendar_bot.services import (
    BotRequestHandler,
    InvalidOrExpiredStateError,
    MissingParameterError,
    OAuthCallbackHandler,
    TelegramChatContext,
)

router = APIRouter()
logger = logging.getLogger(__name__)

AUTH_SUCCESS_PAGE = "Authentication successful! You can close this window."


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get("/auth/callback/google", response_class=PlainTextResponse)
async def handle_google_oauth_callback(
    handler: Annotated[OAuthCallbackHandler, Depends(get_oauth_callback_handler)],
    code: Optional[str] = Query(None, description="Authorization code returned by Google."),
    state: Optional[str] = Query(None, description="OAuth state token issued by /login."),
    error: Optional[str] = Query(None, description="Consent error reported by Google."),
) -> PlainTextResponse:
    """Finish the OAuth flow started by /login and tell the chat about it."""
    params = OAuthCallbackParams(code=code, state=state, error=error)
    try:
        await handler.handle(params)
    except (MissingParameterError, InvalidOrExpiredStateError) as exc:
        return PlainTextResponse(str(exc), status_code=HTTPStatus.BAD_REQUEST)
    except TokenExchangeError as exc:
        logger.warning("Authorization code exchange failed: %s", exc)
        raise HTTPException(
            status_code=HTTPStatus.BAD_GATEWAY,
            detail="Failed to exchange authorization code.",
        ) from exc

    return PlainTextResponse(AUTH_SUCCESS_PAGE)


@router.post(
    "/telegram/webhook",
    status_code=HTTPStatus.OK,
    dependencies=[Depends(require_webhook_secret)],
)
async def telegram_webhook(
    update: TelegramUpdate,
    bot: Annotated[TelegramBotClient, Depends(get_telegram_bot_client)],
    handler: Annotated[BotRequestHandler, Depends(get_bot_request_handler)],
) -> dict:
    """Handle incoming Telegram messages and run the command pipeline."""
    message = update.message
    if not message:
        return {"status": "ignored"}

    ctx = TelegramChatContext(bot, message.chat)
    try:
        stage = await handler.handle(ctx, message.text)
    except TelegramDeliveryError as exc:
        # A non-2xx answer makes Telegram redeliver the update and rerun the command.
        logger.warning(
            "Telegram reply for update %s was not delivered: %s", update.update_id, exc
        )
        return {"status": "undelivered"}
    return {"status": "ok", "handled_by": stage}
