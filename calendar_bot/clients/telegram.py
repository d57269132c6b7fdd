"""Minimal Telegram Bot API client for outbound messages."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramDeliveryError(Exception):
    """Raised when the Bot API refuses or fails to deliver a call."""


class TelegramBotClient:
    """Call Bot API methods with the configured bot token."""

    def __init__(
        self,
        bot_token: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._bot_token = bot_token
        self._timeout = timeout
        self._transport = transport

    async def _call(self, method: str, payload: Dict[str, Any]) -> Any:
        url = f"{TELEGRAM_API_BASE}/bot{self._bot_token}/{method}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(url, json=payload)
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            # Never echo the URL, it embeds the bot token.
            raise TelegramDeliveryError(
                f"Telegram {method} failed: {type(exc).__name__}"
            ) from exc

        if not isinstance(body, dict):
            body = {}
        if not resp.is_success or not body.get("ok"):
            description = body.get("description") or f"HTTP {resp.status_code}"
            raise TelegramDeliveryError(f"Telegram {method} failed: {description}")
        return body.get("result")

    async def send_message(
        self,
        chat_id: str,
        text: str,
        *,
        parse_mode: Optional[str] = None,
        reply_markup: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode
        if reply_markup:
            payload["reply_markup"] = reply_markup
        return await self._call("sendMessage", payload)

    async def set_webhook(self, url: str, *, secret_token: Optional[str] = None) -> bool:
        payload: Dict[str, Any] = {"url": url, "allowed_updates": ["message"]}
        if secret_token:
            payload["secret_token"] = secret_token
        return bool(await self._call("setWebhook", payload))


__all__ = ["TELEGRAM_API_BASE", "TelegramBotClient", "TelegramDeliveryError"]
