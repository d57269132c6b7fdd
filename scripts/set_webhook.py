"""Register the bot's webhook URL with Telegram.

Usage::

    python -m scripts.set_webhook                 # uses TELEGRAM_WEBHOOK_URL
    python -m scripts.set_webhook --url https://bot.example.com/api/telegram/webhook
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from calendar_bot.clients.telegram import TelegramBotClient, TelegramDeliveryError
from calendar_bot.core.config import get_settings
from calendar_bot.core.logging import configure_logging

logger = logging.getLogger("set_webhook")


async def register(client: TelegramBotClient, url: str, secret: str | None) -> bool:
    return await client.set_webhook(url, secret_token=secret)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Point Telegram at this bot's webhook.")
    parser.add_argument("--url", help="Override TELEGRAM_WEBHOOK_URL.")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)

    url = args.url or (str(settings.telegram.webhook_url) if settings.telegram.webhook_url else None)
    if not url:
        logger.error("No webhook URL given; pass --url or set TELEGRAM_WEBHOOK_URL.")
        return 2

    client = TelegramBotClient(settings.telegram.bot_token, timeout=settings.http_timeout_seconds)
    try:
        asyncio.run(register(client, url, settings.telegram.webhook_secret))
    except TelegramDeliveryError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Webhook registered at %s", url)
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
