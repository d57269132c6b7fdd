"""
FastAPI application entrypoint for the calendar bot.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from calendar_bot.api.routes import router as api_router
from calendar_bot.clients.kv_store import StoreUnavailableError
from calendar_bot.core.config import get_settings
from calendar_bot.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def _store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error("Storage unavailable while serving %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=HTTPStatus.SERVICE_UNAVAILABLE,
        content={"detail": "Storage backend unavailable."},
    )


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Google Calendar Telegram Bot",
        version="0.1.0",
        description="Telegram webhook and Google OAuth callback for calendar access.",
    )
    app.include_router(api_router, prefix="/api")
    app.add_exception_handler(StoreUnavailableError, _store_unavailable_handler)
    return app


app = create_app()

__all__ = ["app", "create_app"]
