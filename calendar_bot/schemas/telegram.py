"""
Pydantic models for the Telegram Bot API payloads the webhook consumes.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class TelegramMessage(BaseModel):
    """Subset of Telegram message fields used for command dispatch."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    message_id: int
    date: int
    text: Optional[str] = None
    chat: Optional[Dict[str, Any]] = None
    from_: Optional[Dict[str, Any]] = Field(None, alias="from")


class TelegramUpdate(BaseModel):
    """Minimal Telegram update payload we care about."""

    model_config = ConfigDict(extra="ignore")

    update_id: int
    message: Optional[TelegramMessage] = None


__all__ = ["TelegramMessage", "TelegramUpdate"]
