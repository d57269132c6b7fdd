"""
Domain models for OAuth credential persistence.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CredentialBundle(BaseModel):
    """Represents the token payload stored for one chat."""

    chat_id: str = Field(..., description="Chat identifier the credential belongs to.")
    access_token: str
    raw_payload: Dict[str, Any] = Field(
        default_factory=dict,
        description="Token endpoint response exactly as Google returned it.",
    )
    stored_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_token_payload(cls, chat_id: str, payload: Dict[str, Any]) -> "CredentialBundle":
        return cls(
            chat_id=chat_id,
            access_token=payload["access_token"],
            raw_payload=payload,
        )


__all__ = ["CredentialBundle"]
