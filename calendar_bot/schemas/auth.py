"""Schemas related to OAuth flows."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class OAuthCallbackParams(BaseModel):
    """Query parameters Google appends to the redirect URI."""

    code: Optional[str] = Field(None, description="Authorization code returned by Google OAuth.")
    state: Optional[str] = Field(None, description="Opaque state token issued by /login.")
    error: Optional[str] = Field(None, description="Set by Google when consent was denied.")


__all__ = ["OAuthCallbackParams"]
