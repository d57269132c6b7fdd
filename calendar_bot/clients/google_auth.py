"""
Google OAuth utilities.

These helpers build the consent URL and perform the one-shot exchange of an
authorization code for a token payload.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from calendar_bot.core.config import GoogleSettings, OAuthSettings


class TokenExchangeError(Exception):
    """Raised when the token endpoint rejects the code or cannot be reached."""


class GoogleOAuthClient:
    """Build Google authorization URLs and exchange authorization codes."""

    AUTH_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"

    def __init__(
        self,
        google_settings: GoogleSettings,
        oauth_settings: OAuthSettings,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._google = google_settings
        self._oauth = oauth_settings
        self._timeout = timeout
        self._transport = transport

    def build_authorization_url(self, state: str, access_type: str = "offline") -> str:
        """Construct the Google OAuth consent URL."""
        params = {
            "client_id": self._google.client_id,
            "redirect_uri": str(self._google.redirect_uri),
            "response_type": "code",
            "scope": " ".join(self._oauth.scopes),
            "state": state,
            "access_type": access_type,
        }
        return f"{self.AUTH_BASE_URL}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for tokens.

        Returns the provider's JSON payload, which always carries ``access_token``.
        The code is single-use upstream, so failures are never retried.
        """
        payload = {
            "code": code,
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret,
            "redirect_uri": str(self._google.redirect_uri),
            "grant_type": "authorization_code",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self.TOKEN_URL, data=payload)
        except httpx.HTTPError as exc:
            raise TokenExchangeError(f"Token endpoint unreachable: {exc}") from exc

        if not response.is_success:
            raise TokenExchangeError(response.text)

        try:
            token_payload = response.json()
        except ValueError as exc:
            raise TokenExchangeError("Token endpoint returned non-JSON body.") from exc

        if not isinstance(token_payload, dict) or not token_payload.get("access_token"):
            raise TokenExchangeError("Incomplete token payload returned from Google.")

        return token_payload


__all__ = ["GoogleOAuthClient", "TokenExchangeError"]
