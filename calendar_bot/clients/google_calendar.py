"""Thin wrapper over the Google Calendar REST API."""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic import ValidationError

from calendar_bot.schemas.calendar import CalendarList, CalendarListEntry


class UnauthorizedResourceError(Exception):
    """Raised when Google rejects the stored access token."""


class TransientQueryError(Exception):
    """Raised for any other failure while querying the calendar API."""


class GoogleCalendarClient:
    """List calendars for an access token using bearer authentication."""

    CALENDAR_LIST_URL = "https://www.googleapis.com/calendar/v3/users/me/calendarList"

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def list_calendars(self, access_token: str) -> list[CalendarListEntry]:
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Cache-Control": "no-cache",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(self.CALENDAR_LIST_URL, headers=headers)
        except httpx.HTTPError as exc:
            raise TransientQueryError(f"Google Calendar request failed: {exc}") from exc

        if response.status_code == 401:
            raise UnauthorizedResourceError(response.text)
        if not response.is_success:
            raise TransientQueryError(
                f"Unexpected status {response.status_code} from calendar list"
            )

        try:
            calendar_list = CalendarList.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TransientQueryError("Malformed calendar list payload.") from exc
        return calendar_list.items


__all__ = [
    "GoogleCalendarClient",
    "TransientQueryError",
    "UnauthorizedResourceError",
]
