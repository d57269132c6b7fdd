"""
Pydantic models for the Google Calendar list resource.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CalendarListEntry(BaseModel):
    """Subset of a calendarList entry rendered back to the chat."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    summary: Optional[str] = None
    description: Optional[str] = None
    time_zone: Optional[str] = Field(None, alias="timeZone")


class CalendarList(BaseModel):
    """Response body of ``users/me/calendarList``."""

    model_config = ConfigDict(extra="ignore")

    items: List[CalendarListEntry] = Field(default_factory=list)


__all__ = ["CalendarList", "CalendarListEntry"]
