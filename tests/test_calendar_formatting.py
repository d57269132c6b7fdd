try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import math

import pytest

from calendar_bot.schemas import CalendarListEntry
from calendar_bot.services.calendar_query import chunk_message, format_calendar_list


def _entry(summary: str, tz: str = "UTC", description: str | None = None) -> CalendarListEntry:
    return CalendarListEntry(summary=summary, timeZone=tz, description=description)


def test_format_numbers_entries_in_order() -> None:
    message = format_calendar_list(
        [_entry("Work", "Europe/Berlin", "Team events"), _entry("Home")]
    )

    assert message == (
        "📅 *Your Calendars*\n\n"
        "*1. Work*\n📝 Team events\n🌍 Europe/Berlin\n\n"
        "*2. Home*\n🌍 UTC\n\n"
    )


def test_long_descriptions_are_truncated() -> None:
    description = "x" * 51

    message = format_calendar_list([_entry("Notes", description=description)])

    assert f"📝 {'x' * 47}...\n" in message


def test_fifty_character_description_is_kept() -> None:
    description = "y" * 50

    message = format_calendar_list([_entry("Notes", description=description)])

    assert f"📝 {description}\n" in message


def test_empty_list_renders_header_only() -> None:
    assert format_calendar_list([]) == "📅 *Your Calendars*\n\n"


@pytest.mark.parametrize("length", [1, 4095, 4096])
def test_short_messages_are_not_split(length) -> None:
    message = "a" * length

    assert chunk_message(message) == [message]


@pytest.mark.parametrize("length", [4097, 8192, 10_000])
def test_long_messages_split_into_fixed_chunks(length) -> None:
    message = "".join(chr(ord("a") + i % 26) for i in range(length))

    chunks = chunk_message(message)

    assert len(chunks) == math.ceil(length / 4096)
    assert "".join(chunks) == message
    assert all(len(chunk) == 4096 for chunk in chunks[:-1])


def _utf16_length(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def test_emoji_count_as_two_units_towards_the_limit() -> None:
    message = format_calendar_list(_entry("C") for _ in range(250))
    assert len(message) <= 4096 < _utf16_length(message)

    chunks = chunk_message(message)

    assert len(chunks) == math.ceil(_utf16_length(message) / 4096)
    assert "".join(chunks) == message
    assert _utf16_length(chunks[0]) == 4096


def test_surrogate_pair_is_not_split_at_the_boundary() -> None:
    message = "a" * 4095 + "📅" + "b"

    assert chunk_message(message) == ["a" * 4095, "📅b"]
