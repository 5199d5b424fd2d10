"""Date/time helpers.

- Always operate on timezone-aware UTC datetimes.
- Provide the string formats used for Discord output.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Preferred replacement for `datetime.now(UTC)`.

    Returns a timezone-aware datetime in UTC.
    """
    return datetime.now(UTC)


def discord_timestamp(dt: datetime, style: str = "R") -> str:
    """Discord timestamp markup.

    Styles: https://discord.com/developers/docs/reference#message-formatting-timestamp-styles
    Common: 'R' (relative), 'f' (short datetime).
    """
    if dt.tzinfo is None:
        raise ValueError("discord_timestamp requires a timezone-aware datetime")
    return f"<t:{int(dt.timestamp())}:{style}>"


def format_ms(milliseconds: int | None) -> str:
    """Format a millisecond duration as M:SS or H:MM:SS (``N/A`` when unknown)."""
    if not milliseconds or milliseconds < 0:
        return "N/A"

    total_seconds = milliseconds // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"
