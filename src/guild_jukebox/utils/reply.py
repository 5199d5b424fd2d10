"""Utility functions for formatting Discord messages."""

from __future__ import annotations

import re
from functools import cache

_MINUTES_SECONDS = re.compile(r"(\d+):([0-5]\d)")
_SECONDS_SUFFIX = re.compile(r"(\d+)s")


@cache
def format_duration(seconds: int | float | None) -> str:
    if seconds is None:
        return "–"

    total_seconds = int(seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    secs = total_seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_position(milliseconds: int) -> str:
    """Format a playback position; unlike a duration, zero is a valid value."""
    return format_duration(max(milliseconds, 0) // 1000)


def parse_seek_time(value: str) -> int | None:
    """Parse a seek target into milliseconds.

    Accepts ``M:SS`` (e.g. "1:30") or ``Ns`` (e.g. "90s"). Bare numbers
    are ambiguous between seconds and minutes and are rejected, as is
    anything else. Returns None if the input is invalid.
    """
    value = value.strip().lower()
    if not value:
        return None

    match = _MINUTES_SECONDS.fullmatch(value)
    if match:
        return (int(match.group(1)) * 60 + int(match.group(2))) * 1000

    match = _SECONDS_SUFFIX.fullmatch(value)
    if match:
        return int(match.group(1)) * 1000

    return None


def normalize_error_message(error: BaseException | str | None, fallback: str) -> str:
    """Reduce an error to a short user-facing string.

    Exception objects are never shown raw: only their message is kept,
    and ``fallback`` is used when there is no message at all.
    """
    if error is None:
        return fallback

    if isinstance(error, BaseException):
        text = getattr(error, "message", None) or str(error)
    else:
        text = error

    text = " ".join(str(text).split())
    if not text:
        return fallback
    return truncate(text, 200)


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"
