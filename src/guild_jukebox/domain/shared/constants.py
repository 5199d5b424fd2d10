"""Centralized constants shared by the UI and the playback core."""

from __future__ import annotations


class UIConstants:
    """Control panel and listing presentation values."""

    TITLE_TRUNCATION = 80
    ARTIST_TRUNCATION = 64
    PROGRESS_BAR_WIDTH = 16
    PROGRESS_FILLED = "▬"
    PROGRESS_EMPTY = "─"
    PROGRESS_MARKER = "🔘"
    COLOR_NOW_PLAYING = 0x0099FF
    COLOR_ENDED = 0xFF0000
    COLOR_WARNING = 0xFFA500
    COLOR_SUCCESS = 0x00FF00


class DiscordErrorCodes:
    """JSON error codes returned by the Discord HTTP API."""

    BULK_DELETE_TOO_OLD = 50034


class TimeConstants:
    """Delays and limits measured in seconds."""

    CLEANUP_DELAY_SECONDS = 0.5
    BULK_FETCH_LIMIT = 100
    SHUTDOWN_TIMEOUT_SECONDS = 30.0
