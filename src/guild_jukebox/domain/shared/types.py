"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from guild_jukebox.domain.shared.types import DiscordSnowflake, NonEmptyStr

    class MyModel(BaseModel):
        guild_id: DiscordSnowflake
        name: NonEmptyStr
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

VolumeLevel = Annotated[int, Field(ge=0, le=100)]
"""Player volume in percent: 0 … 100."""

DurationMs = Annotated[int, Field(ge=0)]
"""Track length in milliseconds; 0 means live or unbounded."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

CommandPrefixStr = Annotated[str, Field(min_length=1, max_length=5)]
"""Bot command prefix: 1-5 characters."""


# ── Settings-specific constraints ──────────────────────────────────

ProgressIntervalS = Annotated[float, Field(ge=5.0, le=120.0)]
"""Progress bar refresh interval in seconds: 5 … 120."""

PlayableCacheSize = Annotated[int, Field(ge=16, le=10_000)]
"""Number of backend track handles kept for replay: 16 … 10 000."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""
