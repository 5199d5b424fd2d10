"""Requests and results exchanged between the command surface and the session controller."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

from ...domain.music.entities import Track
from ...domain.music.value_objects import LoopMode, SessionState
from ...domain.shared.types import NonNegativeInt, VolumeLevel


class OutcomeStatus(Enum):
    """How a command ended, from the invoking user's point of view."""

    OK = "ok"
    WARNING = "warning"  # Valid request, nothing to change
    REJECTED = "rejected"  # Invalid input or state, no mutation


@dataclass
class PlayRequest:
    """A user's request to search for and queue audio."""

    guild_id: int
    text_channel_id: int
    voice_channel_id: int
    query: str
    requester_id: int | None = None
    requester_name: str | None = None

    def __post_init__(self) -> None:
        if self.guild_id <= 0:
            raise ValueError("Guild ID must be positive")
        if self.voice_channel_id <= 0:
            raise ValueError("Voice channel ID must be positive")
        if self.text_channel_id <= 0:
            raise ValueError("Text channel ID must be positive")
        self.query = self.query.strip()
        if not self.query:
            raise ValueError("Query must not be empty")


@dataclass
class CommandOutcome:
    """Result of a session controller command."""

    status: OutcomeStatus
    message: str
    track: Track | None = None

    @property
    def is_success(self) -> bool:
        return self.status == OutcomeStatus.OK

    @property
    def is_rejected(self) -> bool:
        return self.status == OutcomeStatus.REJECTED

    @classmethod
    def ok(cls, message: str, track: Track | None = None) -> CommandOutcome:
        return cls(status=OutcomeStatus.OK, message=message, track=track)

    @classmethod
    def warning(cls, message: str) -> CommandOutcome:
        return cls(status=OutcomeStatus.WARNING, message=message)

    @classmethod
    def rejected(cls, message: str) -> CommandOutcome:
        return cls(status=OutcomeStatus.REJECTED, message=message)


class QueueSnapshot(BaseModel):
    """Read-only view of a guild's queue."""

    current: Track | None
    upcoming: list[Track]
    loop_mode: LoopMode
    persistent: bool
    total_pending_ms: NonNegativeInt

    @property
    def total_tracks(self) -> int:
        return len(self.upcoming)


class NowPlaying(BaseModel):
    """Read-only view of the current track with the backend position."""

    track: Track
    position_ms: NonNegativeInt
    state: SessionState
    paused: bool
    volume: VolumeLevel
    loop_mode: LoopMode
    persistent: bool
    up_next: Track | None = None
