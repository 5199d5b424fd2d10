"""Core domain entities for the music bounded context."""

from __future__ import annotations

import random
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from guild_jukebox.domain.music.value_objects import (
    ControlMessageRef,
    LoopMode,
    SessionState,
)
from guild_jukebox.domain.shared.datetime_utils import format_ms, utcnow
from guild_jukebox.domain.shared.exceptions import (
    InvalidOperationError,
    QueuePositionOutOfRangeError,
    SessionDestroyedError,
)
from guild_jukebox.domain.shared.messages import ErrorMessages
from guild_jukebox.domain.shared.types import (
    DiscordSnowflake,
    DurationMs,
    NonEmptyStr,
    TrackTitleStr,
    UtcDatetimeField,
    VolumeLevel,
)


class Track(BaseModel):
    """Immutable value object representing a resolved, playable track."""

    model_config = ConfigDict(frozen=True, strict=True)

    title: TrackTitleStr
    uri: str = ""
    duration_ms: DurationMs = 0
    author: str = ""
    thumbnail_url: str | None = None
    identifier: str = ""
    is_stream: bool = False

    # Opaque backend handle used to replay the track
    encoded: str = ""

    # Request metadata (set when resolved for a user)
    requester_id: DiscordSnowflake | None = None
    requester_name: NonEmptyStr | None = None

    @property
    def is_bounded(self) -> bool:
        """Whether the track has a known, finite length."""
        return not self.is_stream and self.duration_ms > 0

    @property
    def is_seekable(self) -> bool:
        return self.is_bounded

    @property
    def duration_formatted(self) -> str:
        if not self.is_bounded:
            return "LIVE" if self.is_stream else "N/A"
        return format_ms(self.duration_ms)

    def same_source_as(self, other: Track | None) -> bool:
        """Compare by source URI, falling back to the backend identifier."""
        if other is None:
            return False
        if self.uri and other.uri:
            return self.uri == other.uri
        return bool(self.identifier) and self.identifier == other.identifier


class TrackQueue(BaseModel):
    """Pending tracks plus the track handed to the backend and the last finished one.

    ``current`` is never part of ``pending``. Only :meth:`next` (and the
    loop-aware :meth:`PlaybackSession.advance`) move ``current``.
    """

    pending: list[Track] = Field(default_factory=list)
    current: Track | None = None
    previous: Track | None = None

    def __len__(self) -> int:
        return len(self.pending)

    @property
    def is_empty(self) -> bool:
        return not self.pending

    @property
    def total_pending_ms(self) -> int:
        return sum(t.duration_ms for t in self.pending if t.is_bounded)

    def add(self, tracks: Track | Iterable[Track]) -> int:
        """Append one or many tracks and return the 1-based position of the first one added."""
        first_position = len(self.pending) + 1
        if isinstance(tracks, Track):
            self.pending.append(tracks)
        else:
            self.pending.extend(tracks)
        return first_position

    def next(self) -> Track | None:
        """Pop the head of the pending sequence into ``current``.

        The old ``current`` becomes ``previous``. Returns None (and clears
        ``current``) when nothing is pending.
        """
        if self.current is not None:
            self.previous = self.current

        if not self.pending:
            self.current = None
            return None

        self.current = self.pending.pop(0)
        return self.current

    def peek(self) -> Track | None:
        return self.pending[0] if self.pending else None

    def remove_at(self, position: int) -> Track:
        """Remove the pending track at a 1-based ``position``."""
        if position < 1 or position > len(self.pending):
            raise QueuePositionOutOfRangeError(position, len(self.pending))
        return self.pending.pop(position - 1)

    def shuffle(self, rng: random.Random | None = None) -> None:
        """Shuffle pending tracks in place; ``current`` is untouched."""
        if len(self.pending) < 2:
            return
        (rng or random).shuffle(self.pending)

    def clear(self) -> int:
        """Drop every pending track and return how many were removed."""
        count = len(self.pending)
        self.pending.clear()
        return count


class PlaybackSession(BaseModel):
    """Aggregate root for one guild's voice connection, queue and playback flags."""

    guild_id: DiscordSnowflake
    voice_channel_id: DiscordSnowflake
    text_channel_id: DiscordSnowflake
    queue: TrackQueue = Field(default_factory=TrackQueue)
    state: SessionState = SessionState.IDLE
    paused: bool = False
    volume: VolumeLevel = 100
    loop_mode: LoopMode = LoopMode.NONE
    persistent: bool = False
    control_message: ControlMessageRef | None = None
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    # One-shot flag consumed by the next track-end event
    skip_requested: bool = False
    destroyed: bool = False

    @property
    def current(self) -> Track | None:
        return self.queue.current

    @property
    def is_idle(self) -> bool:
        return self.queue.current is None

    @property
    def ticker_should_run(self) -> bool:
        """Progress display runs only for a bounded track that is playing unpaused."""
        current = self.queue.current
        return (
            not self.destroyed
            and self.state == SessionState.PLAYING
            and not self.paused
            and current is not None
            and current.is_bounded
        )

    def ensure_routable(self) -> None:
        """Reject commands that race against (or follow) teardown."""
        if self.destroyed:
            raise SessionDestroyedError(self.guild_id)

    def transition_to(self, new_state: SessionState) -> bool:
        """Move to ``new_state``; returns False when already there."""
        if new_state == self.state:
            return False
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=ErrorMessages.ILLEGAL_TRANSITION.format(
                    current=self.state.value, target=new_state.value
                ),
            )
        self.state = new_state
        return True

    def mark_destroyed(self) -> None:
        """Make the session non-routable. Synchronous by contract."""
        self.destroyed = True
        self.skip_requested = False
        if self.state != SessionState.ENDED:
            self.state = SessionState.ENDED

    def enqueue(self, tracks: Track | Iterable[Track]) -> int:
        return self.queue.add(tracks)

    def advance(self, *, skipped: bool = False) -> Track | None:
        """Pick the next track according to the loop mode.

        ``TRACK`` replays ``current`` unless the user skipped it. ``QUEUE``
        re-appends the finished track before advancing.
        """
        current = self.queue.current
        if current is not None and not skipped and self.loop_mode == LoopMode.TRACK:
            return current

        if current is not None and self.loop_mode == LoopMode.QUEUE:
            self.queue.add(current)

        return self.queue.next()

    def set_paused(self, paused: bool) -> None:
        self.paused = paused
        if self.queue.current is not None and self.state.is_active:
            self.transition_to(SessionState.PAUSED if paused else SessionState.PLAYING)

    def cycle_loop(self) -> LoopMode:
        """Advance none -> track -> queue -> none and return the new mode."""
        self.loop_mode = self.loop_mode.next_mode()
        return self.loop_mode

    def toggle_persistent(self) -> bool:
        self.persistent = not self.persistent
        return self.persistent
