"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from guild_jukebox.domain.shared.validators import validate_discord_snowflake


@dataclass(frozen=True)
class ControlMessageRef:
    """Address of the interactive now-playing message owned by the renderer."""

    channel_id: int
    message_id: int

    def __post_init__(self) -> None:
        validate_discord_snowflake(self.channel_id)
        validate_discord_snowflake(self.message_id)


class SessionState(Enum):
    """Per-guild session state with enforced transitions.

    State transitions:
    - IDLE -> PLAYING (track started)
    - PLAYING <-> PAUSED (pause / resume)
    - PLAYING | PAUSED -> IDLE (queue drained while 24/7 is on)
    - Any non-terminal -> ENDED (session destroyed)
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"

    def can_transition_to(self, target: SessionState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            SessionState.IDLE: {SessionState.PLAYING, SessionState.ENDED},
            SessionState.PLAYING: {
                SessionState.PAUSED,
                SessionState.IDLE,
                SessionState.ENDED,
            },
            SessionState.PAUSED: {
                SessionState.PLAYING,
                SessionState.IDLE,
                SessionState.ENDED,
            },
            SessionState.ENDED: set(),
        }
        return target in valid_transitions[self]

    @property
    def is_active(self) -> bool:
        return self in {SessionState.PLAYING, SessionState.PAUSED}

    @property
    def is_terminal(self) -> bool:
        return self == SessionState.ENDED


class LoopMode(Enum):
    """Loop mode settings for queue playback."""

    NONE = "none"
    TRACK = "track"  # Replay the current track
    QUEUE = "queue"  # Re-append finished tracks

    def next_mode(self) -> LoopMode:
        """Cycle to next loop mode."""
        modes = list(LoopMode)
        current_index = modes.index(self)
        next_index = (current_index + 1) % len(modes)
        return modes[next_index]

    @property
    def label(self) -> str:
        return "Off" if self == LoopMode.NONE else self.value.capitalize()


class TrackEndReason(Enum):
    """Why the audio backend reports a track as ended."""

    FINISHED = "finished"
    LOAD_FAILED = "load_failed"
    STOPPED = "stopped"
    REPLACED = "replaced"
    CLEANUP = "cleanup"

    @property
    def may_start_next(self) -> bool:
        """Whether the queue should advance after this end."""
        return self in {TrackEndReason.FINISHED, TrackEndReason.LOAD_FAILED, TrackEndReason.STOPPED}


class DestroyReason(Enum):
    """Reasons a session can be destroyed."""

    QUEUE_ENDED = "queue_ended"
    STOPPED = "stopped"
    SKIPPED_LAST = "skipped_last"
    FATAL_ERROR = "fatal_error"
    BACKEND_LOST = "backend_lost"
    GUILD_REMOVED = "guild_removed"

    @property
    def description(self) -> str:
        return _DESTROY_DESCRIPTIONS[self]


_DESTROY_DESCRIPTIONS = {
    DestroyReason.QUEUE_ENDED: "Queue ended",
    DestroyReason.STOPPED: "Music was manually stopped",
    DestroyReason.SKIPPED_LAST: "Last track was skipped",
    DestroyReason.FATAL_ERROR: "Unrecoverable playback error",
    DestroyReason.BACKEND_LOST: "Audio node connection lost",
    DestroyReason.GUILD_REMOVED: "Bot was removed from the server",
}
