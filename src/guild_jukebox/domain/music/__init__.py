"""
Music Bounded Context

Domain logic for tracks, queues, sessions and audio backend events.
"""

from guild_jukebox.domain.music.entities import PlaybackSession, Track, TrackQueue
from guild_jukebox.domain.music.registry import SessionRegistry
from guild_jukebox.domain.music.value_objects import (
    ControlMessageRef,
    DestroyReason,
    LoopMode,
    SessionState,
    TrackEndReason,
)

__all__ = [
    # Entities
    "Track",
    "TrackQueue",
    "PlaybackSession",
    # Value Objects
    "ControlMessageRef",
    "DestroyReason",
    "LoopMode",
    "SessionState",
    "TrackEndReason",
    # Registry
    "SessionRegistry",
]
