"""Closed set of lifecycle events emitted by the audio backend.

Adapters translate library callbacks into these models; the session
controller matches them exhaustively.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from guild_jukebox.domain.music.entities import Track
from guild_jukebox.domain.music.value_objects import TrackEndReason
from guild_jukebox.domain.shared.types import DiscordSnowflake, NonEmptyStr


class BackendEventKind(Enum):
    NODE_READY = "node_ready"
    NODE_ERROR = "node_error"
    NODE_CLOSED = "node_closed"
    NODE_DISCONNECTED = "node_disconnected"
    PLAYER_CREATED = "player_created"
    PLAYER_START = "player_start"
    PLAYER_END = "player_end"
    PLAYER_EXCEPTION = "player_exception"
    PLAYER_RESOLVE_ERROR = "player_resolve_error"


class _BackendEvent(BaseModel):
    model_config = ConfigDict(frozen=True)


# === Node events ===


class NodeReady(_BackendEvent):
    kind: Literal[BackendEventKind.NODE_READY] = BackendEventKind.NODE_READY
    node_id: NonEmptyStr
    resumed: bool = False


class NodeError(_BackendEvent):
    kind: Literal[BackendEventKind.NODE_ERROR] = BackendEventKind.NODE_ERROR
    node_id: NonEmptyStr
    detail: str | None = None


class NodeClosed(_BackendEvent):
    """The node's websocket closed; players on it are gone."""

    kind: Literal[BackendEventKind.NODE_CLOSED] = BackendEventKind.NODE_CLOSED
    node_id: NonEmptyStr
    guild_ids: tuple[DiscordSnowflake, ...] = ()
    detail: str | None = None


class NodeDisconnected(_BackendEvent):
    kind: Literal[BackendEventKind.NODE_DISCONNECTED] = BackendEventKind.NODE_DISCONNECTED
    node_id: NonEmptyStr
    guild_ids: tuple[DiscordSnowflake, ...] = ()


# === Player events ===


class PlayerCreated(_BackendEvent):
    kind: Literal[BackendEventKind.PLAYER_CREATED] = BackendEventKind.PLAYER_CREATED
    guild_id: DiscordSnowflake


class PlayerStart(_BackendEvent):
    kind: Literal[BackendEventKind.PLAYER_START] = BackendEventKind.PLAYER_START
    guild_id: DiscordSnowflake
    track: Track


class PlayerEnd(_BackendEvent):
    kind: Literal[BackendEventKind.PLAYER_END] = BackendEventKind.PLAYER_END
    guild_id: DiscordSnowflake
    track: Track | None = None
    reason: TrackEndReason = TrackEndReason.FINISHED


class PlayerException(_BackendEvent):
    """A playback error; ``fatal`` marks the backend as unusable for this session."""

    kind: Literal[BackendEventKind.PLAYER_EXCEPTION] = BackendEventKind.PLAYER_EXCEPTION
    guild_id: DiscordSnowflake
    error_type: str = "unknown"
    detail: str | None = None
    fatal: bool = False


class PlayerResolveError(_BackendEvent):
    kind: Literal[BackendEventKind.PLAYER_RESOLVE_ERROR] = BackendEventKind.PLAYER_RESOLVE_ERROR
    guild_id: DiscordSnowflake
    track: Track | None = None
    reason: str | None = None


BackendEvent = Annotated[
    NodeReady
    | NodeError
    | NodeClosed
    | NodeDisconnected
    | PlayerCreated
    | PlayerStart
    | PlayerEnd
    | PlayerException
    | PlayerResolveError,
    Field(discriminator="kind"),
]
