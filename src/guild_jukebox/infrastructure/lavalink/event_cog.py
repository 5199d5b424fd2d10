"""Listeners translating wavelink callbacks into backend events for the session controller."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import wavelink
from discord.ext import commands

from guild_jukebox.domain.music.backend_events import (
    BackendEvent,
    NodeClosed,
    NodeDisconnected,
    NodeError,
    NodeReady,
    PlayerEnd,
    PlayerException,
    PlayerStart,
)
from guild_jukebox.domain.music.value_objects import DestroyReason, TrackEndReason
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from guild_jukebox.infrastructure.lavalink.tracks import track_from_playable

if TYPE_CHECKING:
    from ...config.container import Container

logger = logging.getLogger(__name__)

# Lavalink end reasons, as sent by the node
END_REASONS: dict[str, TrackEndReason] = {
    "finished": TrackEndReason.FINISHED,
    "loadfailed": TrackEndReason.LOAD_FAILED,
    "stopped": TrackEndReason.STOPPED,
    "replaced": TrackEndReason.REPLACED,
    "cleanup": TrackEndReason.CLEANUP,
}


def end_reason(raw: str | None) -> TrackEndReason:
    """Map a node end reason; unknown values are treated as a normal finish."""
    return END_REASONS.get((raw or "").replace("_", "").lower(), TrackEndReason.FINISHED)


def _guild_id(player: wavelink.Player | None) -> int | None:
    if player is None or player.guild is None:
        return None
    return player.guild.id


def _node_lost(player: wavelink.Player) -> bool:
    """A track error is only fatal when the player's node is gone."""
    node = player.node
    return node is None or node.status is not wavelink.NodeStatus.CONNECTED


class LavalinkEventCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    async def _dispatch(self, event: BackendEvent) -> None:
        await self.container.session_controller.handle_backend_event(event)

    # ─────────────────────────────────────────────────────────────────
    # Node Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_wavelink_node_ready(self, payload: wavelink.NodeReadyEventPayload) -> None:
        await self._dispatch(NodeReady(node_id=payload.node.identifier, resumed=payload.resumed))

    @commands.Cog.listener()
    async def on_wavelink_node_closed(
        self, node: wavelink.Node, disconnected: list[wavelink.Player]
    ) -> None:
        guild_ids = tuple(gid for gid in (_guild_id(p) for p in disconnected) if gid is not None)
        await self._dispatch(NodeClosed(node_id=node.identifier, guild_ids=guild_ids))

    @commands.Cog.listener()
    async def on_wavelink_node_disconnected(
        self, payload: wavelink.NodeDisconnectedEventPayload
    ) -> None:
        node = payload.node
        await self._dispatch(NodeDisconnected(node_id=node.identifier, guild_ids=tuple(node.players)))

    @commands.Cog.listener()
    async def on_wavelink_websocket_closed(
        self, payload: wavelink.WebsocketClosedEventPayload
    ) -> None:
        player = payload.player
        if player is None:
            return
        await self._dispatch(
            NodeError(
                node_id=player.node.identifier,
                detail=f"Voice websocket closed ({payload.code}): {payload.reason}",
            )
        )

    # ─────────────────────────────────────────────────────────────────
    # Player Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_wavelink_track_start(self, payload: wavelink.TrackStartEventPayload) -> None:
        guild_id = _guild_id(payload.player)
        if guild_id is None:
            return
        track = track_from_playable(payload.original or payload.track)
        await self._dispatch(PlayerStart(guild_id=guild_id, track=track))

    @commands.Cog.listener()
    async def on_wavelink_track_end(self, payload: wavelink.TrackEndEventPayload) -> None:
        guild_id = _guild_id(payload.player)
        if guild_id is None:
            return
        playable = payload.original or payload.track
        await self._dispatch(
            PlayerEnd(
                guild_id=guild_id,
                track=track_from_playable(playable) if playable else None,
                reason=end_reason(payload.reason),
            )
        )

    @commands.Cog.listener()
    async def on_wavelink_track_exception(
        self, payload: wavelink.TrackExceptionEventPayload
    ) -> None:
        guild_id = _guild_id(payload.player)
        if guild_id is None:
            return
        exception = payload.exception or {}
        severity = str(exception.get("severity") or "unknown").lower()
        await self._dispatch(
            PlayerException(
                guild_id=guild_id,
                error_type=severity,
                detail=exception.get("message") or exception.get("cause"),
                fatal=_node_lost(payload.player),
            )
        )

    @commands.Cog.listener()
    async def on_wavelink_track_stuck(self, payload: wavelink.TrackStuckEventPayload) -> None:
        guild_id = _guild_id(payload.player)
        if guild_id is None:
            return
        logger.warning(LogTemplates.PLAYER_STUCK, payload.track.title, guild_id, payload.threshold)
        await self._dispatch(
            PlayerException(
                guild_id=guild_id,
                error_type="stuck",
                detail=ErrorMessages.TRACK_STUCK,
            )
        )

    @commands.Cog.listener()
    async def on_wavelink_inactive_player(self, player: wavelink.Player) -> None:
        guild_id = _guild_id(player)
        if guild_id is None:
            return
        session = self.container.session_controller.get_session(guild_id)
        if session is None:
            await player.disconnect()
            return
        if session.persistent:
            return
        await self.container.session_controller.destroy(guild_id, DestroyReason.QUEUE_ENDED)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(LavalinkEventCog(bot, container))
