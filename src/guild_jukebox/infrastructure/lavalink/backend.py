"""Lavalink adapters implementing AudioBackend and TrackSearch on top of wavelink."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import discord
import wavelink

from guild_jukebox.application.interfaces.audio_backend import AudioBackend
from guild_jukebox.application.interfaces.track_search import SearchResult, TrackSearch
from guild_jukebox.domain.music.backend_events import (
    BackendEvent,
    PlayerCreated,
    PlayerEnd,
    PlayerResolveError,
)
from guild_jukebox.domain.music.value_objects import TrackEndReason
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from guild_jukebox.infrastructure.lavalink.tracks import PlayableCache, track_from_playable

if TYPE_CHECKING:
    from ...config.settings import LavalinkSettings
    from ...domain.music.entities import Track

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: float = 10.0

BackendEventHandler = Callable[[BackendEvent], Awaitable[None]]


def _is_url(query: str) -> bool:
    return query.startswith(("http://", "https://"))


class WavelinkAudioBackend(AudioBackend):
    """One ``wavelink.Player`` per guild, created on connect.

    wavelink's own queue and autoplay are disabled; the session controller
    decides what plays next.
    """

    def __init__(
        self,
        bot: discord.Client,
        settings: LavalinkSettings,
        cache: PlayableCache,
    ) -> None:
        self._bot = bot
        self._settings = settings
        self._cache = cache
        self._on_event: BackendEventHandler | None = None
        self._pending: set[asyncio.Task[None]] = set()

    def set_event_handler(self, handler: BackendEventHandler) -> None:
        self._on_event = handler

    def _emit(self, event: BackendEvent) -> None:
        """Hand an event to the controller on its own task.

        Commands call the backend while holding the guild lock, so events
        raised here must queue behind that lock rather than re-enter it.
        """
        if self._on_event is None:
            return
        task = asyncio.create_task(self._on_event(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    # ── Node pool ───────────────────────────────────────────────────

    async def connect_nodes(self) -> None:
        if not self._settings.nodes:
            raise RuntimeError(ErrorMessages.NO_LAVALINK_NODES)

        nodes = [
            wavelink.Node(
                uri=node.uri,
                password=node.password.get_secret_value(),
                identifier=node.identifier,
            )
            for node in self._settings.nodes
        ]
        await wavelink.Pool.connect(client=self._bot, nodes=nodes, cache_capacity=None)

    async def close_nodes(self) -> None:
        await wavelink.Pool.close()
        self._cache.clear()

    # ── Lookup ──────────────────────────────────────────────────────

    def _get_player(self, guild_id: int) -> wavelink.Player | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, wavelink.Player) else None

    def _require_player(self, guild_id: int) -> wavelink.Player:
        player = self._get_player(guild_id)
        if player is None:
            raise RuntimeError(LogTemplates.BACKEND_NO_PLAYER % guild_id)
        return player

    def _get_voice_channel(
        self, guild_id: int, channel_id: int
    ) -> discord.VoiceChannel | discord.StageChannel | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            return None

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            return None
        return channel

    def is_connected(self, guild_id: int) -> bool:
        player = self._get_player(guild_id)
        return player is not None and player.connected

    def position(self, guild_id: int) -> int | None:
        player = self._get_player(guild_id)
        if player is None or player.current is None:
            return None
        return int(player.position)

    # ── Commands ────────────────────────────────────────────────────

    async def connect(self, guild_id: int, voice_channel_id: int) -> bool:
        existing = self._get_player(guild_id)
        if existing is not None:
            return await self.move(guild_id, voice_channel_id)

        channel = self._get_voice_channel(guild_id, voice_channel_id)
        if channel is None:
            return False

        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                player = await channel.connect(cls=wavelink.Player, self_deaf=True)
        except (TimeoutError, wavelink.ChannelTimeoutException):
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, voice_channel_id)
            return False
        except wavelink.InvalidChannelStateException:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, voice_channel_id)
            return False
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False

        player.autoplay = wavelink.AutoPlayMode.disabled
        player.inactive_timeout = self._settings.inactive_timeout_seconds or None
        logger.info(LogTemplates.BACKEND_CONNECTED, voice_channel_id, guild_id)
        self._emit(PlayerCreated(guild_id=guild_id))
        return True

    async def move(self, guild_id: int, voice_channel_id: int) -> bool:
        player = self._get_player(guild_id)
        if player is None:
            return await self.connect(guild_id, voice_channel_id)

        if player.channel is not None and player.channel.id == voice_channel_id:
            return True

        channel = self._get_voice_channel(guild_id, voice_channel_id)
        if channel is None:
            return False

        try:
            await player.move_to(channel)
        except (TimeoutError, wavelink.ChannelTimeoutException, wavelink.InvalidChannelStateException) as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False

        logger.info(LogTemplates.BACKEND_MOVED, voice_channel_id, guild_id)
        return True

    async def play(self, guild_id: int, track: Track) -> None:
        player = self._require_player(guild_id)

        if track.encoded:
            playable: wavelink.Playable | None = self._cache.playable_for(track)
        else:
            playable = await self._lookup(track)

        if playable is None:
            # Report like the node would for a track that could not be loaded
            self._emit(PlayerResolveError(guild_id=guild_id, track=track))
            self._emit(PlayerEnd(guild_id=guild_id, track=track, reason=TrackEndReason.LOAD_FAILED))
            return

        await player.play(playable, paused=False)

    async def _lookup(self, track: Track) -> wavelink.Playable | None:
        query = track.uri or track.title
        try:
            results = await wavelink.Playable.search(query)
        except wavelink.LavalinkLoadException as e:
            logger.warning(LogTemplates.SEARCH_FAILED, query, e)
            return None

        tracks = results.tracks if isinstance(results, wavelink.Playlist) else results
        if not tracks:
            return None
        self._cache.put(tracks[0])
        return tracks[0]

    async def pause(self, guild_id: int, paused: bool) -> None:
        await self._require_player(guild_id).pause(paused)

    async def skip(self, guild_id: int) -> None:
        await self._require_player(guild_id).skip(force=True)

    async def seek(self, guild_id: int, position_ms: int) -> None:
        await self._require_player(guild_id).seek(position_ms)

    async def set_volume(self, guild_id: int, level: int) -> None:
        await self._require_player(guild_id).set_volume(level)

    async def destroy(self, guild_id: int) -> None:
        player = self._get_player(guild_id)
        if player is None:
            logger.debug(LogTemplates.BACKEND_NO_PLAYER, guild_id)
            return
        await player.disconnect()


class WavelinkTrackSearch(TrackSearch):
    """Resolves URLs directly and free text through the configured search source."""

    def __init__(self, settings: LavalinkSettings, cache: PlayableCache) -> None:
        self._settings = settings
        self._cache = cache

    async def search(
        self,
        query: str,
        *,
        requester_id: int | None = None,
        requester_name: str | None = None,
    ) -> SearchResult:
        query = query.strip()
        if _is_url(query):
            results = await wavelink.Playable.search(query)
        else:
            results = await wavelink.Playable.search(query, source=self._settings.search_source)

        playlist_name: str | None = None
        if isinstance(results, wavelink.Playlist):
            playlist_name = results.name
            playables = list(results.tracks)
        else:
            playables = list(results)

        tracks: list[Track] = []
        for playable in playables:
            self._cache.put(playable)
            tracks.append(
                track_from_playable(
                    playable,
                    requester_id=requester_id,
                    requester_name=requester_name,
                )
            )

        return SearchResult(tracks=tracks, playlist_name=playlist_name)
