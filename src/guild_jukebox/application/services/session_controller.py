"""Session Controller - the per-guild playback state machine.

Reconciles user commands and asynchronous audio backend events against
one :class:`PlaybackSession` per guild. Every mutation for a guild runs
under that guild's FIFO lock, so a track-start is never handled before
the preceding track-end has finished.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, assert_never

from ...domain.music.backend_events import (
    BackendEvent,
    NodeClosed,
    NodeDisconnected,
    NodeError,
    NodeReady,
    PlayerCreated,
    PlayerEnd,
    PlayerException,
    PlayerResolveError,
    PlayerStart,
)
from ...domain.music.entities import PlaybackSession, Track
from ...domain.music.value_objects import (
    DestroyReason,
    LoopMode,
    SessionState,
    TrackEndReason,
)
from ...domain.shared.events import (
    BackendNodeStatusChanged,
    DomainEvent,
    SessionDestroyed,
    TrackStartedPlaying,
)
from ...domain.shared.exceptions import (
    QueuePositionOutOfRangeError,
    SeekError,
    SessionDestroyedError,
)
from ...domain.shared.messages import (
    DiscordUIMessages,
    EmojiConstants,
    ErrorMessages,
    LogTemplates,
)
from ...domain.shared.types import DiscordSnowflake
from ...utils.reply import format_position, normalize_error_message, parse_seek_time
from .outcomes import CommandOutcome, NowPlaying, PlayRequest, QueueSnapshot

if TYPE_CHECKING:
    from ...domain.music.registry import SessionRegistry
    from ...domain.shared.events import EventBus
    from ..interfaces.audio_backend import AudioBackend
    from ..interfaces.control_surface import ControlSurface
    from ..interfaces.track_search import SearchResult, TrackSearch
    from .progress_ticker import ProgressTicker

logger = logging.getLogger(__name__)

SessionAction = Callable[[PlaybackSession], Awaitable[CommandOutcome]]


class SessionController:
    """Owns session lifecycle, end-of-queue policy and control message sync."""

    def __init__(
        self,
        *,
        registry: SessionRegistry,
        audio_backend: AudioBackend,
        track_search: TrackSearch,
        control_surface: ControlSurface,
        progress_ticker: ProgressTicker,
        event_bus: EventBus,
        default_volume: int = 100,
        clear_messages_on_destroy: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self._registry = registry
        self._backend = audio_backend
        self._search = track_search
        self._surface = control_surface
        self._ticker = progress_ticker
        self._event_bus = event_bus
        self._default_volume = default_volume
        self._clear_messages_on_destroy = clear_messages_on_destroy
        self._rng = rng

        self._guild_locks: dict[int, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._background: set[asyncio.Task[None]] = set()

        self._backend.set_event_handler(self.handle_backend_event)

    # ── Lookup ──────────────────────────────────────────────────────

    def get_session(self, guild_id: DiscordSnowflake) -> PlaybackSession | None:
        return self._registry.get(guild_id)

    def queue_snapshot(self, guild_id: DiscordSnowflake) -> QueueSnapshot | None:
        session = self._registry.get(guild_id)
        if session is None:
            return None
        return QueueSnapshot(
            current=session.current,
            upcoming=list(session.queue.pending),
            loop_mode=session.loop_mode,
            persistent=session.persistent,
            total_pending_ms=session.queue.total_pending_ms,
        )

    def now_playing(self, guild_id: DiscordSnowflake) -> NowPlaying | None:
        session = self._registry.get(guild_id)
        if session is None or session.current is None:
            return None
        return NowPlaying(
            track=session.current,
            position_ms=self._ticker.current_position(session),
            state=session.state,
            paused=session.paused,
            volume=session.volume,
            loop_mode=session.loop_mode,
            persistent=session.persistent,
            up_next=session.queue.peek(),
        )

    # ── Commands ────────────────────────────────────────────────────

    async def play(self, request: PlayRequest) -> CommandOutcome:
        """Search, get or create the guild's session, enqueue, and start if idle."""
        try:
            result = await self._search.search(
                request.query,
                requester_id=request.requester_id,
                requester_name=request.requester_name,
            )
        except Exception as e:
            logger.warning(LogTemplates.SEARCH_FAILED, request.query, e)
            return CommandOutcome.rejected(DiscordUIMessages.PLAY_FAILED)

        if result.is_empty:
            return CommandOutcome.rejected(DiscordUIMessages.PLAY_NO_RESULTS.format(query=request.query))

        async with self._guild_locks[request.guild_id]:
            session = await self._get_or_create(request)
            if session is None:
                return CommandOutcome.rejected(DiscordUIMessages.ERROR_COULD_NOT_JOIN_VOICE)

            # A free-text search queues only its best match
            tracks = result.tracks if result.is_playlist else result.tracks[:1]
            position = session.enqueue(tracks)
            logger.info(LogTemplates.QUEUE_ENQUEUED, len(tracks), session.guild_id)

            if session.is_idle:
                track = session.advance()
                if track is None or not await self._play_track(session, track):
                    return CommandOutcome.rejected(DiscordUIMessages.PLAY_FAILED)
                if result.is_playlist:
                    return CommandOutcome.ok(self._playlist_message(result), track=track)
                return CommandOutcome.ok(DiscordUIMessages.PLAY_STARTING.format(title=track.title), track=track)

            if result.is_playlist:
                return CommandOutcome.ok(self._playlist_message(result))

            track = result.tracks[0]
            return CommandOutcome.ok(
                DiscordUIMessages.PLAY_QUEUED.format(title=track.title, uri=track.uri, position=position),
                track=track,
            )

    async def skip(self, guild_id: DiscordSnowflake) -> CommandOutcome:
        async def action(session: PlaybackSession) -> CommandOutcome:
            current = session.current
            assert current is not None
            if session.queue.is_empty:
                await self._destroy(session, DestroyReason.SKIPPED_LAST)
                return CommandOutcome.ok(DiscordUIMessages.ACTION_SKIPPED_LAST, track=current)

            # The queue advances on the following track-end event
            session.skip_requested = True
            logger.info(LogTemplates.TRACK_SKIP_REQUESTED, guild_id)
            await self._backend.skip(guild_id)
            return CommandOutcome.ok(DiscordUIMessages.ACTION_SKIPPED.format(title=current.title), track=current)

        return await self._run(guild_id, "skip", action, require_track=True)

    async def stop(self, guild_id: DiscordSnowflake) -> CommandOutcome:
        """Destroy the session immediately; explicit stop ignores 24/7 mode."""

        async def action(session: PlaybackSession) -> CommandOutcome:
            await self._destroy(session, DestroyReason.STOPPED)
            return CommandOutcome.ok(DiscordUIMessages.ACTION_STOPPED)

        return await self._run(guild_id, "stop", action)

    async def destroy(self, guild_id: DiscordSnowflake, reason: DestroyReason) -> bool:
        """Destroy a guild's session if one exists (e.g. the bot was removed)."""
        async with self._guild_locks[guild_id]:
            session = self._registry.get(guild_id)
            if session is None:
                return False
            await self._destroy(session, reason)
            return True

    async def pause(self, guild_id: DiscordSnowflake) -> CommandOutcome:
        async def action(session: PlaybackSession) -> CommandOutcome:
            if session.paused:
                return CommandOutcome.warning(DiscordUIMessages.WARN_ALREADY_PAUSED)
            await self._set_paused(session, True)
            return CommandOutcome.ok(DiscordUIMessages.ACTION_PAUSED)

        return await self._run(guild_id, "pause", action, require_track=True)

    async def resume(self, guild_id: DiscordSnowflake) -> CommandOutcome:
        async def action(session: PlaybackSession) -> CommandOutcome:
            if not session.paused:
                return CommandOutcome.warning(DiscordUIMessages.WARN_NOT_PAUSED)
            await self._set_paused(session, False)
            return CommandOutcome.ok(DiscordUIMessages.ACTION_RESUMED)

        return await self._run(guild_id, "resume", action, require_track=True)

    async def toggle_pause(self, guild_id: DiscordSnowflake) -> CommandOutcome:
        """Pause or resume depending on the state seen under the guild lock."""

        async def action(session: PlaybackSession) -> CommandOutcome:
            if session.paused:
                await self._set_paused(session, False)
                return CommandOutcome.ok(DiscordUIMessages.ACTION_RESUMED)
            await self._set_paused(session, True)
            return CommandOutcome.ok(DiscordUIMessages.ACTION_PAUSED)

        return await self._run(guild_id, "toggle_pause", action, require_track=True)

    async def shuffle(self, guild_id: DiscordSnowflake) -> CommandOutcome:
        async def action(session: PlaybackSession) -> CommandOutcome:
            if len(session.queue) < 2:
                return CommandOutcome.warning(DiscordUIMessages.WARN_NOT_ENOUGH_TO_SHUFFLE)
            session.queue.shuffle(self._rng)
            logger.info(LogTemplates.QUEUE_SHUFFLED, guild_id)
            await self._refresh(session)
            return CommandOutcome.ok(DiscordUIMessages.ACTION_SHUFFLED)

        return await self._run(guild_id, "shuffle", action)

    async def set_loop(self, guild_id: DiscordSnowflake, mode: LoopMode) -> CommandOutcome:
        async def action(session: PlaybackSession) -> CommandOutcome:
            session.loop_mode = mode
            return await self._loop_changed(session)

        return await self._run(guild_id, "loop", action)

    async def cycle_loop(self, guild_id: DiscordSnowflake) -> CommandOutcome:
        """Advance none -> track -> queue -> none.

        The mode is read under the guild lock, so rapid presses never skip a step.
        """

        async def action(session: PlaybackSession) -> CommandOutcome:
            session.cycle_loop()
            return await self._loop_changed(session)

        return await self._run(guild_id, "cycle_loop", action)

    async def set_volume(self, guild_id: DiscordSnowflake, level: int | None = None) -> CommandOutcome:
        """Set the volume, or report the current one when ``level`` is None."""

        async def action(session: PlaybackSession) -> CommandOutcome:
            if level is None:
                return CommandOutcome.ok(DiscordUIMessages.ACTION_VOLUME_CURRENT.format(level=session.volume))
            if not 0 <= level <= 100:
                return CommandOutcome.rejected(f"{EmojiConstants.ERROR} {ErrorMessages.VOLUME_OUT_OF_RANGE}")

            await self._backend.set_volume(guild_id, level)
            session.volume = level
            logger.info(LogTemplates.VOLUME_CHANGED, level, guild_id)
            await self._refresh(session)
            return CommandOutcome.ok(DiscordUIMessages.ACTION_VOLUME_SET.format(level=level))

        return await self._run(guild_id, "volume", action)

    async def seek(self, guild_id: DiscordSnowflake, time_text: str) -> CommandOutcome:
        """Seek within the current track; bad or out-of-range targets never reach the backend."""

        async def action(session: PlaybackSession) -> CommandOutcome:
            try:
                position_ms = self._validate_seek(session, time_text)
            except SeekError as e:
                return CommandOutcome.rejected(f"{EmojiConstants.ERROR} {e.message}")

            await self._backend.seek(guild_id, position_ms)
            logger.info(LogTemplates.PLAYBACK_SEEKED, position_ms, guild_id)
            await self._refresh(session, position_ms)
            return CommandOutcome.ok(DiscordUIMessages.ACTION_SEEKED.format(position=format_position(position_ms)))

        return await self._run(guild_id, "seek", action, require_track=True)

    async def remove(self, guild_id: DiscordSnowflake, position: int) -> CommandOutcome:
        async def action(session: PlaybackSession) -> CommandOutcome:
            if session.queue.is_empty:
                return CommandOutcome.warning(DiscordUIMessages.WARN_QUEUE_EMPTY_REMOVE)
            try:
                removed = session.queue.remove_at(position)
            except QueuePositionOutOfRangeError as e:
                return CommandOutcome.rejected(DiscordUIMessages.ERROR_INVALID_TRACK_NUMBER.format(length=e.length))

            logger.info(LogTemplates.QUEUE_REMOVED, removed.title, guild_id)
            await self._refresh(session)
            return CommandOutcome.ok(
                DiscordUIMessages.ACTION_TRACK_REMOVED.format(position=position, title=removed.title, uri=removed.uri),
                track=removed,
            )

        return await self._run(guild_id, "remove", action)

    async def toggle_persistent(self, guild_id: DiscordSnowflake) -> CommandOutcome:
        """Flip 24/7 mode. Only future end-of-queue handling is affected."""

        async def action(session: PlaybackSession) -> CommandOutcome:
            enabled = session.toggle_persistent()
            logger.info(LogTemplates.PERSISTENT_CHANGED, "enabled" if enabled else "disabled", guild_id)
            await self._refresh(session)
            if enabled:
                return CommandOutcome.ok(DiscordUIMessages.ACTION_PERSISTENT_ON)
            return CommandOutcome.ok(DiscordUIMessages.ACTION_PERSISTENT_OFF)

        return await self._run(guild_id, "247", action)

    # ── Backend events ──────────────────────────────────────────────

    async def handle_backend_event(self, event: BackendEvent) -> None:
        match event:
            case NodeReady():
                logger.info(LogTemplates.NODE_READY, event.node_id, event.resumed)
                self._notify(BackendNodeStatusChanged(node_id=event.node_id, healthy=True))
            case NodeError():
                detail = normalize_error_message(event.detail, ErrorMessages.GENERIC_ERROR)
                logger.warning(LogTemplates.NODE_ERROR, event.node_id, detail)
                self._notify(BackendNodeStatusChanged(node_id=event.node_id, healthy=False, detail=detail))
            case NodeClosed():
                logger.warning(LogTemplates.NODE_CLOSED, event.node_id, len(event.guild_ids))
                self._notify(
                    BackendNodeStatusChanged(node_id=event.node_id, healthy=False, detail=event.detail or "")
                )
                await self._destroy_lost(event.guild_ids)
            case NodeDisconnected():
                logger.warning(LogTemplates.NODE_DISCONNECTED, event.node_id)
                self._notify(BackendNodeStatusChanged(node_id=event.node_id, healthy=False))
                await self._destroy_lost(event.guild_ids)
            case PlayerCreated():
                logger.debug(LogTemplates.PLAYER_CREATED, event.guild_id)
            case PlayerStart() | PlayerEnd() | PlayerException() | PlayerResolveError():
                await self._handle_player_event(event)
            case _:
                assert_never(event)

    async def _handle_player_event(
        self, event: PlayerStart | PlayerEnd | PlayerException | PlayerResolveError
    ) -> None:
        async with self._guild_locks[event.guild_id]:
            session = self._registry.get(event.guild_id)
            if session is None:
                logger.debug(LogTemplates.BACKEND_EVENT_NO_SESSION, event.kind.value, event.guild_id)
                return

            logger.debug(LogTemplates.BACKEND_EVENT, event.kind.value, event.guild_id)
            match event:
                case PlayerStart():
                    await self._on_track_start(session, event)
                case PlayerEnd():
                    await self._on_track_end(session, event)
                case PlayerException():
                    await self._on_player_exception(session, event)
                case PlayerResolveError():
                    await self._on_resolve_error(session, event)
                case _:
                    assert_never(event)

    async def _on_track_start(self, session: PlaybackSession, event: PlayerStart) -> None:
        if session.current is None:
            session.queue.current = event.track

        track = session.current
        assert track is not None
        session.paused = False
        self._transition(session, SessionState.PLAYING)
        logger.info(LogTemplates.TRACK_STARTED, track.title, session.guild_id)

        # Create the new control message first, then drop the old one
        old_ref = session.control_message
        session.control_message = await self._surface.render(session)
        if old_ref is not None and old_ref != session.control_message:
            await self._surface.delete(old_ref)

        self._notify(
            TrackStartedPlaying(
                guild_id=session.guild_id,
                voice_channel_id=session.voice_channel_id,
                text_channel_id=session.text_channel_id,
                track_title=track.title,
                track_uri=track.uri,
                duration_ms=track.duration_ms,
                requester_id=track.requester_id,
                requester_name=track.requester_name,
            )
        )

    async def _on_track_end(self, session: PlaybackSession, event: PlayerEnd) -> None:
        if not event.reason.may_start_next:
            logger.debug(LogTemplates.TRACK_ENDED_IGNORED, event.reason.value, session.guild_id)
            return

        # The finished track's panel stops updating now; the next start restarts the ticker
        self._ticker.stop(session.guild_id)

        finished = session.current
        logger.info(
            LogTemplates.TRACK_ENDED,
            finished.title if finished else None,
            session.guild_id,
            event.reason.value,
        )

        # A track that failed to load is never replayed by track-loop
        skipped = session.skip_requested or event.reason == TrackEndReason.LOAD_FAILED
        session.skip_requested = False

        next_track = session.advance(skipped=skipped)
        if next_track is not None:
            await self._play_track(session, next_track)
            return

        if session.persistent:
            self._transition(session, SessionState.IDLE)
            logger.info(LogTemplates.QUEUE_EMPTY_PERSISTENT, session.guild_id)
            await self._surface.disable(session)
            return

        candidate = await self._autoplay_candidate(session)
        if candidate is not None:
            session.enqueue(candidate)
            track = session.advance()
            if track is not None and await self._play_track(session, track):
                return

        await self._destroy(session, DestroyReason.QUEUE_ENDED, notice=DiscordUIMessages.NOTICE_QUEUE_ENDED)

    async def _on_player_exception(self, session: PlaybackSession, event: PlayerException) -> None:
        message = normalize_error_message(
            event.detail, ErrorMessages.UNKNOWN_PLAYER_ERROR.format(kind=event.error_type)
        )
        logger.warning(LogTemplates.PLAYER_EXCEPTION, event.error_type, session.guild_id, message)
        await self._surface.send_notice(
            session.text_channel_id,
            DiscordUIMessages.NOTICE_PLAYER_ERROR.format(error=message),
            title=DiscordUIMessages.NOTICE_PLAYER_ERROR_TITLE,
        )
        if event.fatal:
            await self._destroy(session, DestroyReason.FATAL_ERROR)

    async def _on_resolve_error(self, session: PlaybackSession, event: PlayerResolveError) -> None:
        reason = normalize_error_message(event.reason, ErrorMessages.UNKNOWN_RESOLVE_ERROR)
        track = event.track or session.current
        title = track.title if track else DiscordUIMessages.UNKNOWN_REQUESTER
        logger.warning(LogTemplates.PLAYER_RESOLVE_ERROR, title, session.guild_id, reason)
        await self._surface.send_notice(
            session.text_channel_id,
            DiscordUIMessages.NOTICE_RESOLVE_ERROR.format(title=title, reason=reason),
            title=DiscordUIMessages.NOTICE_RESOLVE_ERROR_TITLE,
        )

    async def _destroy_lost(self, guild_ids: tuple[int, ...]) -> None:
        for guild_id in guild_ids:
            async with self._guild_locks[guild_id]:
                session = self._registry.get(guild_id)
                if session is None:
                    continue
                await self._destroy(
                    session, DestroyReason.BACKEND_LOST, notice=DiscordUIMessages.NOTICE_BACKEND_LOST
                )

    # ── Internals ───────────────────────────────────────────────────

    async def _run(
        self,
        guild_id: DiscordSnowflake,
        command: str,
        action: SessionAction,
        *,
        require_track: bool = False,
    ) -> CommandOutcome:
        """Run a session command under the guild lock.

        The session is looked up before waiting for the lock; if a
        destroy won the race the stale reference is rejected.
        """
        session = self._registry.get(guild_id)
        if session is None:
            return CommandOutcome.rejected(DiscordUIMessages.STATE_NOTHING_PLAYING)

        async with self._guild_locks[guild_id]:
            try:
                session.ensure_routable()
            except SessionDestroyedError:
                logger.info(LogTemplates.SESSION_STALE_COMMAND, command, guild_id)
                return CommandOutcome.rejected(DiscordUIMessages.STATE_NOTHING_PLAYING)

            if require_track and session.current is None:
                return CommandOutcome.rejected(DiscordUIMessages.STATE_NOTHING_PLAYING)
            return await action(session)

    async def _get_or_create(self, request: PlayRequest) -> PlaybackSession | None:
        session = self._registry.get(request.guild_id)
        if session is not None:
            if session.is_idle and session.voice_channel_id != request.voice_channel_id:
                if await self._backend.move(request.guild_id, request.voice_channel_id):
                    session.voice_channel_id = request.voice_channel_id
                    session.text_channel_id = request.text_channel_id
                    logger.info(LogTemplates.SESSION_RELOCATED, request.guild_id, request.voice_channel_id)
            return session

        if not await self._backend.connect(request.guild_id, request.voice_channel_id):
            return None

        session = self._registry.add(
            PlaybackSession(
                guild_id=request.guild_id,
                voice_channel_id=request.voice_channel_id,
                text_channel_id=request.text_channel_id,
                volume=self._default_volume,
            )
        )
        if session.volume != 100:
            await self._backend.set_volume(session.guild_id, session.volume)
        logger.info(
            LogTemplates.SESSION_CREATED,
            session.guild_id,
            session.voice_channel_id,
            session.text_channel_id,
        )
        return session

    async def _play_track(self, session: PlaybackSession, track: Track) -> bool:
        """Hand ``track`` to the backend; the state follows on its start event."""
        session.paused = False
        try:
            await self._backend.play(session.guild_id, track)
        except Exception as e:
            message = normalize_error_message(e, ErrorMessages.UNKNOWN_PLAYER_ERROR.format(kind=type(e).__name__))
            logger.error(LogTemplates.PLAYER_EXCEPTION, type(e).__name__, session.guild_id, message)
            await self._destroy(
                session,
                DestroyReason.FATAL_ERROR,
                notice=DiscordUIMessages.NOTICE_PLAYER_ERROR.format(error=message),
            )
            return False
        return True

    async def _set_paused(self, session: PlaybackSession, paused: bool) -> None:
        await self._backend.pause(session.guild_id, paused)
        session.set_paused(paused)
        self._sync_ticker(session)
        logger.info(
            LogTemplates.PLAYBACK_PAUSED if paused else LogTemplates.PLAYBACK_RESUMED,
            session.guild_id,
        )
        await self._refresh(session)

    async def _loop_changed(self, session: PlaybackSession) -> CommandOutcome:
        logger.info(LogTemplates.LOOP_MODE_CHANGED, session.loop_mode.value, session.guild_id)
        await self._refresh(session)
        return CommandOutcome.ok(DiscordUIMessages.ACTION_LOOP_MODE_SET.format(mode=session.loop_mode.label))

    async def _refresh(self, session: PlaybackSession, position_ms: int | None = None) -> None:
        if session.control_message is None or session.current is None:
            return
        if position_ms is None:
            position_ms = self._ticker.current_position(session)
        await self._surface.refresh(session, position_ms)

    def _validate_seek(self, session: PlaybackSession, time_text: str) -> int:
        track = session.current
        if track is None:
            raise SeekError(ErrorMessages.SEEK_NOTHING_PLAYING)

        position_ms = parse_seek_time(time_text)
        if position_ms is None:
            raise SeekError(ErrorMessages.SEEK_BAD_FORMAT)
        if not track.is_seekable:
            raise SeekError(ErrorMessages.SEEK_UNBOUNDED)
        if not 0 <= position_ms <= track.duration_ms:
            raise SeekError(ErrorMessages.SEEK_OUT_OF_RANGE.format(duration=track.duration_formatted))
        return position_ms

    def _transition(self, session: PlaybackSession, state: SessionState) -> None:
        """Single place where state changes and the progress ticker is synced."""
        previous = session.state
        if session.transition_to(state):
            logger.debug(LogTemplates.SESSION_STATE_CHANGED, session.guild_id, previous.value, state.value)
        self._sync_ticker(session)

    def _sync_ticker(self, session: PlaybackSession) -> None:
        if session.ticker_should_run:
            self._ticker.start(session)
        else:
            self._ticker.stop(session.guild_id)

    async def _autoplay_candidate(self, session: PlaybackSession) -> Track | None:
        """Single lookup for a follow-up to the finished track; no retry."""
        previous = session.queue.previous
        if previous is None:
            return None

        query = f"{previous.title} {previous.author}".strip()
        logger.info(LogTemplates.AUTOPLAY_SEARCH, previous.title, session.guild_id)
        try:
            result: SearchResult = await self._search.search(
                query,
                requester_id=previous.requester_id,
                requester_name=previous.requester_name,
            )
        except Exception as e:
            logger.warning(LogTemplates.AUTOPLAY_FAILED, session.guild_id, e)
            return None

        for candidate in result.tracks:
            if not candidate.same_source_as(previous):
                logger.info(LogTemplates.AUTOPLAY_FOUND, candidate.title, session.guild_id)
                return candidate

        logger.info(LogTemplates.AUTOPLAY_NOTHING, session.guild_id)
        return None

    async def _destroy(
        self,
        session: PlaybackSession,
        reason: DestroyReason,
        *,
        notice: str | None = None,
    ) -> None:
        """Tear a session down.

        The session is made non-routable, unregistered and its ticker
        cancelled before the first await.
        """
        if session.destroyed:
            self._registry.violation(
                session.guild_id,
                "destroy_once",
                SessionDestroyedError(session.guild_id).message,
            )
            return

        last_track = session.current or session.queue.previous
        session.mark_destroyed()
        self._registry.remove(session.guild_id, session)
        self._ticker.stop(session.guild_id)
        logger.info(LogTemplates.SESSION_DESTROYED, session.guild_id, reason.value)

        await self._surface.disable(session)
        if notice is not None:
            await self._surface.send_notice(session.text_channel_id, notice)

        try:
            await self._backend.destroy(session.guild_id)
        except Exception as e:
            logger.warning(LogTemplates.BACKEND_DISCONNECT_FAILED, session.guild_id, e)

        self._notify(
            SessionDestroyed(
                guild_id=session.guild_id,
                voice_channel_id=session.voice_channel_id,
                text_channel_id=session.text_channel_id,
                reason=reason.description,
                last_track_title=last_track.title if last_track else None,
            )
        )

        if self._clear_messages_on_destroy:
            self._spawn(self._surface.clear_bot_messages(session.text_channel_id))

    def _notify(self, event: DomainEvent) -> None:
        """Publish without waiting; handler failures are logged by the bus."""
        self._spawn(self._event_bus.publish(event))

    def _spawn(self, coro: Awaitable[None]) -> None:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    @staticmethod
    def _playlist_message(result: SearchResult) -> str:
        return DiscordUIMessages.PLAY_PLAYLIST_QUEUED.format(count=len(result.tracks), name=result.playlist_name)

    async def shutdown(self) -> None:
        """Stop every ticker and let pending notifications finish."""
        await self._ticker.shutdown()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
