"""Periodic progress refresh for the control message."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import PlaybackSession
    from ..interfaces.audio_backend import AudioBackend
    from ..interfaces.control_surface import ControlSurface

logger = logging.getLogger(__name__)


class ProgressTicker:
    """One cancellable refresh task per guild.

    The session controller is the only caller of :meth:`start` and
    :meth:`stop`; it syncs the ticker after every state transition so the
    task exists exactly while the session is playing an unpaused bounded
    track. The loop also re-checks that condition before every refresh.
    """

    def __init__(
        self,
        *,
        audio_backend: AudioBackend,
        control_surface: ControlSurface,
        interval_seconds: float,
    ) -> None:
        self._backend = audio_backend
        self._surface = control_surface
        self._interval = interval_seconds
        self._tasks: dict[DiscordSnowflake, asyncio.Task[None]] = {}

    def is_running(self, guild_id: DiscordSnowflake) -> bool:
        task = self._tasks.get(guild_id)
        return task is not None and not task.done()

    def start(self, session: PlaybackSession) -> None:
        """(Re)start the ticker for a session, replacing any running task."""
        self.stop(session.guild_id)
        self._tasks[session.guild_id] = asyncio.create_task(
            self._run(session), name=f"progress-ticker-{session.guild_id}"
        )
        logger.debug(LogTemplates.TICKER_STARTED, session.guild_id)

    def stop(self, guild_id: DiscordSnowflake) -> None:
        """Cancel the guild's ticker. Synchronous so callers never await mid-transition."""
        task = self._tasks.pop(guild_id, None)
        if task is None:
            return
        if not task.done():
            task.cancel()
        logger.debug(LogTemplates.TICKER_STOPPED, guild_id)

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        for guild_id in list(self._tasks):
            self.stop(guild_id)
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def current_position(self, session: PlaybackSession) -> int:
        """Backend position clamped to ``[0, duration]``."""
        track = session.current
        if track is None:
            return 0
        position = self._backend.position(session.guild_id) or 0
        return max(0, min(position, track.duration_ms))

    async def _run(self, session: PlaybackSession) -> None:
        guild_id = session.guild_id
        while True:
            await asyncio.sleep(self._interval)
            if not session.ticker_should_run:
                break
            try:
                await self._surface.refresh(session, self.current_position(session))
            except Exception as e:
                logger.warning(LogTemplates.TICKER_TICK_FAILED, guild_id, e)

        if self._tasks.get(guild_id) is asyncio.current_task():
            del self._tasks[guild_id]
