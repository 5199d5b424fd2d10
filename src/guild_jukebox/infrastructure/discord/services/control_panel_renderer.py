"""Discord implementation of the control surface: now-playing embed, buttons and channel notices."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import discord

from guild_jukebox.application.interfaces.control_surface import ControlSurface
from guild_jukebox.domain.music.value_objects import ControlMessageRef
from guild_jukebox.domain.shared.constants import (
    DiscordErrorCodes,
    TimeConstants,
    UIConstants,
)
from guild_jukebox.domain.shared.messages import DiscordUIMessages, EmojiConstants, LogTemplates
from guild_jukebox.infrastructure.discord.views.control_panel_view import ControlPanelView
from guild_jukebox.utils.reply import format_position, truncate

if TYPE_CHECKING:
    from discord.ext import commands

    from ....config.container import Container
    from ....domain.music.entities import PlaybackSession, Track

logger = logging.getLogger(__name__)


def progress_bar(position_ms: int, duration_ms: int, width: int = UIConstants.PROGRESS_BAR_WIDTH) -> str:
    """Text progress bar; the marker never passes the end of the track."""
    if duration_ms <= 0:
        return UIConstants.PROGRESS_EMPTY * width
    ratio = max(0.0, min(position_ms / duration_ms, 1.0))
    index = min(int(ratio * width), width - 1)
    return (
        UIConstants.PROGRESS_FILLED * index
        + UIConstants.PROGRESS_MARKER
        + UIConstants.PROGRESS_EMPTY * (width - index - 1)
    )


def format_requester(track: Track) -> str:
    if track.requester_id:
        return f"<@{track.requester_id}>"
    if track.requester_name:
        return track.requester_name
    return DiscordUIMessages.UNKNOWN_REQUESTER


def build_control_embed(session: PlaybackSession, position_ms: int | None = None) -> discord.Embed:
    """Derive the now-playing embed from a session snapshot."""
    track = session.current or session.queue.previous

    if track is None:
        return discord.Embed(
            title=DiscordUIMessages.EMBED_NOW_PLAYING,
            description=DiscordUIMessages.STATE_QUEUE_UP_NEXT_EMPTY,
            color=UIConstants.COLOR_ENDED,
        )

    title = truncate(track.title, UIConstants.TITLE_TRUNCATION)
    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_NOW_PLAYING,
        description=f"[{title}]({track.uri})" if track.uri else f"**{title}**",
        color=UIConstants.COLOR_NOW_PLAYING,
    )

    if track.thumbnail_url:
        embed.set_thumbnail(url=track.thumbnail_url)

    duration = DiscordUIMessages.LIVE if track.is_stream else track.duration_formatted
    embed.add_field(name=DiscordUIMessages.FIELD_DURATION, value=duration, inline=True)
    if track.author:
        embed.add_field(
            name=DiscordUIMessages.FIELD_ARTIST,
            value=truncate(track.author, UIConstants.ARTIST_TRUNCATION),
            inline=True,
        )
    embed.add_field(name=DiscordUIMessages.FIELD_REQUESTER, value=format_requester(track), inline=True)
    embed.add_field(name=DiscordUIMessages.FIELD_LOOP, value=session.loop_mode.label, inline=True)
    embed.add_field(name=DiscordUIMessages.FIELD_VOLUME, value=f"{session.volume}%", inline=True)
    embed.add_field(
        name=DiscordUIMessages.FIELD_PERSISTENT,
        value="On" if session.persistent else "Off",
        inline=True,
    )

    if track.is_bounded and position_ms is not None:
        position = max(0, min(position_ms, track.duration_ms))
        embed.add_field(
            name=DiscordUIMessages.FIELD_PROGRESS,
            value=(
                f"{progress_bar(position, track.duration_ms)} "
                f"`{format_position(position)} / {track.duration_formatted}`"
            ),
            inline=False,
        )

    up_next = session.queue.peek()
    footer = (
        f"Up next: {truncate(up_next.title, 60)}" if up_next else DiscordUIMessages.STATE_QUEUE_UP_NEXT_EMPTY
    )
    if session.paused:
        footer = f"{EmojiConstants.PAUSE} Paused · {footer}"
    embed.set_footer(text=footer)
    return embed


class ControlPanelRenderer(ControlSurface):
    """Owns the control message of every session.

    Platform failures are logged here and never raised to the controller.
    """

    def __init__(
        self,
        bot: commands.Bot,
        container: Container,
        *,
        cleanup_delay_seconds: float = TimeConstants.CLEANUP_DELAY_SECONDS,
    ) -> None:
        self._bot = bot
        self._container = container
        self._cleanup_delay = cleanup_delay_seconds

    async def _get_channel(self, channel_id: int) -> Any | None:
        channel = self._bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._bot.fetch_channel(channel_id)
            except discord.HTTPException:
                return None
        return channel if isinstance(channel, discord.abc.Messageable) else None

    async def _get_message(self, ref: ControlMessageRef) -> discord.PartialMessage | None:
        channel = await self._get_channel(ref.channel_id)
        get_partial_message = getattr(channel, "get_partial_message", None)
        if get_partial_message is None:
            return None
        return get_partial_message(ref.message_id)

    # ── Control message ─────────────────────────────────────────────

    async def render(self, session: PlaybackSession) -> ControlMessageRef | None:
        channel = await self._get_channel(session.text_channel_id)
        if channel is None:
            logger.warning(LogTemplates.CONTROL_SEND_FAILED, session.text_channel_id, "channel not found")
            return None

        view = ControlPanelView.for_session(session, self._container)
        try:
            message = await channel.send(embed=build_control_embed(session, 0), view=view)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.CONTROL_SEND_FAILED, session.text_channel_id, e)
            return None

        view.set_message(message)
        return ControlMessageRef(channel_id=session.text_channel_id, message_id=message.id)

    async def refresh(self, session: PlaybackSession, position_ms: int | None = None) -> None:
        ref = session.control_message
        if ref is None:
            return

        message = await self._get_message(ref)
        if message is None:
            return

        view = ControlPanelView.for_session(session, self._container)
        try:
            await message.edit(embed=build_control_embed(session, position_ms), view=view)
        except discord.NotFound:
            logger.debug(LogTemplates.CONTROL_DELETE_GONE, ref.message_id)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.CONTROL_EDIT_FAILED, ref.message_id, e)

    async def disable(self, session: PlaybackSession) -> None:
        ref = session.control_message
        if ref is None:
            return

        message = await self._get_message(ref)
        if message is None:
            return

        view = ControlPanelView.for_session(session, self._container, disabled=True)
        view.stop()
        try:
            await message.edit(view=view)
        except discord.NotFound:
            logger.debug(LogTemplates.CONTROL_DELETE_GONE, ref.message_id)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.CONTROL_EDIT_FAILED, ref.message_id, e)

    async def delete(self, ref: ControlMessageRef) -> None:
        message = await self._get_message(ref)
        if message is None:
            return

        try:
            await message.delete()
        except discord.NotFound:
            logger.debug(LogTemplates.CONTROL_DELETE_GONE, ref.message_id)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.CONTROL_DELETE_FAILED, ref.message_id, e)

    # ── Channel notices ─────────────────────────────────────────────

    async def send_notice(self, channel_id: int, message: str, *, title: str | None = None) -> None:
        channel = await self._get_channel(channel_id)
        if channel is None:
            logger.warning(LogTemplates.NOTICE_SEND_FAILED, channel_id, "channel not found")
            return

        try:
            if title is None:
                await channel.send(message)
            else:
                embed = discord.Embed(title=title, description=message, color=UIConstants.COLOR_WARNING)
                await channel.send(embed=embed)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.NOTICE_SEND_FAILED, channel_id, e)

    async def clear_bot_messages(self, channel_id: int) -> None:
        """Bulk-delete the bot's recent messages after a short delay."""
        await asyncio.sleep(self._cleanup_delay)

        channel = await self._get_channel(channel_id)
        if not isinstance(channel, discord.TextChannel):
            return

        me = channel.guild.me
        if me is None or not channel.permissions_for(me).manage_messages:
            logger.info(LogTemplates.CLEANUP_NO_PERMISSION, channel_id)
            return

        try:
            own = [
                message
                async for message in channel.history(limit=TimeConstants.BULK_FETCH_LIMIT)
                if message.author.id == me.id
            ]
            if not own:
                return
            if len(own) == 1:
                await own[0].delete()
            else:
                await channel.delete_messages(own)
            logger.info(LogTemplates.CLEANUP_DONE, len(own), channel_id)
        except discord.HTTPException as e:
            if e.code == DiscordErrorCodes.BULK_DELETE_TOO_OLD:
                logger.info(LogTemplates.CLEANUP_TOO_OLD, channel_id)
            else:
                logger.warning(LogTemplates.CLEANUP_FAILED, channel_id, e)
