"""Operator notifications fed from the event bus.

Every handler is best-effort: delivery problems are logged and never
reach the publisher.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from guild_jukebox.domain.shared.constants import UIConstants
from guild_jukebox.domain.shared.events import (
    BackendNodeStatusChanged,
    GuildJoined,
    GuildLeft,
    SessionDestroyed,
    TrackStartedPlaying,
)
from guild_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates
from guild_jukebox.utils.reply import format_duration

if TYPE_CHECKING:
    from discord.ext import commands

    from ....config.settings import NotificationSettings
    from ....domain.shared.events import EventBus

logger = logging.getLogger(__name__)

INVITE_MAX_AGE_SECONDS = 0


class NotificationDispatcher:
    def __init__(
        self,
        bot: commands.Bot,
        settings: NotificationSettings,
        event_bus: EventBus,
    ) -> None:
        self._bot = bot
        self._settings = settings
        self._event_bus = event_bus
        self._subscribed = False

    def subscribe(self) -> None:
        if self._subscribed or not self._settings.enabled:
            return
        self._event_bus.subscribe(TrackStartedPlaying, self.on_track_started)
        self._event_bus.subscribe(SessionDestroyed, self.on_session_destroyed)
        self._event_bus.subscribe(GuildJoined, self.on_guild_joined)
        self._event_bus.subscribe(GuildLeft, self.on_guild_left)
        self._event_bus.subscribe(BackendNodeStatusChanged, self.on_node_status)
        self._subscribed = True

    def unsubscribe(self) -> None:
        if not self._subscribed:
            return
        self._event_bus.unsubscribe(TrackStartedPlaying, self.on_track_started)
        self._event_bus.unsubscribe(SessionDestroyed, self.on_session_destroyed)
        self._event_bus.unsubscribe(GuildJoined, self.on_guild_joined)
        self._event_bus.unsubscribe(GuildLeft, self.on_guild_left)
        self._event_bus.unsubscribe(BackendNodeStatusChanged, self.on_node_status)
        self._subscribed = False

    # ─────────────────────────────────────────────────────────────────
    # Delivery
    # ─────────────────────────────────────────────────────────────────

    async def _send_to_channel(self, channel_id: int | None, embed: discord.Embed, kind: str) -> None:
        if not channel_id:
            return

        channel = self._bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._bot.fetch_channel(channel_id)
            except discord.HTTPException:
                channel = None

        if not isinstance(channel, discord.abc.Messageable):
            logger.warning(LogTemplates.NOTIFY_CHANNEL_MISSING, channel_id)
            return

        try:
            await channel.send(embed=embed)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.NOTIFY_SEND_FAILED, kind, e)

    async def _send_to_owner(self, embed: discord.Embed) -> None:
        owner_id = self._settings.owner_id
        if not owner_id:
            return

        try:
            owner = self._bot.get_user(owner_id) or await self._bot.fetch_user(owner_id)
            await owner.send(embed=embed)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.NOTIFY_OWNER_FAILED, owner_id, e)

    def _guild_name(self, guild_id: int) -> str:
        guild = self._bot.get_guild(guild_id)
        return guild.name if guild else str(guild_id)

    async def _create_invite(self, guild_id: int) -> str | None:
        """Invite link from the first text channel the bot may create invites in."""
        guild = self._bot.get_guild(guild_id)
        if guild is None or guild.me is None:
            return None

        for channel in guild.text_channels:
            if not channel.permissions_for(guild.me).create_instant_invite:
                continue
            try:
                invite = await channel.create_invite(max_age=INVITE_MAX_AGE_SECONDS, unique=False)
            except discord.HTTPException as e:
                logger.info(LogTemplates.NOTIFY_INVITE_FAILED, guild_id, e)
                return None
            return invite.url
        return None

    # ─────────────────────────────────────────────────────────────────
    # Handlers
    # ─────────────────────────────────────────────────────────────────

    async def on_track_started(self, event: TrackStartedPlaying) -> None:
        embed = discord.Embed(
            title=DiscordUIMessages.NOTIFY_SONG_STARTED,
            description=f"[{event.track_title}]({event.track_uri})" if event.track_uri else event.track_title,
            color=UIConstants.COLOR_NOW_PLAYING,
        )
        embed.add_field(name="Server", value=self._guild_name(event.guild_id), inline=True)
        embed.add_field(name="Voice Channel", value=f"<#{event.voice_channel_id}>", inline=True)
        duration = format_duration(event.duration_ms // 1000) if event.duration_ms else DiscordUIMessages.LIVE
        embed.add_field(name=DiscordUIMessages.FIELD_DURATION, value=duration, inline=True)
        if event.requester_id:
            embed.add_field(name=DiscordUIMessages.FIELD_REQUESTER, value=f"<@{event.requester_id}>", inline=True)
        embed.timestamp = event.occurred_at

        await self._send_to_owner(embed)
        await self._send_to_channel(self._settings.song_channel_id, embed, "song")

    async def on_session_destroyed(self, event: SessionDestroyed) -> None:
        embed = discord.Embed(
            title=DiscordUIMessages.NOTIFY_SESSION_ENDED,
            description=event.reason or None,
            color=UIConstants.COLOR_ENDED,
        )
        embed.add_field(name="Server", value=self._guild_name(event.guild_id), inline=True)
        if event.last_track_title:
            embed.add_field(name="Last Track", value=event.last_track_title, inline=False)
        embed.timestamp = event.occurred_at

        await self._send_to_channel(self._settings.stopped_channel_id, embed, "stopped")

    async def on_guild_joined(self, event: GuildJoined) -> None:
        invite_url = await self._create_invite(event.guild_id)
        embed = discord.Embed(
            title=DiscordUIMessages.NOTIFY_GUILD_JOINED,
            description=f"**{event.guild_name}** (`{event.guild_id}`)",
            color=UIConstants.COLOR_SUCCESS,
        )
        embed.add_field(name="Members", value=str(event.member_count), inline=True)
        if event.owner_id:
            embed.add_field(name="Owner", value=f"<@{event.owner_id}> (`{event.owner_id}`)", inline=True)
        embed.add_field(name="Total Servers", value=str(event.total_guilds), inline=True)
        embed.add_field(
            name="Invite Link",
            value=f"[Click to Join]({invite_url})" if invite_url else DiscordUIMessages.NOTIFY_INVITE_UNAVAILABLE,
            inline=False,
        )
        embed.timestamp = event.occurred_at

        await self._send_to_owner(embed)
        await self._send_to_channel(self._settings.join_channel_id, embed, "join")

    async def on_guild_left(self, event: GuildLeft) -> None:
        embed = discord.Embed(
            title=DiscordUIMessages.NOTIFY_GUILD_LEFT,
            description=f"**{event.guild_name}** (`{event.guild_id}`)",
            color=UIConstants.COLOR_ENDED,
        )
        embed.add_field(name="Members", value=str(event.member_count), inline=True)
        embed.add_field(name="Total Servers", value=str(event.total_guilds), inline=True)
        embed.timestamp = event.occurred_at

        await self._send_to_owner(embed)
        await self._send_to_channel(self._settings.left_channel_id, embed, "leave")

    async def on_node_status(self, event: BackendNodeStatusChanged) -> None:
        embed = discord.Embed(
            title=DiscordUIMessages.NOTIFY_NODE_UP if event.healthy else DiscordUIMessages.NOTIFY_NODE_DOWN,
            description=f"Node `{event.node_id}`",
            color=UIConstants.COLOR_SUCCESS if event.healthy else UIConstants.COLOR_WARNING,
        )
        if event.detail:
            embed.add_field(name="Detail", value=event.detail, inline=False)
        embed.timestamp = event.occurred_at

        await self._send_to_channel(self._settings.node_status_channel_id, embed, "node")
