"""Slash-command cog for core playback: play, skip, stop, pause, resume, seek, volume, 24/7, nowplaying."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from guild_jukebox.application.services.outcomes import PlayRequest
from guild_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages
from guild_jukebox.infrastructure.discord.guards.voice_guards import (
    ensure_bot_can_join,
    ensure_same_channel,
    ensure_user_in_voice,
    send_ephemeral,
)
from guild_jukebox.infrastructure.discord.services.control_panel_renderer import (
    build_control_embed,
)

if TYPE_CHECKING:
    from ....application.services.outcomes import CommandOutcome
    from ....config.container import Container

logger = logging.getLogger(__name__)


class PlaybackCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    async def _control(
        self,
        interaction: discord.Interaction,
        command: Callable[[int], Awaitable[CommandOutcome]],
    ) -> None:
        """Run a session command for the invoker's guild after the same-channel check."""
        if interaction.guild is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
            return

        guild_id = interaction.guild.id
        session = self.container.session_controller.get_session(guild_id)
        if not await ensure_same_channel(interaction, session):
            return

        outcome = await command(guild_id)
        await send_ephemeral(interaction, outcome.message)

    # ─────────────────────────────────────────────────────────────────
    # Play
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="play", description="Play a song by URL or search query.")
    @app_commands.describe(query="URL, playlist URL or search query")
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        channel = await ensure_user_in_voice(interaction)
        if channel is None:
            return

        assert interaction.guild is not None
        controller = self.container.session_controller

        session = controller.get_session(interaction.guild.id)
        if session is not None and not session.is_idle and session.voice_channel_id != channel.id:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_MUST_SHARE_CHANNEL)
            return

        if not await ensure_bot_can_join(interaction, channel):
            return

        if not query.strip() or interaction.channel_id is None:
            await send_ephemeral(interaction, DiscordUIMessages.PLAY_NO_RESULTS.format(query=query))
            return

        user = interaction.user
        request = PlayRequest(
            guild_id=interaction.guild.id,
            text_channel_id=interaction.channel_id,
            voice_channel_id=channel.id,
            query=query,
            requester_id=user.id,
            requester_name=getattr(user, "display_name", user.name),
        )

        await interaction.response.defer()
        outcome = await controller.play(request)
        await interaction.followup.send(outcome.message, ephemeral=not outcome.is_success)

    # ─────────────────────────────────────────────────────────────────
    # Playback Controls
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="skip", description="Skip the current track.")
    async def skip(self, interaction: discord.Interaction) -> None:
        await self._control(interaction, self.container.session_controller.skip)

    @app_commands.command(name="stop", description="Stop playback, clear the queue and leave.")
    async def stop(self, interaction: discord.Interaction) -> None:
        await self._control(interaction, self.container.session_controller.stop)

    @app_commands.command(name="pause", description="Pause the current track.")
    async def pause(self, interaction: discord.Interaction) -> None:
        await self._control(interaction, self.container.session_controller.pause)

    @app_commands.command(name="resume", description="Resume paused playback.")
    async def resume(self, interaction: discord.Interaction) -> None:
        await self._control(interaction, self.container.session_controller.resume)

    @app_commands.command(name="seek", description="Seek to a position in the current track.")
    @app_commands.describe(time='Target position, e.g. "1:30" or "90s"')
    async def seek(self, interaction: discord.Interaction, time: str) -> None:
        async def command(guild_id: int) -> CommandOutcome:
            return await self.container.session_controller.seek(guild_id, time)

        await self._control(interaction, command)

    @app_commands.command(name="volume", description="Show or set the playback volume.")
    @app_commands.describe(level="Volume from 0 to 100; omit to show the current volume")
    async def volume(self, interaction: discord.Interaction, level: int | None = None) -> None:
        async def command(guild_id: int) -> CommandOutcome:
            return await self.container.session_controller.set_volume(guild_id, level)

        await self._control(interaction, command)

    @app_commands.command(name="247", description="Toggle 24/7 mode (stay connected when the queue ends).")
    async def persistent(self, interaction: discord.Interaction) -> None:
        await self._control(interaction, self.container.session_controller.toggle_persistent)

    # ─────────────────────────────────────────────────────────────────
    # Now Playing
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="nowplaying", description="Show the current track and progress.")
    async def nowplaying(self, interaction: discord.Interaction) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None
        controller = self.container.session_controller

        now_playing = controller.now_playing(interaction.guild.id)
        session = controller.get_session(interaction.guild.id)
        if now_playing is None or session is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_PLAYING)
            return

        embed = build_control_embed(session, now_playing.position_ms)
        await interaction.response.send_message(embed=embed, ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(PlaybackCog(bot, container))
