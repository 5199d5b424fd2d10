"""Slash-command cog for queue management: view, shuffle, loop, remove."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from guild_jukebox.domain.music.value_objects import LoopMode
from guild_jukebox.domain.shared.constants import UIConstants
from guild_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages
from guild_jukebox.infrastructure.discord.guards.voice_guards import (
    ensure_same_channel,
    ensure_user_in_voice,
    send_ephemeral,
)
from guild_jukebox.utils.reply import format_duration, truncate

if TYPE_CHECKING:
    from ....application.services.outcomes import QueueSnapshot
    from ....config.container import Container

logger = logging.getLogger(__name__)

LOOP_CHOICES = [
    app_commands.Choice(name="Off", value=LoopMode.NONE.value),
    app_commands.Choice(name="Track", value=LoopMode.TRACK.value),
    app_commands.Choice(name="Queue", value=LoopMode.QUEUE.value),
]


def build_queue_embed(
    snapshot: QueueSnapshot, *, guild_name: str, page: int, per_page: int
) -> discord.Embed:
    """One page of the queue listing; ``page`` is clamped into range."""
    total_pages = max(1, math.ceil(snapshot.total_tracks / per_page))
    page = max(1, min(page, total_pages))
    start_idx = (page - 1) * per_page

    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_QUEUE.format(guild_name=guild_name),
        color=UIConstants.COLOR_NOW_PLAYING,
    )

    if snapshot.current:
        current = snapshot.current
        duration = DiscordUIMessages.LIVE if current.is_stream else current.duration_formatted
        embed.add_field(
            name=DiscordUIMessages.EMBED_NOW_PLAYING,
            value=f"**{truncate(current.title)}** `{duration}`",
            inline=False,
        )

    tracks = snapshot.upcoming[start_idx : start_idx + per_page]
    lines = [
        f"**{idx}.** {truncate(track.title)} `{track.duration_formatted}`"
        for idx, track in enumerate(tracks, start=start_idx + 1)
    ]
    embed.add_field(
        name=f"Up next ({snapshot.total_tracks})",
        value="\n".join(lines) if lines else DiscordUIMessages.STATE_QUEUE_UP_NEXT_EMPTY,
        inline=False,
    )

    footer = f"Page {page}/{total_pages} · Loop: {snapshot.loop_mode.label}"
    if snapshot.total_pending_ms:
        footer += f" · Total: {format_duration(snapshot.total_pending_ms // 1000)}"
    remaining = snapshot.total_tracks - (start_idx + len(tracks))
    if remaining > 0:
        footer += " · " + DiscordUIMessages.EMBED_QUEUE_FOOTER.format(remaining=remaining)
    embed.set_footer(text=footer)
    return embed


class QueueCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @app_commands.command(name="queue", description="Show the current queue.")
    @app_commands.describe(page="Page number")
    async def queue(self, interaction: discord.Interaction, page: int = 1) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        snapshot = self.container.session_controller.queue_snapshot(interaction.guild.id)
        if snapshot is None or (snapshot.current is None and snapshot.total_tracks == 0):
            await send_ephemeral(interaction, DiscordUIMessages.STATE_QUEUE_EMPTY)
            return

        embed = build_queue_embed(
            snapshot,
            guild_name=interaction.guild.name,
            page=page,
            per_page=self.container.settings.player.queue_page_size,
        )
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @app_commands.command(name="shuffle", description="Shuffle the queue.")
    async def shuffle(self, interaction: discord.Interaction) -> None:
        if not await self._check_channel(interaction):
            return

        assert interaction.guild is not None
        outcome = await self.container.session_controller.shuffle(interaction.guild.id)
        await send_ephemeral(interaction, outcome.message)

    @app_commands.command(name="loop", description="Set the loop mode.")
    @app_commands.describe(mode="Loop mode")
    @app_commands.choices(mode=LOOP_CHOICES)
    async def loop(self, interaction: discord.Interaction, mode: app_commands.Choice[str]) -> None:
        if not await self._check_channel(interaction):
            return

        assert interaction.guild is not None
        outcome = await self.container.session_controller.set_loop(
            interaction.guild.id, LoopMode(mode.value)
        )
        await send_ephemeral(interaction, outcome.message)

    @app_commands.command(name="remove", description="Remove a track from the queue.")
    @app_commands.describe(position="Position in queue (1-based)")
    async def remove(self, interaction: discord.Interaction, position: int) -> None:
        if not await self._check_channel(interaction):
            return

        assert interaction.guild is not None
        outcome = await self.container.session_controller.remove(interaction.guild.id, position)
        await send_ephemeral(interaction, outcome.message)

    async def _check_channel(self, interaction: discord.Interaction) -> bool:
        if interaction.guild is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
            return False
        session = self.container.session_controller.get_session(interaction.guild.id)
        return await ensure_same_channel(interaction, session)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(QueueCog(bot, container))
