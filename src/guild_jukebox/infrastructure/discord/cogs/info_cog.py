"""Informational commands."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from guild_jukebox.domain.shared.constants import UIConstants
from guild_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def build_help_embed(bot_name: str, avatar_url: str | None = None) -> discord.Embed:
    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_HELP_TITLE.format(bot_name=bot_name),
        description=DiscordUIMessages.EMBED_HELP_DESCRIPTION,
        color=UIConstants.COLOR_NOW_PLAYING,
    )
    embed.add_field(name="🎵 Music", value=DiscordUIMessages.EMBED_HELP_MUSIC, inline=False)
    embed.add_field(name="🛠️ Utility", value=DiscordUIMessages.EMBED_HELP_UTILITY, inline=False)
    if avatar_url:
        embed.set_thumbnail(url=avatar_url)
    embed.timestamp = datetime.now(UTC)
    return embed


class InfoCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @app_commands.command(name="help", description="List the available commands.")
    async def help(self, interaction: discord.Interaction) -> None:
        me = self.bot.user
        embed = build_help_embed(
            me.display_name if me else "Bot",
            me.display_avatar.url if me else None,
        )
        await interaction.response.send_message(embed=embed, ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(InfoCog(bot, container))
