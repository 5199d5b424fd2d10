"""Discord event listeners for lifecycle and guild membership events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from guild_jukebox.domain.music.value_objects import DestroyReason
from guild_jukebox.domain.shared.events import GuildJoined, GuildLeft
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


class EventCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container
        self._resumed_logged_once = False

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_connect(self) -> None:
        logger.info("WebSocket connected")

    @commands.Cog.listener()
    async def on_disconnect(self) -> None:
        logger.warning("WebSocket disconnected")

    @commands.Cog.listener()
    async def on_resumed(self) -> None:
        if not self._resumed_logged_once:
            logger.info("WebSocket session resumed")
            self._resumed_logged_once = True

    # ─────────────────────────────────────────────────────────────────
    # Guild Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info(LogTemplates.GUILD_JOINED, guild.name, guild.id)
        await self.container.event_bus.publish(
            GuildJoined(
                guild_id=guild.id,
                guild_name=guild.name,
                member_count=guild.member_count or 0,
                owner_id=guild.owner_id,
                total_guilds=len(self.bot.guilds),
            )
        )

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        logger.info(LogTemplates.GUILD_LEFT, guild.name, guild.id)
        await self.container.session_controller.destroy(guild.id, DestroyReason.GUILD_REMOVED)
        await self.container.event_bus.publish(
            GuildLeft(
                guild_id=guild.id,
                guild_name=guild.name,
                member_count=guild.member_count or 0,
                total_guilds=len(self.bot.guilds),
            )
        )

    @commands.Cog.listener()
    async def on_guild_update(self, before: discord.Guild, after: discord.Guild) -> None:
        if before.name != after.name:
            logger.info("Guild renamed: %s -> %s", before.name, after.name)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(EventCog(bot, container))
