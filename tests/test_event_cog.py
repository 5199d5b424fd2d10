"""
Unit Tests for EventCog

Tests for the gateway and guild listeners:
- Lifecycle logging (on_connect, on_disconnect, on_resumed)
- Guild join publishes GuildJoined
- Guild removal destroys the session before publishing GuildLeft
- Guild rename logging
- setup() wiring
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from discord.ext import commands

from guild_jukebox.domain.music.value_objects import DestroyReason
from guild_jukebox.domain.shared.events import GuildJoined, GuildLeft
from guild_jukebox.infrastructure.discord.cogs.event_cog import EventCog, setup

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_bot():
    """Create a mock Discord bot in three guilds."""
    bot = MagicMock(spec=commands.Bot)
    bot.guilds = [MagicMock(), MagicMock(), MagicMock()]
    bot.add_cog = AsyncMock()
    return bot


@pytest.fixture
def mock_container():
    container = MagicMock()
    container.event_bus.publish = AsyncMock()
    container.session_controller.destroy = AsyncMock(return_value=True)
    return container


@pytest.fixture
def event_cog(mock_bot, mock_container):
    return EventCog(mock_bot, mock_container)


@pytest.fixture
def mock_guild():
    guild = MagicMock(spec=discord.Guild)
    guild.id = 111111111
    guild.name = "Test Guild"
    guild.member_count = 25
    guild.owner_id = 222222222
    return guild


# =============================================================================
# Lifecycle Events
# =============================================================================


class TestLifecycleEvents:
    @pytest.mark.asyncio
    async def test_on_connect_logs(self, event_cog, caplog):
        caplog.set_level(logging.INFO)

        await event_cog.on_connect()

        assert "WebSocket connected" in caplog.text

    @pytest.mark.asyncio
    async def test_on_disconnect_warns(self, event_cog, caplog):
        await event_cog.on_disconnect()

        assert "WebSocket disconnected" in caplog.text

    @pytest.mark.asyncio
    async def test_on_resumed_logged_once(self, event_cog, caplog):
        """Resumes are frequent; only the first one is logged."""
        caplog.set_level(logging.INFO)

        await event_cog.on_resumed()
        await event_cog.on_resumed()

        assert caplog.text.count("WebSocket session resumed") == 1


# =============================================================================
# Guild Events
# =============================================================================


class TestGuildEvents:
    @pytest.mark.asyncio
    async def test_guild_join_publishes_event(self, event_cog, mock_container, mock_guild):
        await event_cog.on_guild_join(mock_guild)

        event = mock_container.event_bus.publish.await_args.args[0]
        assert isinstance(event, GuildJoined)
        assert event.guild_id == 111111111
        assert event.guild_name == "Test Guild"
        assert event.member_count == 25
        assert event.owner_id == 222222222
        assert event.total_guilds == 3

    @pytest.mark.asyncio
    async def test_guild_join_unknown_member_count(self, event_cog, mock_container, mock_guild):
        mock_guild.member_count = None

        await event_cog.on_guild_join(mock_guild)

        assert mock_container.event_bus.publish.await_args.args[0].member_count == 0

    @pytest.mark.asyncio
    async def test_guild_remove_destroys_then_publishes(self, event_cog, mock_container, mock_guild):
        order: list[str] = []
        mock_container.session_controller.destroy.side_effect = lambda *a: order.append("destroy")
        mock_container.event_bus.publish.side_effect = lambda e: order.append(type(e).__name__)

        await event_cog.on_guild_remove(mock_guild)

        mock_container.session_controller.destroy.assert_awaited_once_with(111111111, DestroyReason.GUILD_REMOVED)
        assert order == ["destroy", "GuildLeft"]

    @pytest.mark.asyncio
    async def test_guild_left_event_fields(self, event_cog, mock_container, mock_guild):
        await event_cog.on_guild_remove(mock_guild)

        event = mock_container.event_bus.publish.await_args.args[0]
        assert isinstance(event, GuildLeft)
        assert event.guild_name == "Test Guild"
        assert event.total_guilds == 3

    @pytest.mark.asyncio
    async def test_guild_rename_logged(self, event_cog, caplog):
        caplog.set_level(logging.INFO)
        before = MagicMock(spec=discord.Guild)
        before.name = "Old"
        after = MagicMock(spec=discord.Guild)
        after.name = "New"

        await event_cog.on_guild_update(before, after)

        assert "Old -> New" in caplog.text

    @pytest.mark.asyncio
    async def test_guild_update_without_rename_is_quiet(self, event_cog, caplog):
        caplog.set_level(logging.INFO)
        guild = MagicMock(spec=discord.Guild)
        guild.name = "Same"

        await event_cog.on_guild_update(guild, guild)

        assert "renamed" not in caplog.text


# =============================================================================
# Setup
# =============================================================================


class TestSetup:
    @pytest.mark.asyncio
    async def test_setup_adds_cog(self, mock_bot, mock_container):
        mock_bot.container = mock_container

        await setup(mock_bot)

        cog = mock_bot.add_cog.await_args.args[0]
        assert isinstance(cog, EventCog)
        assert cog.container is mock_container
