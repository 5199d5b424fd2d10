"""Unit Tests for InfoCog and the /help embed."""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from guild_jukebox.domain.shared.constants import UIConstants
from guild_jukebox.domain.shared.messages import DiscordUIMessages
from guild_jukebox.infrastructure.discord.cogs.info_cog import InfoCog, build_help_embed, setup

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_bot():
    bot = MagicMock()
    bot.user = MagicMock()
    bot.user.display_name = "Jukebox"
    bot.user.display_avatar.url = "https://cdn.example.com/avatar.png"
    bot.add_cog = AsyncMock()
    return bot


@pytest.fixture
def info_cog(mock_bot):
    return InfoCog(mock_bot, MagicMock())


@pytest.fixture
def mock_interaction():
    interaction = MagicMock(spec=discord.Interaction)
    interaction.response = MagicMock()
    interaction.response.send_message = AsyncMock()
    return interaction


# =============================================================================
# build_help_embed
# =============================================================================


class TestBuildHelpEmbed:
    def test_title_and_color(self):
        embed = build_help_embed("Jukebox")

        assert embed.title == "Jukebox Commands"
        assert embed.color.value == UIConstants.COLOR_NOW_PLAYING
        assert embed.timestamp is not None

    def test_lists_every_music_command(self):
        embed = build_help_embed("Jukebox")
        music = next(f.value for f in embed.fields if f.name == "🎵 Music")

        for command in ("/play", "/skip", "/stop", "/pause", "/resume", "/queue", "/nowplaying",
                        "/shuffle", "/loop", "/volume", "/247", "/seek", "/remove"):
            assert f"`{command}`" in music

    def test_thumbnail_only_with_avatar(self):
        assert build_help_embed("Jukebox").thumbnail.url is None
        assert build_help_embed("Jukebox", "https://x/a.png").thumbnail.url == "https://x/a.png"


# =============================================================================
# /help command
# =============================================================================


class TestHelpCommand:
    @pytest.mark.asyncio
    async def test_help_is_ephemeral(self, info_cog, mock_interaction):
        await info_cog.help.callback(info_cog, mock_interaction)

        kwargs = mock_interaction.response.send_message.await_args.kwargs
        assert kwargs["ephemeral"] is True
        assert kwargs["embed"].title == "Jukebox Commands"
        assert kwargs["embed"].description == DiscordUIMessages.EMBED_HELP_DESCRIPTION
        assert kwargs["embed"].thumbnail.url == "https://cdn.example.com/avatar.png"

    @pytest.mark.asyncio
    async def test_help_before_login(self, info_cog, mock_bot, mock_interaction):
        mock_bot.user = None

        await info_cog.help.callback(info_cog, mock_interaction)

        assert mock_interaction.response.send_message.await_args.kwargs["embed"].title == "Bot Commands"


@pytest.mark.asyncio
async def test_setup_adds_cog(mock_bot):
    mock_bot.container = MagicMock()

    await setup(mock_bot)

    assert isinstance(mock_bot.add_cog.await_args.args[0], InfoCog)
