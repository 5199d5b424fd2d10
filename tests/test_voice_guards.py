"""Tests for the voice guard functions and cog setup() functions."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from guild_jukebox.domain.music.entities import PlaybackSession
from guild_jukebox.domain.shared.messages import DiscordUIMessages
from guild_jukebox.infrastructure.discord.guards.voice_guards import (
    check_user_in_voice,
    ensure_bot_can_join,
    ensure_same_channel,
    ensure_user_in_voice,
    send_ephemeral,
)


def _make_interaction(
    *,
    in_guild: bool = True,
    user_is_member: bool = True,
    in_voice: bool = True,
    user_channel_id: int = 100,
    responded: bool = False,
) -> MagicMock:
    interaction = MagicMock(spec=discord.Interaction)
    interaction.response = MagicMock()
    interaction.response.is_done = MagicMock(return_value=responded)
    interaction.response.send_message = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()

    if user_is_member:
        user = MagicMock(spec=discord.Member)
        if in_voice:
            user.voice = MagicMock()
            user.voice.channel = MagicMock()
            user.voice.channel.id = user_channel_id
        else:
            user.voice = None
    else:
        user = MagicMock(spec=discord.User)

    interaction.user = user
    interaction.guild = MagicMock() if in_guild else None
    return interaction


def _sent(interaction: MagicMock) -> str:
    return interaction.response.send_message.call_args[0][0]


def _session(voice_channel_id: int = 100) -> PlaybackSession:
    return PlaybackSession(guild_id=1, voice_channel_id=voice_channel_id, text_channel_id=5)


# =============================================================================
# send_ephemeral
# =============================================================================


class TestSendEphemeral:
    @pytest.mark.asyncio
    async def test_fresh_interaction_uses_response(self):
        interaction = _make_interaction()

        await send_ephemeral(interaction, "hi")

        interaction.response.send_message.assert_awaited_once_with("hi", ephemeral=True)
        interaction.followup.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deferred_interaction_uses_followup(self):
        interaction = _make_interaction(responded=True)

        await send_ephemeral(interaction, "hi")

        interaction.followup.send.assert_awaited_once_with("hi", ephemeral=True)


# =============================================================================
# ensure_user_in_voice / ensure_same_channel
# =============================================================================


class TestEnsureUserInVoice:
    @pytest.mark.asyncio
    async def test_outside_guild(self):
        interaction = _make_interaction(in_guild=False)

        assert await ensure_user_in_voice(interaction) is None
        assert _sent(interaction) == DiscordUIMessages.STATE_SERVER_ONLY

    @pytest.mark.asyncio
    async def test_not_a_member(self):
        interaction = _make_interaction(user_is_member=False)

        assert await ensure_user_in_voice(interaction) is None
        assert _sent(interaction) == DiscordUIMessages.STATE_VERIFY_VOICE_FAILED

    @pytest.mark.asyncio
    async def test_not_in_voice(self):
        interaction = _make_interaction(in_voice=False)

        assert await ensure_user_in_voice(interaction) is None
        assert _sent(interaction) == DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE

    @pytest.mark.asyncio
    async def test_returns_channel(self):
        interaction = _make_interaction(user_channel_id=321)

        channel = await ensure_user_in_voice(interaction)

        assert channel.id == 321
        interaction.response.send_message.assert_not_awaited()


class TestEnsureSameChannel:
    @pytest.mark.asyncio
    async def test_no_session_only_needs_voice(self):
        assert await ensure_same_channel(_make_interaction(), None) is True

    @pytest.mark.asyncio
    async def test_same_channel(self):
        assert await ensure_same_channel(_make_interaction(user_channel_id=100), _session(100)) is True

    @pytest.mark.asyncio
    async def test_different_channel(self):
        interaction = _make_interaction(user_channel_id=100)

        assert await ensure_same_channel(interaction, _session(200)) is False
        assert _sent(interaction) == DiscordUIMessages.STATE_MUST_SHARE_CHANNEL

    @pytest.mark.asyncio
    async def test_not_in_voice(self):
        interaction = _make_interaction(in_voice=False)

        assert await ensure_same_channel(interaction, _session()) is False


# =============================================================================
# ensure_bot_can_join
# =============================================================================


class TestEnsureBotCanJoin:
    @staticmethod
    def _channel(connect: bool, speak: bool) -> MagicMock:
        channel = MagicMock()
        permissions = MagicMock()
        permissions.connect = connect
        permissions.speak = speak
        channel.permissions_for = MagicMock(return_value=permissions)
        return channel

    @pytest.mark.asyncio
    async def test_has_permissions(self):
        interaction = _make_interaction()

        assert await ensure_bot_can_join(interaction, self._channel(True, True)) is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("connect,speak", [(False, True), (True, False)])
    async def test_missing_permission(self, connect, speak):
        interaction = _make_interaction()

        assert await ensure_bot_can_join(interaction, self._channel(connect, speak)) is False
        assert _sent(interaction) == DiscordUIMessages.ERROR_BOT_MISSING_VOICE_PERMISSIONS

    @pytest.mark.asyncio
    async def test_no_guild(self):
        interaction = _make_interaction(in_guild=False)

        assert await ensure_bot_can_join(interaction, self._channel(True, True)) is False


# =============================================================================
# check_user_in_voice
# =============================================================================


class TestCheckUserInVoice:
    @pytest.mark.asyncio
    async def test_user_not_member_rejects(self):
        interaction = _make_interaction(user_is_member=False)

        assert await check_user_in_voice(interaction, 100) is False
        assert _sent(interaction) == DiscordUIMessages.STATE_VERIFY_VOICE_FAILED

    @pytest.mark.asyncio
    async def test_user_not_in_voice_rejects(self):
        interaction = _make_interaction(in_voice=False)

        assert await check_user_in_voice(interaction, 100) is False
        assert _sent(interaction) == DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE

    @pytest.mark.asyncio
    async def test_user_in_different_channel_rejects(self):
        interaction = _make_interaction(user_channel_id=100)

        assert await check_user_in_voice(interaction, 200) is False
        assert _sent(interaction) == DiscordUIMessages.STATE_MUST_SHARE_CHANNEL

    @pytest.mark.asyncio
    async def test_user_in_same_channel_passes(self):
        interaction = _make_interaction(user_channel_id=100)

        assert await check_user_in_voice(interaction, 100) is True


# =============================================================================
# setup() functions: missing container raises RuntimeError
# =============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "module",
    [
        "guild_jukebox.infrastructure.discord.cogs.playback_cog",
        "guild_jukebox.infrastructure.discord.cogs.queue_cog",
        "guild_jukebox.infrastructure.discord.cogs.info_cog",
        "guild_jukebox.infrastructure.discord.cogs.event_cog",
        "guild_jukebox.infrastructure.lavalink.event_cog",
    ],
)
async def test_cog_setup_no_container(module):
    import importlib

    setup = importlib.import_module(module).setup
    bot = MagicMock()
    del bot.container

    with pytest.raises(RuntimeError):
        await setup(bot)
