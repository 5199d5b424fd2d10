"""Tests for QueueCog and the paged queue embed."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from discord import app_commands

from guild_jukebox.application.services.outcomes import CommandOutcome, QueueSnapshot
from guild_jukebox.domain.music.entities import PlaybackSession
from guild_jukebox.domain.music.value_objects import LoopMode
from guild_jukebox.domain.shared.messages import DiscordUIMessages
from guild_jukebox.infrastructure.discord.cogs.queue_cog import (
    LOOP_CHOICES,
    QueueCog,
    build_queue_embed,
)

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def snapshot(make_track):
    def _build(upcoming: int = 3, *, current: bool = True, loop_mode: LoopMode = LoopMode.NONE) -> QueueSnapshot:
        tracks = [make_track(f"Song {i}") for i in range(1, upcoming + 1)]
        return QueueSnapshot(
            current=make_track("Now Song") if current else None,
            upcoming=tracks,
            loop_mode=loop_mode,
            persistent=False,
            total_pending_ms=sum(t.duration_ms for t in tracks),
        )

    return _build


@pytest.fixture
def mock_container():
    container = MagicMock()
    controller = container.session_controller
    controller.get_session = MagicMock(return_value=None)
    controller.queue_snapshot = MagicMock(return_value=None)
    controller.shuffle = AsyncMock(return_value=CommandOutcome.ok("Shuffled."))
    controller.set_loop = AsyncMock(return_value=CommandOutcome.ok("Loop: Track"))
    controller.remove = AsyncMock(return_value=CommandOutcome.ok("Removed."))
    container.settings.player.queue_page_size = 10
    return container


@pytest.fixture
def cog(mock_container):
    return QueueCog(MagicMock(), mock_container)


@pytest.fixture
def interaction():
    i = MagicMock(spec=discord.Interaction)
    i.response = MagicMock()
    i.response.is_done.return_value = False
    i.response.send_message = AsyncMock()
    i.followup = MagicMock()
    i.followup.send = AsyncMock()
    i.guild = MagicMock()
    i.guild.id = 987654321
    i.guild.name = "Test Server"
    user = MagicMock(spec=discord.Member)
    user.voice = MagicMock()
    user.voice.channel = MagicMock()
    user.voice.channel.id = 555
    i.user = user
    return i


def _sent_text(interaction) -> str:
    return interaction.response.send_message.await_args.args[0]


# =============================================================================
# build_queue_embed
# =============================================================================


class TestBuildQueueEmbed:
    def test_current_and_upcoming(self, snapshot):
        embed = build_queue_embed(snapshot(3), guild_name="Test Server", page=1, per_page=10)

        assert embed.title == "📋 Queue for Test Server"
        now, upcoming = embed.fields
        assert now.name == DiscordUIMessages.EMBED_NOW_PLAYING
        assert "**Now Song** `3:20`" == now.value
        assert upcoming.name == "Up next (3)"
        assert upcoming.value.splitlines()[0] == "**1.** Song 1 `3:20`"
        assert embed.footer.text == "Page 1/1 · Loop: Off · Total: 10:00"

    def test_second_page_numbering(self, snapshot):
        embed = build_queue_embed(snapshot(12), guild_name="G", page=2, per_page=5)

        lines = embed.fields[1].value.splitlines()
        assert lines[0].startswith("**6.** Song 6")
        assert len(lines) == 5
        assert "Page 2/3" in embed.footer.text
        assert "+2 more tracks in queue." in embed.footer.text

    def test_page_clamped(self, snapshot):
        embed = build_queue_embed(snapshot(3), guild_name="G", page=99, per_page=10)

        assert embed.footer.text.startswith("Page 1/1")

    def test_empty_upcoming(self, snapshot):
        embed = build_queue_embed(snapshot(0), guild_name="G", page=1, per_page=10)

        assert embed.fields[1].value == DiscordUIMessages.STATE_QUEUE_UP_NEXT_EMPTY
        assert "Total" not in embed.footer.text

    def test_no_current_track(self, snapshot):
        embed = build_queue_embed(snapshot(2, current=False), guild_name="G", page=1, per_page=10)

        assert len(embed.fields) == 1

    def test_stream_current(self, make_track):
        snap = QueueSnapshot(
            current=make_track("Radio", is_stream=True, duration_ms=0),
            upcoming=[],
            loop_mode=LoopMode.QUEUE,
            persistent=True,
            total_pending_ms=0,
        )

        embed = build_queue_embed(snap, guild_name="G", page=1, per_page=10)

        assert DiscordUIMessages.LIVE in embed.fields[0].value
        assert "Loop: Queue" in embed.footer.text


def test_loop_choices_match_modes():
    assert [c.value for c in LOOP_CHOICES] == [m.value for m in LoopMode]
    assert all(isinstance(c, app_commands.Choice) for c in LOOP_CHOICES)


# =============================================================================
# Commands
# =============================================================================


class TestQueueCommand:
    @pytest.mark.asyncio
    async def test_empty_queue(self, cog, interaction):
        await cog.queue.callback(cog, interaction)

        assert _sent_text(interaction) == DiscordUIMessages.STATE_QUEUE_EMPTY

    @pytest.mark.asyncio
    async def test_idle_session_with_nothing_queued(self, cog, mock_container, interaction, snapshot):
        mock_container.session_controller.queue_snapshot.return_value = snapshot(0, current=False)

        await cog.queue.callback(cog, interaction)

        assert _sent_text(interaction) == DiscordUIMessages.STATE_QUEUE_EMPTY

    @pytest.mark.asyncio
    async def test_sends_embed(self, cog, mock_container, interaction, snapshot):
        mock_container.session_controller.queue_snapshot.return_value = snapshot(2)

        await cog.queue.callback(cog, interaction, page=1)

        mock_container.session_controller.queue_snapshot.assert_called_once_with(987654321)
        kwargs = interaction.response.send_message.await_args.kwargs
        assert kwargs["ephemeral"] is True
        assert kwargs["embed"].title == "📋 Queue for Test Server"

    @pytest.mark.asyncio
    async def test_requires_voice(self, cog, mock_container, interaction):
        interaction.user.voice = None

        await cog.queue.callback(cog, interaction)

        assert _sent_text(interaction) == DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE
        mock_container.session_controller.queue_snapshot.assert_not_called()


class TestMutatingCommands:
    @pytest.mark.asyncio
    async def test_shuffle(self, cog, mock_container, interaction):
        await cog.shuffle.callback(cog, interaction)

        mock_container.session_controller.shuffle.assert_awaited_once_with(987654321)
        interaction.response.send_message.assert_awaited_once_with("Shuffled.", ephemeral=True)

    @pytest.mark.asyncio
    async def test_loop(self, cog, mock_container, interaction):
        await cog.loop.callback(cog, interaction, mode=LOOP_CHOICES[1])

        mock_container.session_controller.set_loop.assert_awaited_once_with(987654321, LoopMode.TRACK)

    @pytest.mark.asyncio
    async def test_remove(self, cog, mock_container, interaction):
        await cog.remove.callback(cog, interaction, position=2)

        mock_container.session_controller.remove.assert_awaited_once_with(987654321, 2)

    @pytest.mark.asyncio
    async def test_different_channel_rejected(self, cog, mock_container, interaction):
        mock_container.session_controller.get_session.return_value = PlaybackSession(
            guild_id=987654321, voice_channel_id=999, text_channel_id=777
        )

        await cog.shuffle.callback(cog, interaction)

        assert _sent_text(interaction) == DiscordUIMessages.STATE_MUST_SHARE_CHANNEL
        mock_container.session_controller.shuffle.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_outside_guild(self, cog, mock_container, interaction):
        interaction.guild = None

        await cog.remove.callback(cog, interaction, position=1)

        assert _sent_text(interaction) == DiscordUIMessages.STATE_SERVER_ONLY
        mock_container.session_controller.remove.assert_not_awaited()
