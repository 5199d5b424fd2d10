"""Playback control buttons attached to the now-playing message."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import discord

from guild_jukebox.domain.music.value_objects import LoopMode
from guild_jukebox.domain.shared.messages import DiscordUIMessages, EmojiConstants
from guild_jukebox.infrastructure.discord.guards.voice_guards import check_user_in_voice
from guild_jukebox.infrastructure.discord.views.base_view import BaseInteractiveView

if TYPE_CHECKING:
    from ....application.services.outcomes import CommandOutcome
    from ....config.container import Container
    from ....domain.music.entities import PlaybackSession

logger = logging.getLogger(__name__)


def control_custom_id(action: str, guild_id: int) -> str:
    return f"jukebox:{action}:{guild_id}"


def pause_button_state(paused: bool) -> tuple[str, discord.ButtonStyle]:
    if paused:
        return f"{EmojiConstants.PLAY} Resume", discord.ButtonStyle.success
    return f"{EmojiConstants.PAUSE} Pause", discord.ButtonStyle.secondary


def loop_button_state(mode: LoopMode) -> tuple[str, discord.ButtonStyle]:
    emoji = EmojiConstants.LOOP_TRACK if mode == LoopMode.TRACK else EmojiConstants.LOOP
    style = discord.ButtonStyle.secondary if mode == LoopMode.NONE else discord.ButtonStyle.primary
    return f"{emoji} Loop: {mode.label}", style


class ControlPanelView(BaseInteractiveView):
    """Fixed button set rendered from a session snapshot.

    A new view is built on every render, so labels always match the
    session. Custom ids are stable per guild, so an edit overwrites the
    message's previous button entries. Presses are routed to the session
    controller by guild.
    """

    def __init__(
        self,
        *,
        guild_id: int,
        container: Container,
        paused: bool = False,
        loop_mode: LoopMode = LoopMode.NONE,
        disabled: bool = False,
    ) -> None:
        super().__init__(timeout=None)
        self.guild_id = guild_id
        self.container = container

        for action, button in self._buttons().items():
            button.custom_id = control_custom_id(action, guild_id)
        self.pause_button.label, self.pause_button.style = pause_button_state(paused)
        self.loop_button.label, self.loop_button.style = loop_button_state(loop_mode)
        if disabled:
            self._disable_buttons()

    def _buttons(self) -> dict[str, discord.ui.Button[ControlPanelView]]:
        return {
            "pause": self.pause_button,
            "skip": self.skip_button,
            "stop": self.stop_button,
            "loop": self.loop_button,
            "shuffle": self.shuffle_button,
        }

    @classmethod
    def for_session(
        cls, session: PlaybackSession, container: Container, *, disabled: bool = False
    ) -> ControlPanelView:
        return cls(
            guild_id=session.guild_id,
            container=container,
            paused=session.paused,
            loop_mode=session.loop_mode,
            disabled=disabled,
        )

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        session = self.container.session_controller.get_session(self.guild_id)
        if session is None:
            await interaction.response.send_message(
                DiscordUIMessages.STATE_NOTHING_PLAYING, ephemeral=True
            )
            return False
        return await check_user_in_voice(interaction, session.voice_channel_id)

    async def _run(
        self,
        interaction: discord.Interaction,
        command: Callable[[int], Awaitable[CommandOutcome]],
    ) -> None:
        await interaction.response.defer()
        outcome = await command(self.guild_id)
        await interaction.followup.send(outcome.message, ephemeral=True)

    @discord.ui.button(label="⏸️ Pause", style=discord.ButtonStyle.secondary)
    async def pause_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[ControlPanelView]
    ) -> None:
        await self._run(interaction, self.container.session_controller.toggle_pause)

    @discord.ui.button(label="⏭️ Skip", style=discord.ButtonStyle.primary)
    async def skip_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[ControlPanelView]
    ) -> None:
        await self._run(interaction, self.container.session_controller.skip)

    @discord.ui.button(label="⏹️ Stop", style=discord.ButtonStyle.danger)
    async def stop_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[ControlPanelView]
    ) -> None:
        await self._run(interaction, self.container.session_controller.stop)

    @discord.ui.button(label="🔁 Loop: Off", style=discord.ButtonStyle.secondary)
    async def loop_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[ControlPanelView]
    ) -> None:
        await self._run(interaction, self.container.session_controller.cycle_loop)

    @discord.ui.button(label="🔀 Shuffle", style=discord.ButtonStyle.secondary)
    async def shuffle_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[ControlPanelView]
    ) -> None:
        await self._run(interaction, self.container.session_controller.shuffle)
