"""Base class for interactive Discord views with common patterns."""

from __future__ import annotations

import logging
from typing import Any

import discord

from guild_jukebox.domain.shared.messages import DiscordUIMessages

logger = logging.getLogger(__name__)


class BaseInteractiveView(discord.ui.View):
    """Base view providing message tracking, button disabling and error replies."""

    def __init__(self, *, timeout: float | None = 180.0) -> None:
        super().__init__(timeout=timeout)
        self._message: discord.Message | None = None

    def set_message(self, message: discord.Message) -> None:
        self._message = message

    def _disable_buttons(self) -> None:
        for item in self.children:
            if isinstance(item, discord.ui.Button):
                item.disabled = True

    async def on_error(
        self,
        interaction: discord.Interaction,
        error: Exception,
        item: discord.ui.Item[Any],
    ) -> None:
        logger.error(
            "Error handling %s in %s", type(item).__name__, type(self).__name__, exc_info=error
        )
        try:
            if interaction.response.is_done():
                await interaction.followup.send(DiscordUIMessages.ERROR_BUTTON_FAILED, ephemeral=True)
            else:
                await interaction.response.send_message(
                    DiscordUIMessages.ERROR_BUTTON_FAILED, ephemeral=True
                )
        except discord.HTTPException:
            logger.debug("Failed to report button error")
