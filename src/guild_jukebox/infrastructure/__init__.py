"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Lavalink (wavelink audio backend, track search, node event listeners)
- Discord (bot, cogs, control panel, notifications)
"""

from guild_jukebox.infrastructure.discord.bot import create_bot
from guild_jukebox.infrastructure.lavalink.backend import WavelinkAudioBackend, WavelinkTrackSearch

__all__ = [
    "create_bot",
    "WavelinkAudioBackend",
    "WavelinkTrackSearch",
]
