"""Discord cogs - command handlers."""

from guild_jukebox.infrastructure.discord.cogs.event_cog import EventCog
from guild_jukebox.infrastructure.discord.cogs.info_cog import InfoCog
from guild_jukebox.infrastructure.discord.cogs.playback_cog import PlaybackCog
from guild_jukebox.infrastructure.discord.cogs.queue_cog import QueueCog

__all__ = [
    "PlaybackCog",
    "QueueCog",
    "InfoCog",
    "EventCog",
]
