"""Port interface for the external audio node."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from guild_jukebox.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.backend_events import BackendEvent
    from ...domain.music.entities import Track


class AudioBackend(ABC):
    """Outbound commands the session controller issues to the audio node.

    Implementations decode and stream audio elsewhere; they report
    lifecycle changes back as :mod:`guild_jukebox.domain.music.backend_events`.
    """

    @abstractmethod
    async def connect(self, guild_id: DiscordSnowflake, voice_channel_id: DiscordSnowflake) -> bool:
        """Join a voice channel and create the guild's player."""
        ...

    @abstractmethod
    async def move(self, guild_id: DiscordSnowflake, voice_channel_id: DiscordSnowflake) -> bool:
        """Move an existing player to another voice channel."""
        ...

    @abstractmethod
    async def play(self, guild_id: DiscordSnowflake, track: "Track") -> None:
        """Start playing *track*, replacing whatever is loaded."""
        ...

    @abstractmethod
    async def pause(self, guild_id: DiscordSnowflake, paused: bool) -> None:
        ...

    @abstractmethod
    async def skip(self, guild_id: DiscordSnowflake) -> None:
        """Stop the current track; the node reports the end asynchronously."""
        ...

    @abstractmethod
    async def seek(self, guild_id: DiscordSnowflake, position_ms: int) -> None:
        """Seek the current track. Callers validate the target first."""
        ...

    @abstractmethod
    async def set_volume(self, guild_id: DiscordSnowflake, level: int) -> None:
        ...

    @abstractmethod
    async def destroy(self, guild_id: DiscordSnowflake) -> None:
        """Tear down the player and leave voice."""
        ...

    @abstractmethod
    def position(self, guild_id: DiscordSnowflake) -> int | None:
        """Backend-reported playback position in milliseconds, or None without a player."""
        ...

    @abstractmethod
    def is_connected(self, guild_id: DiscordSnowflake) -> bool:
        ...

    @abstractmethod
    def set_event_handler(self, handler: Callable[["BackendEvent"], Awaitable[None]]) -> None:
        """Set the callback receiving events the adapter raises itself."""
        ...
