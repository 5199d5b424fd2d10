"""Port interface for the interactive now-playing message."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from guild_jukebox.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import PlaybackSession
    from ...domain.music.value_objects import ControlMessageRef


class ControlSurface(ABC):
    """Renders a session snapshot into a chat message with playback buttons.

    Every method is best-effort: platform errors are logged by the
    implementation and never raised to the controller.
    """

    @abstractmethod
    async def render(self, session: "PlaybackSession") -> "ControlMessageRef | None":
        """Send a fresh control message for the current track.

        The previous message is left alone; the caller deletes it once the
        new one exists.
        """
        ...

    @abstractmethod
    async def refresh(self, session: "PlaybackSession", position_ms: int | None = None) -> None:
        """Re-render the existing control message from the session snapshot."""
        ...

    @abstractmethod
    async def disable(self, session: "PlaybackSession") -> None:
        """Put every button of the control message into its disabled state."""
        ...

    @abstractmethod
    async def delete(self, ref: "ControlMessageRef") -> None:
        ...

    @abstractmethod
    async def send_notice(
        self,
        channel_id: DiscordSnowflake,
        message: str,
        *,
        title: str | None = None,
    ) -> None:
        """Post a plain (or titled) notice in a text channel."""
        ...

    @abstractmethod
    async def clear_bot_messages(self, channel_id: DiscordSnowflake) -> None:
        """Bulk-delete the bot's recent messages in a text channel."""
        ...
