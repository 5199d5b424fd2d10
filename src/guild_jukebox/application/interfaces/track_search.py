"""Port interface for resolving user queries into tracks."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

from guild_jukebox.domain.music.entities import Track
from guild_jukebox.domain.shared.types import DiscordSnowflake


class SearchResult(BaseModel):
    """Tracks found for a query; ``playlist_name`` is set when a playlist was loaded."""

    model_config = ConfigDict(frozen=True)

    tracks: list[Track] = Field(default_factory=list)
    playlist_name: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    @property
    def is_playlist(self) -> bool:
        return self.playlist_name is not None

    @property
    def first(self) -> Track | None:
        return self.tracks[0] if self.tracks else None


class TrackSearch(ABC):
    """Interface for the external search collaborator."""

    @abstractmethod
    async def search(
        self,
        query: str,
        *,
        requester_id: DiscordSnowflake | None = None,
        requester_name: str | None = None,
    ) -> SearchResult:
        """Resolve a URL or free-text query.

        Returned tracks carry the requester metadata.
        """
        ...
