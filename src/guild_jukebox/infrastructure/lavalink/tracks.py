"""Conversion between wavelink playables and domain tracks."""

from __future__ import annotations

import logging
from collections import OrderedDict

import wavelink

from guild_jukebox.domain.music.entities import Track
from guild_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown title"
MAX_TITLE_LENGTH = 500


def track_from_playable(
    playable: wavelink.Playable,
    *,
    requester_id: int | None = None,
    requester_name: str | None = None,
) -> Track:
    title = (playable.title or UNKNOWN_TITLE)[:MAX_TITLE_LENGTH]
    is_stream = bool(playable.is_stream)
    return Track(
        title=title,
        uri=playable.uri or "",
        duration_ms=0 if is_stream else max(int(playable.length or 0), 0),
        author=playable.author or "",
        thumbnail_url=playable.artwork,
        identifier=playable.identifier or "",
        is_stream=is_stream,
        encoded=playable.encoded or "",
        requester_id=requester_id,
        requester_name=requester_name or None,
    )


def playable_from_track(track: Track) -> wavelink.Playable:
    """Rebuild a playable from the encoded handle and the metadata the node returned."""
    return wavelink.Playable(
        {
            "encoded": track.encoded,
            "info": {
                "identifier": track.identifier,
                "isSeekable": track.is_seekable,
                "author": track.author,
                "length": track.duration_ms,
                "isStream": track.is_stream,
                "position": 0,
                "title": track.title,
                "uri": track.uri or None,
                "artworkUrl": track.thumbnail_url,
                "isrc": None,
                "sourceName": "unknown",
            },
            "pluginInfo": {},
            "userData": {},
        }
    )


class PlayableCache:
    """Bounded LRU of wavelink playables keyed by their encoded handle."""

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._items: OrderedDict[str, wavelink.Playable] = OrderedDict()

    def __len__(self) -> int:
        return len(self._items)

    def put(self, playable: wavelink.Playable) -> None:
        if not playable.encoded:
            return
        self._items[playable.encoded] = playable
        self._items.move_to_end(playable.encoded)
        while len(self._items) > self._capacity:
            self._items.popitem(last=False)

    def get(self, encoded: str) -> wavelink.Playable | None:
        playable = self._items.get(encoded)
        if playable is not None:
            self._items.move_to_end(encoded)
        return playable

    def playable_for(self, track: Track) -> wavelink.Playable:
        playable = self.get(track.encoded)
        if playable is None:
            logger.debug(LogTemplates.BACKEND_PLAYABLE_MISS, track.title)
            playable = playable_from_track(track)
            self.put(playable)
        return playable

    def clear(self) -> None:
        self._items.clear()
