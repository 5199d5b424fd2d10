"""Lavalink (wavelink) adapters for the audio backend and track search."""

from guild_jukebox.infrastructure.lavalink.backend import WavelinkAudioBackend, WavelinkTrackSearch
from guild_jukebox.infrastructure.lavalink.tracks import PlayableCache, track_from_playable

__all__ = [
    "PlayableCache",
    "WavelinkAudioBackend",
    "WavelinkTrackSearch",
    "track_from_playable",
]
