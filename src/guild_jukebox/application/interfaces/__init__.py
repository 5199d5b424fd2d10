"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from guild_jukebox.application.interfaces.audio_backend import AudioBackend
from guild_jukebox.application.interfaces.control_surface import ControlSurface
from guild_jukebox.application.interfaces.track_search import SearchResult, TrackSearch

__all__ = [
    "AudioBackend",
    "ControlSurface",
    "SearchResult",
    "TrackSearch",
]
