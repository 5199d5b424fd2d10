# ruff: noqa: N999
"""
Domain Layer

Contains pure playback logic organized by bounded contexts:
- shared/: Cross-cutting types, messages, events and exceptions
- music/: Track, queue, session and audio backend event models
"""

from guild_jukebox.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
