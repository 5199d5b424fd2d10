"""Discord UI views and components."""

from __future__ import annotations

from guild_jukebox.infrastructure.discord.views.base_view import BaseInteractiveView
from guild_jukebox.infrastructure.discord.views.control_panel_view import ControlPanelView

__all__ = [
    "BaseInteractiveView",
    "ControlPanelView",
]
