"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the session controller and its adapters.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.control_surface import ControlSurface
    from ..application.interfaces.track_search import TrackSearch
    from ..application.services.progress_ticker import ProgressTicker
    from ..application.services.session_controller import SessionController
    from ..domain.music.registry import SessionRegistry
    from ..domain.shared.events import EventBus
    from ..infrastructure.discord.services.notification_dispatcher import (
        NotificationDispatcher,
    )
    from ..infrastructure.lavalink.backend import WavelinkAudioBackend
    from ..infrastructure.lavalink.tracks import PlayableCache
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    # Domain
    _event_bus: EventBus | None = None
    _session_registry: SessionRegistry | None = None

    # Infrastructure adapters
    _playable_cache: PlayableCache | None = None
    _audio_backend: WavelinkAudioBackend | None = None
    _track_search: TrackSearch | None = None
    _control_surface: ControlSurface | None = None

    # Application services
    _progress_ticker: ProgressTicker | None = None
    _session_controller: SessionController | None = None

    # Event subscribers
    _notification_dispatcher: NotificationDispatcher | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Domain ===

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import get_event_bus

            self._event_bus = get_event_bus()
        return self._event_bus

    @property
    def session_registry(self) -> SessionRegistry:
        """Get the per-guild session registry."""
        if self._session_registry is None:
            from ..domain.music.registry import SessionRegistry

            self._session_registry = SessionRegistry(strict=self.settings.strict_contracts)
        return self._session_registry

    # === Infrastructure Adapters ===

    @property
    def playable_cache(self) -> PlayableCache:
        if self._playable_cache is None:
            from ..infrastructure.lavalink.tracks import PlayableCache

            self._playable_cache = PlayableCache(self.settings.player.playable_cache_size)
        return self._playable_cache

    @property
    def audio_backend(self) -> WavelinkAudioBackend:
        """Get the Lavalink audio backend."""
        if self._audio_backend is None:
            from ..infrastructure.lavalink.backend import WavelinkAudioBackend

            self._audio_backend = WavelinkAudioBackend(
                self.bot, self.settings.lavalink, self.playable_cache
            )
        return self._audio_backend

    @property
    def track_search(self) -> TrackSearch:
        """Get the Lavalink track search."""
        if self._track_search is None:
            from ..infrastructure.lavalink.backend import WavelinkTrackSearch

            self._track_search = WavelinkTrackSearch(self.settings.lavalink, self.playable_cache)
        return self._track_search

    @property
    def control_surface(self) -> ControlSurface:
        """Get the control panel renderer."""
        if self._control_surface is None:
            from ..infrastructure.discord.services.control_panel_renderer import (
                ControlPanelRenderer,
            )

            self._control_surface = ControlPanelRenderer(
                self.bot,
                self,
                cleanup_delay_seconds=self.settings.player.cleanup_delay_seconds,
            )
        return self._control_surface

    # === Application Services ===

    @property
    def progress_ticker(self) -> ProgressTicker:
        if self._progress_ticker is None:
            from ..application.services.progress_ticker import ProgressTicker

            self._progress_ticker = ProgressTicker(
                audio_backend=self.audio_backend,
                control_surface=self.control_surface,
                interval_seconds=self.settings.player.progress_interval_seconds,
            )
        return self._progress_ticker

    @property
    def session_controller(self) -> SessionController:
        """Get the session controller."""
        if self._session_controller is None:
            from ..application.services.session_controller import SessionController

            self._session_controller = SessionController(
                registry=self.session_registry,
                audio_backend=self.audio_backend,
                track_search=self.track_search,
                control_surface=self.control_surface,
                progress_ticker=self.progress_ticker,
                event_bus=self.event_bus,
                default_volume=self.settings.player.default_volume,
                clear_messages_on_destroy=self.settings.player.clear_messages_on_destroy,
            )
        return self._session_controller

    # === Event Subscribers ===

    @property
    def notification_dispatcher(self) -> NotificationDispatcher:
        """Get the operator notification subscriber."""
        if self._notification_dispatcher is None:
            from ..infrastructure.discord.services.notification_dispatcher import (
                NotificationDispatcher,
            )

            self._notification_dispatcher = NotificationDispatcher(
                self.bot, self.settings.notifications, self.event_bus
            )
        return self._notification_dispatcher

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Wire the controller to its backend and start subscribers."""
        # Building the controller registers it as the backend's event handler
        _ = self.session_controller
        self.notification_dispatcher.subscribe()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._notification_dispatcher is not None:
            self._notification_dispatcher.unsubscribe()

        if self._session_controller is not None:
            try:
                await self._session_controller.shutdown()
            except Exception as exc:
                logger.warning("Failed shutting down session controller: %r", exc)

        if self._audio_backend is not None:
            try:
                await self._audio_backend.close_nodes()
            except Exception as exc:
                logger.warning("Failed closing Lavalink nodes: %r", exc)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
