import itertools
import random
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def make_track():
    """Factory for bounded tracks with distinct URIs."""
    from guild_jukebox.domain.music.entities import Track

    counter = itertools.count(1)

    def _make(title: str | None = None, **overrides):
        n = next(counter)
        fields = {
            "title": title or f"Track {n}",
            "uri": f"https://example.com/watch?v={n}",
            "duration_ms": 200_000,
            "author": "Test Artist",
            "identifier": f"id-{n}",
            "encoded": f"encoded-{n}",
            "requester_id": 111,
            "requester_name": "Tester",
        }
        fields.update(overrides)
        return Track(**fields)

    return _make


@pytest.fixture
def sample_track(make_track):
    """Create a sample track for testing."""
    return make_track("Test Track", thumbnail_url="https://thumbnail.url/test.jpg")


@pytest.fixture
def sample_session():
    """Create an idle guild playback session for testing."""
    from guild_jukebox.domain.music.entities import PlaybackSession

    return PlaybackSession(guild_id=987654321, voice_channel_id=555, text_channel_id=777)


# ============================================================================
# Session Controller Fixtures
# ============================================================================

GUILD_ID = 987654321
VOICE_CHANNEL_ID = 555
TEXT_CHANNEL_ID = 777


@pytest.fixture
def audio_backend():
    """Audio backend double: every command succeeds, position is 0."""
    backend = MagicMock()
    backend.connect = AsyncMock(return_value=True)
    backend.move = AsyncMock(return_value=True)
    backend.play = AsyncMock()
    backend.pause = AsyncMock()
    backend.skip = AsyncMock()
    backend.seek = AsyncMock()
    backend.set_volume = AsyncMock()
    backend.destroy = AsyncMock()
    backend.position = MagicMock(return_value=0)
    backend.is_connected = MagicMock(return_value=True)
    backend.set_event_handler = MagicMock()
    return backend


@pytest.fixture
def track_search():
    from guild_jukebox.application.interfaces.track_search import SearchResult

    search = MagicMock()
    search.search = AsyncMock(return_value=SearchResult())
    return search


@pytest.fixture
def control_surface():
    """Control surface double that hands out increasing message ids."""
    from guild_jukebox.domain.music.value_objects import ControlMessageRef

    message_ids = itertools.count(1001)

    surface = MagicMock()
    surface.render = AsyncMock(
        side_effect=lambda session: ControlMessageRef(
            channel_id=session.text_channel_id, message_id=next(message_ids)
        )
    )
    surface.refresh = AsyncMock()
    surface.disable = AsyncMock()
    surface.delete = AsyncMock()
    surface.send_notice = AsyncMock()
    surface.clear_bot_messages = AsyncMock()
    return surface


@pytest.fixture
def event_bus():
    from guild_jukebox.domain.shared.events import EventBus

    return EventBus()


@pytest.fixture
def session_registry():
    from guild_jukebox.domain.music.registry import SessionRegistry

    return SessionRegistry(strict=True)


@pytest_asyncio.fixture
async def progress_ticker(audio_backend, control_surface):
    from guild_jukebox.application.services.progress_ticker import ProgressTicker

    ticker = ProgressTicker(
        audio_backend=audio_backend,
        control_surface=control_surface,
        interval_seconds=3600,
    )
    yield ticker
    await ticker.shutdown()


@pytest_asyncio.fixture
async def controller(
    session_registry, audio_backend, track_search, control_surface, progress_ticker, event_bus
):
    from guild_jukebox.application.services.session_controller import SessionController

    ctrl = SessionController(
        registry=session_registry,
        audio_backend=audio_backend,
        track_search=track_search,
        control_surface=control_surface,
        progress_ticker=progress_ticker,
        event_bus=event_bus,
        rng=random.Random(0),
    )
    yield ctrl
    await ctrl.shutdown()


@pytest.fixture
def play_request():
    """Factory for play requests from the default guild and channels."""
    from guild_jukebox.application.services.outcomes import PlayRequest

    def _make(query: str = "test query", **overrides):
        fields = {
            "guild_id": GUILD_ID,
            "text_channel_id": TEXT_CHANNEL_ID,
            "voice_channel_id": VOICE_CHANNEL_ID,
            "query": query,
            "requester_id": 111,
            "requester_name": "Tester",
        }
        fields.update(overrides)
        return PlayRequest(**fields)

    return _make
