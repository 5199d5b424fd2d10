"""In-memory registry enforcing one playback session per guild."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from guild_jukebox.domain.music.entities import PlaybackSession
from guild_jukebox.domain.shared.exceptions import ContractViolationError
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Active sessions keyed by guild.

    In strict mode a contract violation raises
    :class:`ContractViolationError`; otherwise it is logged and the call
    degrades to a no-op.
    """

    def __init__(self, *, strict: bool = True) -> None:
        self._sessions: dict[int, PlaybackSession] = {}
        self.strict = strict

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[PlaybackSession]:
        return iter(list(self._sessions.values()))

    def violation(self, guild_id: int, contract: str, message: str) -> None:
        """Report a broken lifecycle contract according to the strictness mode."""
        if self.strict:
            raise ContractViolationError(contract, message)
        logger.error(LogTemplates.CONTRACT_VIOLATION, guild_id, message)

    def get(self, guild_id: int) -> PlaybackSession | None:
        return self._sessions.get(guild_id)

    def add(self, session: PlaybackSession) -> PlaybackSession:
        """Register a new session; a live duplicate is a contract violation.

        Returns the session that ends up registered for the guild.
        """
        existing = self._sessions.get(session.guild_id)
        if existing is not None and not existing.destroyed:
            self.violation(
                session.guild_id,
                "one_session_per_guild",
                ErrorMessages.SESSION_ALREADY_EXISTS.format(guild_id=session.guild_id),
            )
            return existing

        self._sessions[session.guild_id] = session
        return session

    def remove(self, guild_id: int, session: PlaybackSession | None = None) -> PlaybackSession | None:
        """Unregister a guild's session.

        When ``session`` is given it is removed only if it is still the
        registered instance, so a stale reference never evicts a newer one.
        """
        registered = self._sessions.get(guild_id)
        if registered is None:
            return None
        if session is not None and registered is not session:
            return None
        return self._sessions.pop(guild_id)

    def clear(self) -> list[PlaybackSession]:
        sessions = list(self._sessions.values())
        self._sessions.clear()
        return sessions
