"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class QueuePositionOutOfRangeError(ValidationError):
    """Raised when a 1-based queue position does not address a pending track."""

    def __init__(self, position: int, length: int) -> None:
        super().__init__(
            f"Position {position} is out of range (queue has {length} tracks)",
            field="position",
        )
        self.code = "QUEUE_POSITION_OUT_OF_RANGE"
        self.position = position
        self.length = length


class SeekError(ValidationError):
    """Raised when a seek request is rejected before reaching the audio backend."""

    def __init__(self, message: str) -> None:
        super().__init__(message, field="time")
        self.code = "SEEK_REJECTED"


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class SessionDestroyedError(DomainError):
    """Raised when a command races against (or follows) a session teardown."""

    def __init__(self, guild_id: int) -> None:
        super().__init__(f"Session for guild {guild_id} has been destroyed", code="SESSION_DESTROYED")
        self.guild_id = guild_id


class ContractViolationError(DomainError):
    """Raised in strict mode when a caller breaks a session lifecycle contract."""

    def __init__(self, contract: str, message: str | None = None) -> None:
        msg = message or f"Contract violated: {contract}"
        super().__init__(msg, code="CONTRACT_VIOLATION")
        self.contract = contract
