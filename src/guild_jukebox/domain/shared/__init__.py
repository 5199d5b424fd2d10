"""
Shared Domain Kernel

Contains types, messages and exceptions shared across the package.
"""

from guild_jukebox.domain.shared.exceptions import (
    ContractViolationError,
    DomainError,
    InvalidOperationError,
    QueuePositionOutOfRangeError,
    SeekError,
    SessionDestroyedError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "QueuePositionOutOfRangeError",
    "SeekError",
    "InvalidOperationError",
    "SessionDestroyedError",
    "ContractViolationError",
]
