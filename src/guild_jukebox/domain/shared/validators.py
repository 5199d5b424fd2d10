"""Shared validators for domain models and settings.

This module provides reusable validators for Discord-specific data types
like snowflake IDs.
"""

from guild_jukebox.domain.shared.messages import ErrorMessages


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Discord snowflake IDs are 64-bit unsigned integers representing unique
    identifiers for users, guilds, channels, messages, etc.

    Args:
        value: The snowflake ID to validate.

    Returns:
        The validated snowflake ID.

    Raises:
        ValueError: If the snowflake ID is invalid.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def validate_optional_snowflake(value: int | None) -> int | None:
    """Validate a snowflake that may be left unset (``None`` or ``0``)."""
    if value is None or value == 0:
        return None
    return validate_discord_snowflake(value)
