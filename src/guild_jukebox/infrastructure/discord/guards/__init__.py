"""Voice channel guard functions for Discord cogs."""

from guild_jukebox.infrastructure.discord.guards.voice_guards import (
    check_user_in_voice,
    ensure_bot_can_join,
    ensure_same_channel,
    ensure_user_in_voice,
    get_member,
    send_ephemeral,
)

__all__ = [
    "check_user_in_voice",
    "ensure_bot_can_join",
    "ensure_same_channel",
    "ensure_user_in_voice",
    "get_member",
    "send_ephemeral",
]
