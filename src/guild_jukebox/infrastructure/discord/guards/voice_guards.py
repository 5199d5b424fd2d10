"""Reusable voice-channel guard functions for Discord slash commands.

These are free functions that accept explicit dependencies rather than relying
on a specific cog instance, making them usable from any cog or view.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from guild_jukebox.domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from ....domain.music.entities import PlaybackSession


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def get_member(interaction: discord.Interaction) -> discord.Member | None:
    """Validate that the interaction comes from a guild member. Returns None with error on failure."""
    if not interaction.guild:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
        return None

    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.STATE_VERIFY_VOICE_FAILED)
        return None

    return user


async def ensure_user_in_voice(
    interaction: discord.Interaction,
) -> discord.VoiceChannel | discord.StageChannel | None:
    """Return the invoker's voice channel, or None with an error when they are not in one."""
    member = await get_member(interaction)
    if member is None:
        return None

    if not member.voice or not member.voice.channel:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE)
        return None

    return member.voice.channel


async def ensure_same_channel(
    interaction: discord.Interaction,
    session: PlaybackSession | None,
) -> bool:
    """Check the invoker is in voice and, when a session exists, in its channel."""
    channel = await ensure_user_in_voice(interaction)
    if channel is None:
        return False

    if session is not None and channel.id != session.voice_channel_id:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_MUST_SHARE_CHANNEL)
        return False

    return True


async def ensure_bot_can_join(
    interaction: discord.Interaction,
    channel: discord.VoiceChannel | discord.StageChannel,
) -> bool:
    """Check the bot has CONNECT and SPEAK in the target channel."""
    guild = interaction.guild
    if guild is None or guild.me is None:
        return False

    permissions = channel.permissions_for(guild.me)
    if not (permissions.connect and permissions.speak):
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_BOT_MISSING_VOICE_PERMISSIONS)
        return False

    return True


async def check_user_in_voice(
    interaction: discord.Interaction, voice_channel_id: int
) -> bool:
    """Return True if the interacting user is in the session's voice channel.

    Sends an ephemeral rejection and returns False otherwise.
    Used as an ``interaction_check`` in views that require voice presence.
    """
    user = interaction.user
    if not isinstance(user, discord.Member):
        await interaction.response.send_message(
            DiscordUIMessages.STATE_VERIFY_VOICE_FAILED, ephemeral=True
        )
        return False

    if not user.voice or not user.voice.channel:
        await interaction.response.send_message(
            DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE, ephemeral=True
        )
        return False

    if user.voice.channel.id != voice_channel_id:
        await interaction.response.send_message(
            DiscordUIMessages.STATE_MUST_SHARE_CHANNEL, ephemeral=True
        )
        return False

    return True
