"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import CommandPrefixStr, PlayableCacheSize, ProgressIntervalS
from ..domain.shared.validators import validate_discord_snowflake, validate_optional_snowflake


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: CommandPrefixStr = Field(
        default="!",
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    owner_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("owner_ids", "owners")
    )
    test_guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = False
    activity_name: str = Field(
        default="/play", validation_alias=AliasChoices("activity_name", "activity")
    )

    @field_validator("owner_ids", "test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        # Convert list to tuple if needed (from JSON array in env vars)
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            validate_discord_snowflake(snowflake)
        return v


class LavalinkNodeSettings(BaseModel):
    """A single Lavalink node."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    identifier: str = Field(default="main", min_length=1)
    uri: str = Field(default="http://localhost:2333", validation_alias=AliasChoices("uri", "url"))
    password: SecretStr = Field(default=SecretStr("youshallnotpass"))

    @field_validator("uri")
    @classmethod
    def validate_uri(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Lavalink node URI must start with http:// or https://")
        return v.rstrip("/")


class LavalinkSettings(BaseModel):
    """Audio node pool configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    nodes: tuple[LavalinkNodeSettings, ...] = Field(
        default_factory=lambda: (LavalinkNodeSettings(),)
    )
    search_source: str = Field(default="ytmsearch", min_length=1)
    inactive_timeout_seconds: int = Field(
        default=300,
        ge=0,
        validation_alias=AliasChoices("inactive_timeout_seconds", "inactive_timeout"),
    )

    @field_validator("nodes", mode="before")
    @classmethod
    def validate_nodes(cls, v: object) -> object:
        # JSON arrays arrive as lists
        if isinstance(v, list):
            return tuple(v)
        return v


class PlayerSettings(BaseModel):
    """Session and control panel behaviour."""

    model_config = SettingsConfigDict(frozen=True)

    default_volume: int = Field(default=100, ge=0, le=100)
    progress_interval_seconds: ProgressIntervalS = 10.0
    clear_messages_on_destroy: bool = False
    cleanup_delay_seconds: float = Field(default=0.5, ge=0.0)
    playable_cache_size: PlayableCacheSize = 512
    queue_page_size: int = Field(default=10, ge=1, le=25)


class NotificationSettings(BaseModel):
    """Operator notification targets. Unset channels are skipped."""

    model_config = SettingsConfigDict(frozen=True)

    enabled: bool = True
    owner_id: int | None = None
    song_channel_id: int | None = None
    join_channel_id: int | None = None
    stopped_channel_id: int | None = None
    left_channel_id: int | None = None
    node_status_channel_id: int | None = None

    @field_validator(
        "owner_id",
        "song_channel_id",
        "join_channel_id",
        "stopped_channel_id",
        "left_channel_id",
        "node_status_channel_id",
    )
    @classmethod
    def validate_snowflake(cls, v: int | None) -> int | None:
        # 0 in the environment means "not configured"
        return validate_optional_snowflake(v)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__OWNER_IDS, etc. (nested with ``__``)
    - LAVALINK__NODES (JSON array of {identifier, uri, password})
    - PLAYER__DEFAULT_VOLUME, NOTIFICATIONS__OWNER_ID, ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    lavalink: LavalinkSettings = Field(default_factory=LavalinkSettings)
    player: PlayerSettings = Field(default_factory=PlayerSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper

    @property
    def strict_contracts(self) -> bool:
        """Raise on contract violations everywhere except production."""
        return self.environment != "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
