"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Session lifecycle
    SESSION_ALREADY_EXISTS = "A session already exists for guild {guild_id}"
    ILLEGAL_TRANSITION = "Cannot transition from {current} to {target}"

    # Seek
    SEEK_BAD_FORMAT = "Invalid time format. Use M:SS (e.g. 1:30) or Ns (e.g. 90s)."
    SEEK_UNBOUNDED = "Cannot seek on a live stream."
    SEEK_OUT_OF_RANGE = "Seek time must be between 0:00 and {duration}."
    SEEK_NOTHING_PLAYING = "Nothing is playing to seek in."

    # Volume
    VOLUME_OUT_OF_RANGE = "Volume must be between 0 and 100."

    # Fallbacks used when a backend error carries no text
    UNKNOWN_PLAYER_ERROR = "Unknown error of type: {kind}"
    UNKNOWN_RESOLVE_ERROR = "No reason given"
    GENERIC_ERROR = "Something went wrong."
    TRACK_STUCK = "The track stopped producing audio."

    # Configuration
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"
    NO_LAVALINK_NODES = "At least one Lavalink node must be configured"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Session lifecycle
    SESSION_CREATED = "Created session for guild %s (voice=%s, text=%s)"
    SESSION_RELOCATED = "Moved session for guild %s to voice channel %s"
    SESSION_DESTROYED = "Destroyed session for guild %s (reason=%s)"
    SESSION_STATE_CHANGED = "Session %s: %s -> %s"
    SESSION_STALE_COMMAND = "Rejected '%s' on destroyed session for guild %s"
    CONTRACT_VIOLATION = "Contract violation ignored in guild %s: %s"

    # Playback
    TRACK_STARTED = "Started playing '%s' in guild %s"
    TRACK_ENDED = "Track '%s' ended in guild %s (reason=%s)"
    TRACK_SKIP_REQUESTED = "Skip requested in guild %s"
    TRACK_ENDED_IGNORED = "Ignoring %s track end in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_SEEKED = "Seeked to %sms in guild %s"
    VOLUME_CHANGED = "Volume set to %s in guild %s"
    LOOP_MODE_CHANGED = "Loop mode changed to %s in guild %s"
    PERSISTENT_CHANGED = "24/7 mode %s in guild %s"
    QUEUE_EMPTY_PERSISTENT = "Queue empty in guild %s, staying connected (24/7)"
    QUEUE_ENQUEUED = "Enqueued %s track(s) in guild %s"
    QUEUE_SHUFFLED = "Shuffled queue in guild %s"
    QUEUE_REMOVED = "Removed track '%s' from queue in guild %s"

    # Autoplay
    AUTOPLAY_SEARCH = "Autoplay searching for follow-up to '%s' in guild %s"
    AUTOPLAY_FOUND = "Autoplay picked '%s' in guild %s"
    AUTOPLAY_NOTHING = "Autoplay found no distinct candidate in guild %s"
    AUTOPLAY_FAILED = "Autoplay lookup failed in guild %s: %r"

    # Backend events
    BACKEND_EVENT = "Backend event %s for guild %s"
    BACKEND_EVENT_NO_SESSION = "Dropping %s for guild %s: no session"
    PLAYER_EXCEPTION = "Player exception (%s) in guild %s: %s"
    PLAYER_RESOLVE_ERROR = "Failed to resolve '%s' in guild %s: %s"
    PLAYER_STUCK = "Track '%s' stuck in guild %s (threshold=%sms)"
    NODE_READY = "Lavalink node %s ready (resumed=%s)"
    NODE_ERROR = "Lavalink node %s error: %s"
    NODE_CLOSED = "Lavalink node %s closed, %s player(s) affected"
    NODE_DISCONNECTED = "Lavalink node %s disconnected"
    PLAYER_CREATED = "Player created for guild %s"
    NODE_CONNECT_FAILED = "Failed to connect Lavalink nodes: %s"

    # Backend commands
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"
    VOICE_CONNECTION_TIMEOUT = "Timed out connecting to voice channel %s"
    VOICE_CLIENT_ERROR = "Voice client error: %s"
    VOICE_NO_PERMISSION = "No permission to join voice channel %s"
    BACKEND_CONNECTED = "Connected to voice channel %s in guild %s"
    BACKEND_MOVED = "Moved to voice channel %s in guild %s"
    BACKEND_NO_PLAYER = "No player connected for guild %s"
    BACKEND_PLAYABLE_MISS = "No cached playable for '%s', decoding from encoded handle"
    BACKEND_DISCONNECT_FAILED = "Failed to disconnect player in guild %s: %r"
    SEARCH_FAILED = "Search failed for %r: %r"

    # Progress ticker
    TICKER_STARTED = "Progress ticker started for guild %s"
    TICKER_STOPPED = "Progress ticker stopped for guild %s"
    TICKER_TICK_FAILED = "Progress refresh failed in guild %s: %r"

    # Control panel
    CONTROL_SEND_FAILED = "Failed to send control message in channel %s: %r"
    CONTROL_EDIT_FAILED = "Failed to edit control message %s: %r"
    CONTROL_DELETE_GONE = "Control message %s already deleted"
    CONTROL_DELETE_FAILED = "Failed to delete control message %s: %r"
    NOTICE_SEND_FAILED = "Failed to send notice to channel %s: %r"
    CLEANUP_NO_PERMISSION = "Missing Manage Messages in channel %s, skipping cleanup"
    CLEANUP_TOO_OLD = "Bulk delete refused in channel %s: messages older than 14 days"
    CLEANUP_DONE = "Cleared %s bot message(s) from channel %s"
    CLEANUP_FAILED = "Error clearing bot messages in channel %s: %r"

    # Notifications
    NOTIFY_CHANNEL_MISSING = "Notification channel %s not found or not messageable"
    NOTIFY_SEND_FAILED = "Failed to deliver %s notification: %r"
    NOTIFY_OWNER_FAILED = "Failed to DM owner %s: %r"
    NOTIFY_INVITE_FAILED = "Could not create invite for guild %s: %r"

    # Application Lifecycle
    BOT_STARTING = "Starting guild jukebox in {environment} mode"
    BOT_NODE_CONFIGURED = "Lavalink node %s at %s"
    BOT_SETUP = "Setting up bot..."
    BOT_CONTAINER_INITIALIZED = "Container initialized successfully"
    BOT_CONTAINER_INIT_FAILED = "Failed to initialize container: %s"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"
    GUILD_JOINED = "Joined guild: %s (%s)"
    GUILD_LEFT = "Left guild: %s (%s)"

    # Bot Cog Management
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %s success, %s failed"

    # Bot Command Sync
    BOT_SYNCED_GUILD = "Synced %s commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %s commands globally"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync commands globally: %s"
    BOT_SYNC_ON_STARTUP_FAILED = "Failed to sync commands on startup: %s"

    # Bot Error Handling
    BOT_SLASH_COMMAND_ERROR = "Slash command error in '%s': %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in Discord interactions.
    Keep them concise, friendly, and include appropriate emoji.
    """

    # Play
    PLAY_STARTING = "✅ Starting playback of **{title}**!"
    PLAY_QUEUED = "✅ Added [{title}]({uri}) to the queue at position **#{position}**."
    PLAY_PLAYLIST_QUEUED = "📋 Added **{count}** tracks from playlist **{name}** to the queue."
    PLAY_NO_RESULTS = "❌ No results found for `{query}`."
    PLAY_FAILED = "❌ An error occurred while trying to play the song."

    # Controls
    ACTION_SKIPPED = "⏭️ Skipped **{title}**."
    ACTION_SKIPPED_LAST = "⏹️ Skipped the last song and stopped the player."
    ACTION_STOPPED = "⏹️ Music stopped and queue cleared."
    ACTION_PAUSED = "⏸️ Music paused."
    ACTION_RESUMED = "▶️ Music resumed."
    ACTION_SHUFFLED = "🔀 Queue shuffled!"
    ACTION_LOOP_MODE_SET = "🔁 Loop mode set to **{mode}**."
    ACTION_VOLUME_SET = "🔊 Volume set to **{level}%**."
    ACTION_VOLUME_CURRENT = "🔊 Current volume is **{level}%**."
    ACTION_SEEKED = "⏩ Seeked to **{position}** in the track."
    ACTION_TRACK_REMOVED = "🗑️ Removed track **#{position}** from the queue: [{title}]({uri})."
    ACTION_PERSISTENT_ON = "✅ 24/7 mode is now **enabled**. The bot will stay in the voice channel."
    ACTION_PERSISTENT_OFF = (
        "✅ 24/7 mode is now **disabled**. The bot will disconnect when the queue is empty."
    )

    # Warnings (no state change)
    WARN_ALREADY_PAUSED = "⚠️ Music is already paused."
    WARN_NOT_PAUSED = "⚠️ Music is not paused."
    WARN_QUEUE_EMPTY_REMOVE = "⚠️ The queue is empty. There are no tracks to remove."
    WARN_NOT_ENOUGH_TO_SHUFFLE = "⚠️ Not enough tracks in the queue to shuffle."

    # Errors
    ERROR_INVALID_TRACK_NUMBER = "❌ Invalid track number. The queue has {length} tracks."
    ERROR_UNEXPECTED = "❌ An unexpected error occurred while executing the command."
    ERROR_BUTTON_FAILED = "❌ An error occurred while processing your request."
    ERROR_BOT_MISSING_VOICE_PERMISSIONS = (
        "❌ I need the **CONNECT** and **SPEAK** permissions in your voice channel."
    )
    ERROR_COULD_NOT_JOIN_VOICE = "❌ I couldn't join your voice channel."

    # State Messages
    STATE_NOTHING_PLAYING = "⚠️ There is no music currently playing in this guild."
    STATE_QUEUE_EMPTY = "The queue is empty."
    STATE_QUEUE_UP_NEXT_EMPTY = "No more tracks in queue."
    STATE_SERVER_ONLY = "This command can only be used in a server."
    STATE_VERIFY_VOICE_FAILED = "Could not verify your voice state."
    STATE_NEED_TO_BE_IN_VOICE = "❌ You must be in a voice channel to use this command."
    STATE_MUST_SHARE_CHANNEL = "❌ You must be in the same voice channel as the bot to control it."

    # Channel notices
    NOTICE_QUEUE_ENDED = "⏹️ **Queue has ended! Disconnecting...**"
    NOTICE_PLAYER_ERROR_TITLE = "⚠️ Player Error"
    NOTICE_PLAYER_ERROR = "An error occurred while playing music: `{error}`"
    NOTICE_RESOLVE_ERROR_TITLE = "🔍 Track Resolution Error"
    NOTICE_RESOLVE_ERROR = "Failed to resolve track: **{title}**\nReason: {reason}"
    NOTICE_BACKEND_LOST = "⚠️ Lost connection to the audio server. Playback stopped."

    # Embed Titles / fields
    EMBED_NOW_PLAYING = "🎵 Now Playing"
    EMBED_QUEUE = "📋 Queue for {guild_name}"
    EMBED_QUEUE_FOOTER = "+{remaining} more tracks in queue."
    EMBED_HELP_TITLE = "{bot_name} Commands"
    EMBED_HELP_DESCRIPTION = "Use **/** for all commands."
    EMBED_HELP_MUSIC = (
        "`/play`, `/skip`, `/stop`, `/pause`, `/resume`, `/queue`, `/nowplaying`, "
        "`/shuffle`, `/loop`, `/volume`, `/247`, `/seek`, `/remove`"
    )
    EMBED_HELP_UTILITY = "`/help`"
    FIELD_DURATION = "⏱️ Duration"
    FIELD_ARTIST = "👤 Artist"
    FIELD_REQUESTER = "🙋 Requested by"
    FIELD_LOOP = "🔁 Loop"
    FIELD_VOLUME = "🔊 Volume"
    FIELD_PERSISTENT = "🌙 24/7"
    FIELD_PROGRESS = "📍 Progress"
    UNKNOWN_REQUESTER = "Unknown"
    LIVE = "🔴 LIVE"

    # Notifications
    NOTIFY_SONG_STARTED = "🎶 New Song Started!"
    NOTIFY_SESSION_ENDED = "🛑 Music Stopped"
    NOTIFY_GUILD_JOINED = "📥 Joined a New Server!"
    NOTIFY_GUILD_LEFT = "📤 Left a Server"
    NOTIFY_NODE_UP = "🟢 Audio Node Online"
    NOTIFY_NODE_DOWN = "🔴 Audio Node Problem"
    NOTIFY_INVITE_UNAVAILABLE = "*Unable to create invite*"


class EmojiConstants:
    """Emoji constants for consistent visual feedback."""

    ERROR = "❌"

    # Media Controls
    PLAY = "▶️"
    PAUSE = "⏸️"

    # Queue Operations
    LOOP = "🔁"
    LOOP_TRACK = "🔂"
