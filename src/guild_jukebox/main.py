#!/usr/bin/env python3
"""Entry point: load settings, configure logging, then run the jukebox bot.

The bot needs a Discord token and at least one reachable Lavalink node.
Nodes are only logged here; the bot connects them in its setup hook.
"""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from guild_jukebox.domain.shared.constants import TimeConstants
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from guild_jukebox.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

# Chatty in debug mode only
_DEBUG_LOGGERS = ("guild_jukebox", "wavelink")


def setup_logging(log_level: str = "INFO", *, debug: bool = False) -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger(__name__).warning(
            "Could not load %s, using basic logging", _LOGGING_CONFIG_PATH
        )

    logging.getLogger().setLevel(resolved_level)
    if debug:
        for name in _DEBUG_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)


def _log_startup(logger: logging.Logger, settings: Settings) -> None:
    logger.info(LogTemplates.BOT_STARTING.format(environment=settings.environment))
    for node in settings.lavalink.nodes:
        logger.info(LogTemplates.BOT_NODE_CONFIGURED, node.identifier, node.uri)


def main() -> int:
    from guild_jukebox.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level, debug=settings.debug)
    logger = logging.getLogger(__name__)

    token = settings.discord.token.get_secret_value()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    _log_startup(logger, settings)

    from guild_jukebox.config.container import create_container
    from guild_jukebox.infrastructure.discord.bot import create_bot

    bot = create_bot(create_container(settings), settings)

    logger.info(LogTemplates.BOT_STARTING_RUN)
    try:
        bot.run_with_graceful_shutdown(
            token, shutdown_timeout=TimeConstants.SHUTDOWN_TIMEOUT_SECONDS
        )
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1
    else:
        logger.info(LogTemplates.BOT_STOPPED)
    return 0


def cli() -> None:
    """Console script entry point (``guild-jukebox``)."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
