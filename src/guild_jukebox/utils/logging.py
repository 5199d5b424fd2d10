"""Console logging formatter."""

from __future__ import annotations

import logging
import os
import sys

PACKAGE_PREFIX = "guild_jukebox."


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name and shortens package logger names.

    ``guild_jukebox.application.services.session_controller`` is shown as
    ``application.services.session_controller``; third-party loggers such
    as ``wavelink`` or ``discord.gateway`` keep their names. Color is
    auto-detected unless ``use_color`` is given: it is off when
    ``NO_COLOR`` is set or stdout is not a TTY.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",  # cyan
        logging.INFO: "\033[32m",  # green
        logging.WARNING: "\033[33m",  # yellow
        logging.ERROR: "\033[31m",  # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        use_color: bool | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)  # type: ignore[arg-type]
        self._force_color = use_color

    def _use_color(self) -> bool:
        if self._force_color is not None:
            return self._force_color
        if os.environ.get("NO_COLOR") is not None:
            return False
        return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        record = logging.makeLogRecord(record.__dict__)
        if record.name.startswith(PACKAGE_PREFIX):
            record.name = record.name[len(PACKAGE_PREFIX) :]
        if self._use_color():
            color = self.COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)
