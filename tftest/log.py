"""Levelled, timestamped logging to a text stream."""

from __future__ import annotations

import sys
from datetime import datetime
from enum import IntEnum
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Severity of a log message, lowest first."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    def __str__(self) -> str:
        return self.name


def parse_log_level(level: str) -> LogLevel:
    """Return the level named by ``level``, ignoring case.

    Raises ValueError for an unknown name.
    """
    try:
        return LogLevel[level.upper()]
    except KeyError:
        raise ValueError(f"invalid log level: {level}") from None


class Logger:
    """Writes messages at or above a minimum level to a stream."""

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        prefix: str = "",
        stream: TextIO | None = None,
    ) -> None:
        self.level = level
        self.prefix = prefix
        # None means "whatever sys.stdout is when the message is written".
        self.stream = stream

    def _log(self, level: LogLevel, message: str, args: tuple[Any, ...]) -> None:
        if level < self.level:
            return
        text = message % args if args else message
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        prefix = f"[{self.prefix}] " if self.prefix else ""
        out = self.stream if self.stream is not None else sys.stdout
        out.write(f"[{timestamp}] {prefix}{level}: {text}\n")
        out.flush()

    def debug(self, message: str, *args: Any) -> None:
        self._log(LogLevel.DEBUG, message, args)

    def info(self, message: str, *args: Any) -> None:
        self._log(LogLevel.INFO, message, args)

    def warn(self, message: str, *args: Any) -> None:
        self._log(LogLevel.WARN, message, args)

    def error(self, message: str, *args: Any) -> None:
        self._log(LogLevel.ERROR, message, args)

    def fatal(self, message: str, *args: Any) -> None:
        """Log at FATAL level and exit with status 1."""
        self._log(LogLevel.FATAL, message, args)
        raise SystemExit(1)


_default_logger = Logger(LogLevel.INFO)


def set_default_log_level(level: LogLevel) -> None:
    _default_logger.level = level


def set_default_prefix(prefix: str) -> None:
    _default_logger.prefix = prefix


def debug(message: str, *args: Any) -> None:
    _default_logger.debug(message, *args)


def info(message: str, *args: Any) -> None:
    _default_logger.info(message, *args)


def warn(message: str, *args: Any) -> None:
    _default_logger.warn(message, *args)


def error(message: str, *args: Any) -> None:
    _default_logger.error(message, *args)


def fatal(message: str, *args: Any) -> None:
    _default_logger.fatal(message, *args)