"""Levelled logging used by the API client."""

from __future__ import annotations

import sys
from datetime import datetime
from enum import IntEnum
from typing import Any, Protocol, TextIO


class LogLevel(IntEnum):
    """Severity of a log record; higher is more severe."""

    TRACE = 1
    DEBUG = 2
    INFO = 3
    WARN = 4
    ERROR = 5

    def __str__(self) -> str:
        return self.name


class _Logger(Protocol):
    def log(self, level: LogLevel, message: str, *args: Any) -> None: ...


def _format(message: str, args: tuple[Any, ...]) -> str:
    return message % args if args else message


class StdLogger:
    """Writes timestamped records to a text stream (standard error by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream

    def log(self, level: LogLevel, message: str, *args: Any) -> None:
        stream = self.stream if self.stream is not None else sys.stderr
        stamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
        stream.write(f"{stamp} [{level}] {_format(message, args)}\n")
        stream.flush()


class LevelLogger:
    """Forwards records at or above ``level`` to the wrapped logger."""

    def __init__(self, logger: _Logger, level: LogLevel) -> None:
        self.logger = logger
        self.level = level

    def log(self, level: LogLevel, message: str, *args: Any) -> None:
        if level >= self.level:
            self.logger.log(level, message, *args)

    def debug(self, message: str, *args: Any) -> None:
        self.log(LogLevel.DEBUG, message, *args)

    def info(self, message: str, *args: Any) -> None:
        self.log(LogLevel.INFO, message, *args)

    def warn(self, message: str, *args: Any) -> None:
        self.log(LogLevel.WARN, message, *args)

    def error(self, message: str, *args: Any) -> None:
        self.log(LogLevel.ERROR, message, *args)


default_logger = LevelLogger(StdLogger(), LogLevel.INFO)


def set_logger(logger: _Logger) -> None:
    """Replace the logger that the package writes to."""
    default_logger.logger = logger


def set_level(level: LogLevel) -> None:
    """Set the minimum level the package logs at."""
    default_logger.level = level