"""Pluggable logging with a process-wide logger."""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from enum import IntEnum


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4
    NONE = 5


class LogHandler(ABC):
    """Receives every log message; subclass it to change where logs go."""

    @abstractmethod
    def log(self, file: str, line: int, level: LogLevel, message: str) -> None:
        """Handle one message coming from ``file`` at ``line``."""


class DefaultLogHandler(LogHandler):
    """Writes messages to standard output."""

    def log(self, file: str, line: int, level: LogLevel, message: str) -> None:
        print(f"[{LogLevel(level).name}] {file}:{line}: {message}", file=sys.stdout, flush=True)


class Logger:
    """Holds the active handler and the minimum level."""

    def __init__(self) -> None:
        self.level = LogLevel.INFO
        self._handler: LogHandler = DefaultLogHandler()
        self._lock = threading.Lock()

    @property
    def handler(self) -> LogHandler:
        return self._handler

    def set_level(self, level: LogLevel) -> None:
        self.level = LogLevel(level)

    def register_handler(self, handler: LogHandler | None) -> None:
        with self._lock:
            self._handler = handler if handler is not None else DefaultLogHandler()

    def unregister_handler(self) -> None:
        with self._lock:
            self._handler = DefaultLogHandler()

    def log(self, file: str, line: int, level: LogLevel, message: str) -> None:
        with self._lock:
            handler = self._handler
        handler.log(file, line, level, message)


_LOGGER = Logger()


def get_logger() -> Logger:
    return _LOGGER


def register_log_handler(handler: LogHandler) -> None:
    _LOGGER.register_handler(handler)


def unregister_log_handler() -> None:
    """Drop the current handler and go back to the default one."""
    _LOGGER.unregister_handler()


def set_log_level(level: LogLevel) -> None:
    """Suppress messages below ``level``."""
    _LOGGER.set_level(level)


def log(file: str, line: int, level: LogLevel, fmt: str, *args: object) -> None:
    """Format a printf-style message and hand it to the active handler."""
    if level < _LOGGER.level:
        return
    message = fmt % args if args else fmt
    _LOGGER.log(file, line, LogLevel(level), message)