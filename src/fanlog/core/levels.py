"""Log level ordering and name parsing.

Levels are ordered from most verbose to most severe:

    TRACE < DEBUG < INFO < WARN < ERROR < FATAL

A sink or filter accepts an entry iff ``entry.level >= min_level``.

Example:
    >>> parse_level("warning")
    <LogLevel.WARN: 3>
    >>> LogLevel.ERROR >= parse_level("WRN")
    True
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final, Union


class LogLevel(IntEnum):
    """Ordered severity of a log entry."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5

    @property
    def label(self) -> str:
        """Three-letter label used by the console and file sinks."""
        return _LABELS[self]

    def __str__(self) -> str:
        return self.label


_LABELS: Final[dict[LogLevel, str]] = {
    LogLevel.TRACE: "TRC",
    LogLevel.DEBUG: "DBG",
    LogLevel.INFO: "INF",
    LogLevel.WARN: "WRN",
    LogLevel.ERROR: "ERR",
    LogLevel.FATAL: "FTL",
}

_ALIASES: Final[dict[str, LogLevel]] = {
    "TRACE": LogLevel.TRACE,
    "TRC": LogLevel.TRACE,
    "DEBUG": LogLevel.DEBUG,
    "DBG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "INF": LogLevel.INFO,
    "WARN": LogLevel.WARN,
    "WARNING": LogLevel.WARN,  # alias
    "WRN": LogLevel.WARN,
    "ERROR": LogLevel.ERROR,
    "ERR": LogLevel.ERROR,
    "FATAL": LogLevel.FATAL,
    "CRITICAL": LogLevel.FATAL,  # alias
    "FTL": LogLevel.FATAL,
}

LevelLike = Union[LogLevel, int, str]


def parse_level(level: LevelLike) -> LogLevel:
    """Coerce a level name, number, or ``LogLevel`` into a ``LogLevel``.

    Args:
        level: ``LogLevel`` member, its integer value, or a name
               (case-insensitive; long, short and stdlib-style aliases).

    Returns:
        The matching ``LogLevel``.

    Raises:
        ValueError: If the value does not name a known level.
    """
    if isinstance(level, LogLevel):
        return level
    if isinstance(level, bool):
        raise ValueError(f"Unknown log level: {level!r}")
    if isinstance(level, int):
        try:
            return LogLevel(level)
        except ValueError:
            raise ValueError(f"Unknown log level: {level!r}") from None
    if isinstance(level, str):
        found = _ALIASES.get(level.strip().upper())
        if found is not None:
            return found
    raise ValueError(f"Unknown log level: {level!r}")


def get_all_levels() -> dict[str, LogLevel]:
    """Return every accepted level name mapped to its level."""
    return dict(_ALIASES)
