"""
Public entrypoints for fanlog.

Provides a lazily created process-wide ``LogManager`` plus level-named
convenience functions. Applications that prefer explicit wiring can build
their own ``LogManager`` and pass it around instead.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional, Union

from ._version import __version__
from .core.dispatch import DispatchQueue, QueueState
from .core.entry import LogEntry
from .core.errors import ConfigurationError, FanlogError, SinkError, ValidationError
from .core.levels import LevelLike, LogLevel, parse_level
from .core.logger import LogManager, SinkKind
from .core.settings import Settings
from .plugins.sinks import BaseSink, LevelSink
from .plugins.sinks.console import ConsoleSink
from .plugins.sinks.fallback import FallbackSink
from .plugins.sinks.file import FileSink

__all__ = [
    "BaseSink",
    "ConfigurationError",
    "ConsoleSink",
    "DispatchQueue",
    "FallbackSink",
    "FanlogError",
    "FileSink",
    "LevelSink",
    "LogEntry",
    "LogLevel",
    "LogManager",
    "QueueState",
    "Settings",
    "SinkError",
    "SinkKind",
    "VERSION",
    "ValidationError",
    "__version__",
    "add_sink",
    "debug",
    "error",
    "fatal",
    "flush",
    "get_manager",
    "info",
    "parse_level",
    "remove_sink",
    "set_minimum_level",
    "shutdown",
    "trace",
    "warn",
]

VERSION = __version__

_default_manager: Optional[LogManager] = None
_default_lock = threading.Lock()


def get_manager(*, settings: Optional[Settings] = None) -> LogManager:
    """Return the process default manager, creating it on first use.

    ``settings`` only applies when the manager is created by this call.
    After ``shutdown()`` the next call creates a new manager.
    """
    global _default_manager
    with _default_lock:
        if _default_manager is None or _default_manager.is_shutdown:
            _default_manager = LogManager(settings)
        return _default_manager


def shutdown(timeout: Optional[float] = None) -> None:
    """Shut down the process default manager if one exists."""
    global _default_manager
    with _default_lock:
        manager = _default_manager
        _default_manager = None
    if manager is not None:
        manager.shutdown(timeout)


def set_minimum_level(level: LevelLike) -> None:
    get_manager().set_minimum_level(level)


def add_sink(
    kind: Union[SinkKind, str],
    target_directory: Optional[Union[str, Path]] = None,
) -> None:
    get_manager().add_sink(kind, target_directory)


def remove_sink(kind: Union[SinkKind, str]) -> None:
    get_manager().remove_sink(kind)


def flush(timeout: Optional[float] = None) -> bool:
    return get_manager().flush(timeout)


def trace(message: str) -> None:
    get_manager().trace(message)


def debug(message: str) -> None:
    get_manager().debug(message)


def info(message: str) -> None:
    get_manager().info(message)


def warn(message: str, error: Optional[BaseException] = None) -> None:
    get_manager().warn(message, error)


def error(message: str, error: Optional[BaseException] = None) -> None:
    get_manager().error(message, error)


def fatal(message: str, error: Optional[BaseException] = None) -> None:
    get_manager().fatal(message, error)
