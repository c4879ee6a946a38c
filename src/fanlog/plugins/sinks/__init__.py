from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from ...core.levels import LevelLike, LogLevel, parse_level


@runtime_checkable
class BaseSink(Protocol):
    """Sink capability contract consumed by the dispatch queue.

    Sinks receive accepted log entries from the single dispatch worker. A
    sink may raise from ``write``/``flush``/``dispose``; the worker contains
    and reports such failures, so an error must leave the sink usable for
    subsequent calls. ``dispose`` must be idempotent.
    """

    def should_log(self, level: LogLevel) -> bool:
        """Return True iff ``level`` is at or above the sink's minimum."""
        ...

    def write(
        self,
        level: LogLevel,
        message: str,
        error: Optional[BaseException] = None,
    ) -> None:  # noqa: D401
        """Write a single log line (and optional error) to the destination."""
        ...

    def flush(self) -> None:
        ...

    def dispose(self) -> None:
        ...


class LevelSink:
    """Convenience base implementing the level predicate and no-op lifecycle."""

    def __init__(self, min_level: LevelLike = LogLevel.INFO) -> None:
        self._min_level = parse_level(min_level)

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def name(self) -> str:
        return type(self).__name__

    def should_log(self, level: LogLevel) -> bool:
        return level >= self._min_level

    def write(
        self,
        level: LogLevel,
        message: str,
        error: Optional[BaseException] = None,
    ) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        return None

    def dispose(self) -> None:
        return None


def sink_name(sink: Any) -> str:
    return str(getattr(sink, "name", type(sink).__name__))


__all__ = [
    "BaseSink",
    "LevelSink",
    "sink_name",
]
