"""
Logger facade: sink registry, level filter, and dispatch queue ownership.

``LogManager`` is the only caller of ``DispatchQueue.enqueue``. It keeps a
registry of sink factories keyed by ``SinkKind`` and binds a fresh
``DispatchQueue`` (with freshly built sinks) whenever the composition, the
minimum level, or the queue lifecycle requires it. Dispatch queues are
single-use and dispose their sinks, so sinks are always rebuilt from their
factories rather than reused.

Example:
    manager = LogManager()
    manager.add_sink(SinkKind.FILE, "./logs")
    manager.info("service started")
    manager.shutdown()
"""

from __future__ import annotations

import threading
import types
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from ..metrics.metrics import MetricsCollector
from ..plugins.sinks import BaseSink
from ..plugins.sinks.console import ConsoleSink
from ..plugins.sinks.fallback import FallbackSink
from ..plugins.sinks.file import FileSink, make_log_filename
from .dispatch import DispatchQueue
from .entry import LogEntry
from .errors import ConfigurationError
from .levels import LevelLike, LogLevel, parse_level
from .settings import Settings
from .shutdown import register_manager, unregister_manager
from .validation import ensure_directory_writable, is_empty

SinkFactory = Callable[[LogLevel], BaseSink]


class SinkKind(str, Enum):
    CONSOLE = "console"
    FILE = "file"
    CONSOLE_AND_FILE = "console_and_file"


def _coerce_kind(kind: Union[SinkKind, str]) -> SinkKind:
    try:
        return SinkKind(kind)
    except ValueError:
        raise ConfigurationError(
            f"Unsupported log sink type: {kind}", code="LOG-LOGIC-001"
        ) from None


class LogManager:
    """Process-level logging facade with an explicit lifecycle.

    Args:
        settings: Configuration; read from the environment when omitted.
        fallback: Sink for pipeline diagnostics shared by every queue.
        register_exit_hook: Shut this manager down at interpreter exit.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        fallback: Optional[BaseSink] = None,
        register_exit_hook: bool = True,
    ) -> None:
        self._settings = settings or Settings()
        cfg = self._settings.core
        self._min_level: LogLevel = cfg.min_level
        self._lock = threading.RLock()
        self._factories: dict[SinkKind, SinkFactory] = {}
        self._sinks: dict[SinkKind, BaseSink] = {}
        self._queue: Optional[DispatchQueue] = None
        self._fallback: BaseSink = fallback or FallbackSink()
        self._metrics = MetricsCollector(enabled=cfg.enable_metrics)
        self._shutdown = False

        if cfg.default_console:
            self._factories[SinkKind.CONSOLE] = self._console_factory()
        if cfg.file_directory:
            self._factories[SinkKind.FILE] = self._file_factory(cfg.file_directory)
        self._rebind()
        if register_exit_hook:
            register_manager(self)

    # Introspection -------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def sinks(self) -> dict[SinkKind, BaseSink]:
        with self._lock:
            return dict(self._sinks)

    @property
    def queue(self) -> Optional[DispatchQueue]:
        return self._queue

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    # Configuration -------------------------------------------------------

    def set_minimum_level(self, level: LevelLike) -> None:
        """Change the level filter; sinks are rebuilt at the new level."""
        parsed = parse_level(level)
        with self._lock:
            self._min_level = parsed
            if self._shutdown:
                return
            has_sinks = bool(self._factories)
            if has_sinks:
                self._rebind()
        if has_sinks:
            self.trace(f"Min log level set to {parsed.name}")

    def add_sink(
        self,
        kind: Union[SinkKind, str],
        target_directory: Optional[Union[str, Path]] = None,
    ) -> None:
        """Register a sink kind; an already registered kind is kept as is.

        Raises:
            ConfigurationError: ``LOG-DIR-001`` when a file sink has no target
                directory, ``LOG-DIR-002`` when it is not writable, and
                ``LOG-LOGIC-001`` for an unsupported kind.
        """
        kind = _coerce_kind(kind)
        with self._lock:
            self._ensure_running()
            additions: dict[SinkKind, SinkFactory] = {}
            if kind in (SinkKind.FILE, SinkKind.CONSOLE_AND_FILE):
                if target_directory is None or is_empty(target_directory):
                    raise ConfigurationError(
                        "Target must be specified for file logging: "
                        f"{target_directory}",
                        code="LOG-DIR-001",
                    )
                if SinkKind.FILE not in self._factories:
                    additions[SinkKind.FILE] = self._file_factory(target_directory)
            if kind in (SinkKind.CONSOLE, SinkKind.CONSOLE_AND_FILE):
                if SinkKind.CONSOLE not in self._factories:
                    additions[SinkKind.CONSOLE] = self._console_factory()
            if not additions:
                return
            # Console first, matching registration order of the combined kind
            for key in (SinkKind.CONSOLE, SinkKind.FILE):
                if key in additions:
                    self._factories[key] = additions[key]
            self._rebind()

    def remove_sink(self, kind: Union[SinkKind, str]) -> None:
        """Unregister and dispose a sink kind; no-op when absent."""
        kind = _coerce_kind(kind)
        with self._lock:
            if self._shutdown:
                return
            kinds = (
                (SinkKind.CONSOLE, SinkKind.FILE)
                if kind is SinkKind.CONSOLE_AND_FILE
                else (kind,)
            )
            removed = [k for k in kinds if self._factories.pop(k, None) is not None]
            if removed:
                self._rebind()

    def _console_factory(self) -> SinkFactory:
        color = self._settings.core.console_color

        def build(level: LogLevel) -> BaseSink:
            return ConsoleSink(level, color=color)

        return build

    def _file_factory(self, directory: Union[str, Path]) -> SinkFactory:
        resolved = ensure_directory_writable(directory)
        # One file per registration; rebuilt sinks append to it
        filename = make_log_filename(self._settings.core.file_prefix)

        def build(level: LogLevel) -> BaseSink:
            return FileSink(resolved, level, filename=filename)

        return build

    def _rebind(self, timeout: Optional[float] = None) -> None:
        """Dispose the current queue and bind a new one to rebuilt sinks."""
        old = self._queue
        self._queue = None
        if old is not None:
            old.dispose(timeout)
        sinks: dict[SinkKind, BaseSink] = {}
        for kind, factory in self._factories.items():
            try:
                sinks[kind] = factory(self._min_level)
            except Exception as exc:  # noqa: BLE001
                self._fallback.write(
                    LogLevel.ERROR, f"Failed to create {kind.value} sink: {exc}", exc
                )
        self._sinks = sinks
        cfg = self._settings.core
        self._queue = DispatchQueue(
            sinks.values(),
            capacity=cfg.queue_capacity,
            enqueue_timeout=cfg.enqueue_timeout_seconds,
            flush_timeout=cfg.flush_timeout_seconds,
            fallback=self._fallback,
            metrics=self._metrics,
        )

    def _ensure_running(self) -> None:
        if self._shutdown:
            raise ConfigurationError(
                "Log manager has been shut down", code="LOG-LOGIC-002"
            )

    # Logging -------------------------------------------------------------

    def log(
        self,
        level: LevelLike,
        message: str,
        error: Optional[BaseException] = None,
    ) -> None:
        """Enqueue an entry when ``level`` passes the minimum level filter."""
        parsed = parse_level(level)
        queue = self._queue
        if queue is None or parsed < self._min_level:
            return
        queue.enqueue(LogEntry(parsed, str(message), error))

    def trace(self, message: str) -> None:
        self.log(LogLevel.TRACE, message)

    def debug(self, message: str) -> None:
        self.log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(LogLevel.INFO, message)

    def warn(self, message: str, error: Optional[BaseException] = None) -> None:
        self.log(LogLevel.WARN, message, error)

    warning = warn

    def error(self, message: str, error: Optional[BaseException] = None) -> None:
        self.log(LogLevel.ERROR, message, error)

    def fatal(self, message: str, error: Optional[BaseException] = None) -> None:
        self.log(LogLevel.FATAL, message, error)

    # Lifecycle -----------------------------------------------------------

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Drain pending entries best-effort, then continue on a fresh queue.

        The current queue is closed for the whole drain window. Entries
        logged by other threads before the fresh queue is bound are discarded
        silently, like any enqueue on a closed queue. Logging from the calling
        thread after ``flush`` returns goes to the fresh queue.

        Returns:
            True if the backlog was fully delivered within ``timeout``.
        """
        with self._lock:
            queue = self._queue
            if queue is None:
                return True
            drained = queue.flush(timeout)
            self._rebind(timeout)
            return drained

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Dispose the queue and every sink. Idempotent."""
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True
            queue = self._queue
            self._queue = None
            if queue is not None:
                queue.dispose(timeout)
            self._sinks.clear()
            self._factories.clear()
        unregister_manager(self)

    kill = shutdown

    def __enter__(self) -> LogManager:
        return self

    def __exit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc: BaseException | None,
        _tb: types.TracebackType | None,
    ) -> None:
        self.shutdown()


__all__ = ["LogManager", "SinkFactory", "SinkKind"]
