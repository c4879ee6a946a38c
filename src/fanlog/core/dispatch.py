"""
Dispatch queue: bounded hand-off from producer threads to a single worker.

Producers call ``enqueue`` from any thread. One dedicated background thread
drains the queue in FIFO order and fans each entry out to every sink in an
immutable snapshot, isolating failures per sink. ``flush`` and ``dispose``
implement a bounded, best-effort shutdown.

Lifecycle: OPEN -> DRAINING (closed to new entries) -> STOPPED (worker
exited, sinks flushed and disposed). A worker stuck inside a sink call past
the drain window and join grace leaves the queue ABANDONED until that call
returns; it then exits without touching any sink again. A queue is single-use; build a new one to change the
sink set.

Error handling:
- Queue full: entry dropped, one WARN reported to the fallback sink
- Queue closed: enqueue is a silent no-op
- Sink write/flush/dispose failure: reported, remaining sinks still served
- Unexpected worker failure: reported as FATAL, worker exits (no restart)
"""

from __future__ import annotations

import asyncio
import threading
import time
import types
from collections.abc import Iterable
from enum import Enum
from typing import Optional

from ..metrics.metrics import MetricsCollector, PipelineMetrics
from ..plugins.sinks import BaseSink, sink_name
from ..plugins.sinks.fallback import FallbackSink
from .concurrency import ClosableQueue, QueueCancelledError, QueueClosedError
from .entry import LogEntry
from .levels import LogLevel

DEFAULT_CAPACITY = 1000
DEFAULT_ENQUEUE_TIMEOUT_SECONDS = 1.0
DEFAULT_FLUSH_TIMEOUT_SECONDS = 5.0
# Grace period for a worker still inside a sink call after the backlog is cancelled
WORKER_JOIN_GRACE_SECONDS = 0.25

QUEUE_FULL_MESSAGE = "Log queue is full. Dropping this log entry."
WORKER_FAILURE_MESSAGE = "Unexpected error in log processing"


class QueueState(str, Enum):
    OPEN = "open"
    DRAINING = "draining"
    STOPPED = "stopped"
    ABANDONED = "abandoned"


class DispatchQueue:
    """Bounded queue plus a dedicated worker thread fanning out to sinks.

    Args:
        sinks: Ordered sinks to deliver to; snapshotted at construction.
        capacity: Maximum number of pending entries.
        enqueue_timeout: Seconds ``enqueue`` waits for space before dropping.
        flush_timeout: Default drain window for ``flush``/``dispose``.
        fallback: Sink used to report pipeline problems. Must not depend on
            this queue. Defaults to a stderr ``FallbackSink``.
        metrics: Optional collector; a private in-memory one is used if None.
        name: Worker thread name.
    """

    def __init__(
        self,
        sinks: Iterable[BaseSink],
        *,
        capacity: int = DEFAULT_CAPACITY,
        enqueue_timeout: float = DEFAULT_ENQUEUE_TIMEOUT_SECONDS,
        flush_timeout: float = DEFAULT_FLUSH_TIMEOUT_SECONDS,
        fallback: Optional[BaseSink] = None,
        metrics: Optional[MetricsCollector] = None,
        name: str = "fanlog-dispatch",
    ) -> None:
        if sinks is None:
            raise ValueError("sinks must not be None")
        if enqueue_timeout < 0:
            raise ValueError("enqueue_timeout must be >= 0")
        if flush_timeout < 0:
            raise ValueError("flush_timeout must be >= 0")
        self._sinks: tuple[BaseSink, ...] = tuple(sinks)
        self._queue: ClosableQueue[LogEntry] = ClosableQueue(capacity)
        self._enqueue_timeout = enqueue_timeout
        self._flush_timeout = flush_timeout
        self._fallback: BaseSink = fallback if fallback is not None else FallbackSink()
        self._metrics = metrics if metrics is not None else MetricsCollector()
        self._cancel = threading.Event()
        self._cancel_deadline: Optional[float] = None
        self._lifecycle_lock = threading.Lock()
        self._disposed = False
        self._released = False
        # Dedicated thread, never a pool worker: keeps the single consumer
        # alive under load and preserves FIFO delivery
        self._worker = threading.Thread(target=self._run, name=name, daemon=True)
        self._worker.start()

    # Introspection -------------------------------------------------------

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        return self._sinks

    @property
    def fallback(self) -> BaseSink:
        return self._fallback

    @property
    def capacity(self) -> int:
        return self._queue.capacity

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def is_closed(self) -> bool:
        return self._queue.is_closed

    @property
    def worker_alive(self) -> bool:
        return self._worker.is_alive()

    @property
    def state(self) -> QueueState:
        if self._released:
            if self._worker.is_alive():
                return QueueState.ABANDONED
            return QueueState.STOPPED
        if self._queue.is_closed:
            return QueueState.DRAINING
        return QueueState.OPEN

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def stats(self) -> PipelineMetrics:
        return self._metrics.snapshot()

    # Producer side -------------------------------------------------------

    def enqueue(self, entry: LogEntry) -> None:
        """Hand ``entry`` to the worker.

        Waits up to ``enqueue_timeout`` for space. On timeout the entry is
        dropped and a warning goes to the fallback sink. After the queue is
        closed the call returns immediately without effect.
        """
        if entry is None:
            raise ValueError("entry must not be None")
        try:
            accepted = self._queue.put(entry, timeout=self._enqueue_timeout)
        except QueueClosedError:
            # Closed for new entries: intentionally silent
            return
        if accepted:
            self._metrics.record_enqueued()
            return
        self._metrics.record_dropped()
        self._report(LogLevel.WARN, QUEUE_FULL_MESSAGE)

    # Worker side ---------------------------------------------------------

    def _run(self) -> None:
        try:
            while True:
                try:
                    entry = self._queue.get()
                except (QueueClosedError, QueueCancelledError):
                    # Closed and drained, or cancelled: orderly exit
                    return
                if self._past_cancel_deadline():
                    return
                self._dispatch(entry)
        except Exception as exc:  # noqa: BLE001
            self._report(LogLevel.FATAL, WORKER_FAILURE_MESSAGE, exc)

    def _past_cancel_deadline(self) -> bool:
        if not self._cancel.is_set() or self._cancel_deadline is None:
            return False
        return time.monotonic() >= self._cancel_deadline

    def _dispatch(self, entry: LogEntry) -> None:
        for sink in self._sinks:
            if self._released:
                # Entry abandoned by dispose; sinks are already released
                return
            failure = self._deliver(sink, entry)
            if failure is None:
                continue
            if self._released:
                return
            name = sink_name(sink)
            self._metrics.record_sink_error(sink=name, operation="write")
            self._report(LogLevel.ERROR, f"Error in sink {name}: {failure}", failure)

    def _deliver(self, sink: BaseSink, entry: LogEntry) -> Optional[Exception]:
        """Write ``entry`` to one sink; return the failure instead of raising."""
        try:
            if not sink.should_log(entry.level):
                return None
            sink.write(entry.level, entry.message, entry.error)
        except Exception as exc:  # noqa: BLE001
            return exc
        self._metrics.record_delivered(sink=sink_name(sink))
        return None

    # Shutdown ------------------------------------------------------------

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Close to new entries, drain for up to ``timeout``, flush sinks.

        Every sink's ``flush`` is called whether or not the drain finished.
        Never raises for sink failures or timeouts.

        Returns:
            True if the worker drained the whole backlog in time.
        """
        wait = self._flush_timeout if timeout is None else max(0.0, timeout)
        self._queue.close()
        if threading.current_thread() is not self._worker:
            self._worker.join(wait)
        drained = not self._worker.is_alive()
        self._call_each_sink("flush")
        return drained

    async def flush_async(self, timeout: Optional[float] = None) -> bool:
        """Run ``flush`` off the event loop."""
        return await asyncio.to_thread(self.flush, timeout)

    def dispose(self, timeout: Optional[float] = None) -> None:
        """Stop the worker and release every sink. Idempotent.

        The worker keeps draining for at most ``timeout`` (default: the flush
        timeout); whatever is still queued afterwards is discarded. The worker
        is then joined for a short grace period before the sinks are disposed.
        If it is still inside a sink call, ``state`` reports ``ABANDONED``
        until that call returns.
        """
        with self._lifecycle_lock:
            if self._disposed:
                return
            self._disposed = True
        wait = self._flush_timeout if timeout is None else max(0.0, timeout)
        self._cancel_deadline = time.monotonic() + wait
        self._cancel.set()
        self.flush(wait)
        # Release storage and wake the worker if it is still waiting
        self._queue.cancel()
        if threading.current_thread() is not self._worker:
            self._worker.join(WORKER_JOIN_GRACE_SECONDS)
        self._released = True
        self._call_each_sink("dispose")

    def _call_each_sink(self, operation: str) -> None:
        for sink in self._sinks:
            try:
                getattr(sink, operation)()
            except Exception as exc:  # noqa: BLE001
                name = sink_name(sink)
                self._metrics.record_sink_error(sink=name, operation=operation)
                self._report(
                    LogLevel.ERROR,
                    f"Error during {operation} of sink {name}: {exc}",
                    exc,
                )

    def _report(
        self,
        level: LogLevel,
        message: str,
        error: Optional[BaseException] = None,
    ) -> None:
        try:
            self._fallback.write(level, message, error)
        except Exception:
            # Reporting must never take down the caller
            pass

    def __enter__(self) -> DispatchQueue:
        return self

    def __exit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc: BaseException | None,
        _tb: types.TracebackType | None,
    ) -> None:
        self.dispose()


__all__ = [
    "DEFAULT_CAPACITY",
    "DEFAULT_ENQUEUE_TIMEOUT_SECONDS",
    "DEFAULT_FLUSH_TIMEOUT_SECONDS",
    "DispatchQueue",
    "QUEUE_FULL_MESSAGE",
    "QueueState",
    "WORKER_FAILURE_MESSAGE",
    "WORKER_JOIN_GRACE_SECONDS",
]
