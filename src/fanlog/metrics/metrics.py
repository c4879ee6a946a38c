"""
Pipeline metrics for fanlog dispatch queues.

Implements minimal Prometheus-compatible counters for the dispatch engine.

Design goals:
- Thread-safe: producers and the worker thread record concurrently
- Zero global state; each collector owns an isolated registry
- In-memory counters are always tracked (tests and ``DispatchQueue.stats``);
  Prometheus export only when enabled
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from prometheus_client import CollectorRegistry, Counter


@dataclass
class PipelineMetrics:
    """Captured runtime metrics for quick assertions in tests."""

    enqueued: int = 0
    dropped: int = 0
    delivered: int = 0
    sink_errors: int = 0


class MetricsCollector:
    """Dispatch-queue scoped metrics collector.

    When disabled, Prometheus counters are never created but the in-memory
    counters still advance.
    """

    def __init__(self, *, enabled: bool = False) -> None:
        self._enabled = bool(enabled)
        self._lock = threading.Lock()
        self._state = PipelineMetrics()

        self._c_enqueued: Any | None = None
        self._c_dropped: Any | None = None
        self._c_delivered: Any | None = None
        self._c_sink_errors: Any | None = None
        self._registry: CollectorRegistry | None = None

        if self._enabled:
            # Isolated registry avoids duplicate registration across queues
            self._registry = CollectorRegistry()
            self._c_enqueued = Counter(
                "fanlog_entries_enqueued_total",
                "Total number of log entries accepted by the dispatch queue",
                registry=self._registry,
            )
            self._c_dropped = Counter(
                "fanlog_entries_dropped_total",
                "Total number of log entries dropped because the queue was full",
                registry=self._registry,
            )
            self._c_delivered = Counter(
                "fanlog_sink_writes_total",
                "Total number of successful sink writes",
                ["sink"],
                registry=self._registry,
            )
            self._c_sink_errors = Counter(
                "fanlog_sink_errors_total",
                "Total number of failed sink operations",
                ["sink", "operation"],
                registry=self._registry,
            )

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def registry(self) -> CollectorRegistry | None:
        """Expose the isolated Prometheus registry when enabled."""
        return self._registry

    def record_enqueued(self) -> None:
        with self._lock:
            self._state.enqueued += 1
        if self._c_enqueued is not None:
            self._c_enqueued.inc()

    def record_dropped(self) -> None:
        with self._lock:
            self._state.dropped += 1
        if self._c_dropped is not None:
            self._c_dropped.inc()

    def record_delivered(self, *, sink: str) -> None:
        with self._lock:
            self._state.delivered += 1
        if self._c_delivered is not None:
            self._c_delivered.labels(sink=sink).inc()

    def record_sink_error(self, *, sink: str, operation: str = "write") -> None:
        with self._lock:
            self._state.sink_errors += 1
        if self._c_sink_errors is not None:
            self._c_sink_errors.labels(sink=sink, operation=operation).inc()

    def snapshot(self) -> PipelineMetrics:
        # Lightweight copy without exposing internals
        with self._lock:
            return PipelineMetrics(
                enqueued=self._state.enqueued,
                dropped=self._state.dropped,
                delivered=self._state.delivered,
                sink_errors=self._state.sink_errors,
            )
