"""Metrics collection for dispatch queues."""

from .metrics import MetricsCollector, PipelineMetrics

__all__ = ["MetricsCollector", "PipelineMetrics"]
