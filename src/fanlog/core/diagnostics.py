"""
Internal diagnostics channel.

Diagnostics report operational problems of the pipeline itself (dropped
entries, sink failures, worker crashes). They are written as one JSON object
per line to stderr and never pass through a dispatch queue, so reporting
cannot deadlock or recurse into the component being reported on.

Tests can capture payloads with ``set_writer_for_tests``.
"""

from __future__ import annotations

import json
import sys
import threading
from datetime import datetime, timezone
from typing import Any, Callable

Writer = Callable[[dict[str, Any]], None]

_lock = threading.Lock()


def _default_writer(payload: dict[str, Any]) -> None:
    try:
        line = json.dumps(payload, separators=(",", ":"), default=str)
    except Exception:
        line = json.dumps({"message": str(payload.get("message", ""))})
    with _lock:
        sys.stderr.write(line + "\n")
        sys.stderr.flush()


_writer: Writer = _default_writer


def set_writer_for_tests(writer: Writer) -> None:
    """Replace the diagnostics writer (tests only)."""
    global _writer
    _writer = writer


def _reset_for_tests() -> None:
    global _writer
    _writer = _default_writer


def emit(level: str, component: str, message: str, **fields: Any) -> None:
    """Write a diagnostics payload. Never raises."""
    payload: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "component": component,
        "message": message,
    }
    payload.update(fields)
    try:
        _writer(payload)
    except Exception:
        # Diagnostics must never break the caller
        pass


def warn(component: str, message: str, **fields: Any) -> None:
    emit("WARN", component, message, **fields)


def error(component: str, message: str, **fields: Any) -> None:
    emit("ERROR", component, message, **fields)
