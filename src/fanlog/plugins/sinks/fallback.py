from __future__ import annotations

from typing import Any, Optional

from ...core import diagnostics
from ...core.levels import LevelLike, LogLevel
from . import LevelSink

# Prevent runaway output on pathological cause cycles
_MAX_CHAIN_DEPTH = 8


def error_chain(error: BaseException) -> list[dict[str, str]]:
    """Flatten ``error`` and its causes into ``[{"type", "message"}, ...]``."""
    chain: list[dict[str, str]] = []
    seen: set[int] = set()
    current: Optional[BaseException] = error
    while current is not None and len(chain) < _MAX_CHAIN_DEPTH:
        if id(current) in seen:
            break
        seen.add(id(current))
        chain.append({"type": type(current).__name__, "message": str(current)})
        current = current.__cause__ or current.__context__
    return chain


def _error_fields(error: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error": str(error),
    }
    chain = error_chain(error)
    if len(chain) > 1:
        fields["error_chain"] = chain[1:]
    return fields


class FallbackSink(LevelSink):
    """Always-available sink for reporting pipeline problems.

    Writes one JSON line per report to stderr via ``fanlog.core.diagnostics``.
    It does not depend on any dispatch queue, and its own failures are
    contained so reporting can never take down the worker.
    """

    def __init__(
        self,
        min_level: LevelLike = LogLevel.TRACE,
        *,
        component: str = "dispatch",
    ) -> None:
        super().__init__(min_level)
        self._component = component

    @property
    def name(self) -> str:
        return "fallback"

    def write(
        self,
        level: LogLevel,
        message: str,
        error: Optional[BaseException] = None,
    ) -> None:
        if not self.should_log(level):
            return
        try:
            fields = _error_fields(error) if error is not None else {}
            diagnostics.emit(level.name, self._component, message, **fields)
        except Exception:
            # Nothing left to report to
            pass


__all__ = ["FallbackSink", "error_chain"]
