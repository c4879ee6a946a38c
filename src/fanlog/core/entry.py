"""
Log entry value type.

A ``LogEntry`` is built once per accepted log call by the manager and handed
to the dispatch queue. It is immutable; the timestamp is captured at
construction time in UTC.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .levels import LogLevel


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LogEntry:
    """Immutable record produced per log call."""

    level: LogLevel
    message: str
    error: Optional[BaseException] = None
    timestamp: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to a plain dictionary (error reduced to type/text)."""
        data: Dict[str, Any] = {
            "level": self.level.name,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.error is not None:
            data["error_type"] = type(self.error).__name__
            data["error"] = str(self.error)
        return data
