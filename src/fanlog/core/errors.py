"""
Error taxonomy for fanlog.

Errors raised to callers are limited to configuration and validation
problems detected at registration time. Operational failures inside the
pipeline (dropped entries, sink failures) are reported through the fallback
sink and never raised into application code.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Broad error categories used for reporting."""

    SYSTEM = "system"
    CONFIG = "config"
    VALIDATION = "validation"
    SINK = "sink"


class FanlogError(Exception):
    """Base class for all fanlog errors.

    Args:
        message: Human readable description.
        code: Optional stable error code (e.g. ``LOG-DIR-001``).
        cause: Optional underlying exception; stored as ``__cause__``.
        category: Error category.
    """

    default_category: ErrorCategory = ErrorCategory.SYSTEM

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        cause: Optional[BaseException] = None,
        category: Optional[ErrorCategory] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category or self.default_category
        self.error_id = str(uuid.uuid4())
        self.timestamp = datetime.now(timezone.utc)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for diagnostics."""
        data: Dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "error_id": self.error_id,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.code:
            data["code"] = self.code
        if self.__cause__ is not None:
            data["cause"] = {
                "error_type": type(self.__cause__).__name__,
                "message": str(self.__cause__),
            }
        return data


class ConfigurationError(FanlogError):
    """Invalid logger configuration (missing directory, unsupported sink)."""

    default_category = ErrorCategory.CONFIG


class ValidationError(FanlogError):
    """A value failed validation."""

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.field_name = field_name

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.field_name:
            data["field_name"] = self.field_name
        return data


class SinkError(FanlogError):
    """A sink could not perform an operation."""

    default_category = ErrorCategory.SINK

    def __init__(
        self,
        message: str,
        *,
        sink_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.sink_name = sink_name

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.sink_name:
            data["sink_name"] = self.sink_name
        return data


__all__ = [
    "ConfigurationError",
    "ErrorCategory",
    "FanlogError",
    "SinkError",
    "ValidationError",
]
