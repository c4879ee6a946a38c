"""
Core dispatch engine, log model, configuration and error types.
"""

from .dispatch import DispatchQueue, QueueState
from .entry import LogEntry
from .errors import (
    ConfigurationError,
    ErrorCategory,
    FanlogError,
    SinkError,
    ValidationError,
)
from .levels import LogLevel, parse_level
from .logger import LogManager, SinkKind
from .settings import CoreSettings, Settings

__all__ = [
    "ConfigurationError",
    "CoreSettings",
    "DispatchQueue",
    "ErrorCategory",
    "FanlogError",
    "LogEntry",
    "LogLevel",
    "LogManager",
    "QueueState",
    "Settings",
    "SinkError",
    "SinkKind",
    "ValidationError",
    "parse_level",
]
