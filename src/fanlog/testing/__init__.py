"""
Testing utilities for fanlog sinks.

Example:
    from fanlog.testing import RecordingSink, validate_sink

    def test_my_sink():
        sink = MySink()
        result = validate_sink(sink)
        assert result.valid
"""

from .mocks import RecordedWrite, RecordingSink
from .validators import (
    ProtocolViolationError,
    ValidationResult,
    validate_sink,
    validate_sink_lifecycle,
)

__all__ = [
    "ProtocolViolationError",
    "RecordedWrite",
    "RecordingSink",
    "ValidationResult",
    "validate_sink",
    "validate_sink_lifecycle",
]
