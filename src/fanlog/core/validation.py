"""
Validation helpers shared by the manager and sinks.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Collection
from pathlib import Path
from typing import Any, Optional, Union

from .errors import ConfigurationError, ValidationError


def is_empty(value: Any) -> bool:
    """Return True for None, blank strings, and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Collection):
        return len(value) == 0
    return False


def ensure_not_empty(
    value: Any,
    *,
    name: str = "value",
    hard_fail: bool = True,
    message: Optional[str] = None,
) -> bool:
    """Check that ``value`` is not None or empty.

    Args:
        value: Value to check.
        name: Parameter name used in the error message.
        hard_fail: Raise on failure when True, otherwise return False.
        message: Optional custom error message.

    Returns:
        True when the value is present; False on soft failure.

    Raises:
        ValidationError: If the value is empty and ``hard_fail`` is set.
    """
    if not is_empty(value):
        return True
    if hard_fail:
        raise ValidationError(
            message
            or f"Parameter '{name}' cannot be null or empty. Type: "
            f"{type(value).__name__}",
            field_name=name,
        )
    return False


def _nearest_existing(path: Path) -> Path:
    current = path
    while not current.exists() and current != current.parent:
        current = current.parent
    return current


def ensure_directory_writable(directory: Union[str, Path]) -> Path:
    """Resolve ``directory``, verify write access, and create it if missing.

    When the directory does not exist the nearest existing ancestor is probed
    with a throwaway file before creating it.

    Returns:
        The resolved directory path.

    Raises:
        ConfigurationError: ``LOG-DIR-002`` when the location is not writable.
    """
    target = Path(directory).expanduser().resolve()
    probe_dir = target if target.exists() else _nearest_existing(target)
    if probe_dir.exists() and not probe_dir.is_dir():
        raise ConfigurationError(
            f"Log directory path is not a directory: {probe_dir}",
            code="LOG-DIR-002",
        )
    try:
        fd, probe = tempfile.mkstemp(dir=probe_dir, prefix=".fanlog-probe-")
        os.close(fd)
        os.unlink(probe)
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(
            f"Insufficient permissions to create log directory at {directory}",
            code="LOG-DIR-002",
            cause=exc,
        ) from exc
    return target


__all__ = ["ensure_directory_writable", "ensure_not_empty", "is_empty"]
