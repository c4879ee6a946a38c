"""
Configuration models for fanlog using Pydantic v2 Settings.

Values are read from the environment with the ``FANLOG_`` prefix and ``__``
as the nested delimiter, e.g. ``FANLOG_CORE__MIN_LEVEL=debug``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .levels import LogLevel, parse_level


class CoreSettings(BaseModel):
    """Core logging and dispatch settings."""

    min_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Minimum level accepted by the manager and its sinks",
    )
    queue_capacity: int = Field(
        default=1000,
        ge=1,
        description="Maximum number of pending entries in the dispatch queue",
    )
    enqueue_timeout_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Seconds a producer waits for queue space before dropping",
    )
    flush_timeout_seconds: float = Field(
        default=5.0,
        ge=0.0,
        description="Default drain window for flush and shutdown",
    )
    default_console: bool = Field(
        default=True,
        description="Register a console sink when a manager is created",
    )
    console_color: Optional[bool] = Field(
        default=None,
        description="Force console colors on/off; None auto-detects a TTY",
    )
    file_directory: Optional[str] = Field(
        default=None,
        description="When set, the default manager also logs to this directory",
    )
    file_prefix: str = Field(
        default="fanlog",
        description="File name prefix for file sinks",
    )
    enable_metrics: bool = Field(
        default=False,
        description="Export dispatch counters to a Prometheus registry",
    )
    atexit_drain_enabled: bool = Field(
        default=True,
        description="Drain registered managers at interpreter exit",
    )
    atexit_drain_timeout_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Drain window used by the exit hook",
    )

    @field_validator("min_level", mode="before")
    @classmethod
    def _parse_min_level(cls, value: Any) -> LogLevel:
        return parse_level(value)

    @field_validator("file_prefix")
    @classmethod
    def _ensure_prefix_non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("file_prefix must not be empty")
        return value


class Settings(BaseSettings):
    """Top-level configuration model."""

    core: CoreSettings = Field(default_factory=CoreSettings)

    model_config = SettingsConfigDict(
        env_prefix="FANLOG_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(mode="json", exclude_none=True)
