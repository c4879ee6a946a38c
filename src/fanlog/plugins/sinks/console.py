from __future__ import annotations

import os
import sys
import threading
import traceback
from datetime import datetime, timezone
from typing import Optional, TextIO

from ...core.levels import LevelLike, LogLevel
from . import LevelSink

RESET = "\x1b[0m"
_ERROR_STYLE = "\x1b[1m\x1b[3m\x1b[97;41m"  # bold italic, white on red

COLORS: dict[LogLevel, str] = {
    LogLevel.TRACE: "\x1b[37;40m",  # gray
    LogLevel.DEBUG: "\x1b[35;40m",  # magenta
    LogLevel.INFO: "\x1b[32;40m",  # green
    LogLevel.WARN: "\x1b[33;40m",  # yellow
    LogLevel.ERROR: "\x1b[31;40m",  # red
    LogLevel.FATAL: "\x1b[97;41m",  # white on dark red
}


def _is_tty(stream: TextIO) -> bool:
    try:
        return bool(stream.isatty())
    except Exception:
        return False


def format_error(error: BaseException) -> str:
    """Render an error with its traceback and cause chain."""
    return "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    ).rstrip("\n")


class ConsoleSink(LevelSink):
    """Human-readable console sink with per-level ANSI colors.

    - One line per entry: timestamp, PID, TID, level label, message
    - Attached errors follow on the next lines with their traceback
    - Colors only when the stream is a TTY unless forced with ``color``
    """

    def __init__(
        self,
        min_level: LevelLike = LogLevel.INFO,
        *,
        stream: Optional[TextIO] = None,
        color: Optional[bool] = None,
    ) -> None:
        super().__init__(min_level)
        self._stream = stream
        self._color = color
        self._lock = threading.Lock()
        self._disposed = False

    @property
    def name(self) -> str:
        return "console"

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _target(self) -> TextIO:
        # Resolve lazily so redirected/captured stdout is honored
        return self._stream if self._stream is not None else sys.stdout

    def _use_color(self, stream: TextIO) -> bool:
        if self._color is not None:
            return self._color
        return _is_tty(stream)

    def format_line(self, level: LogLevel, message: str) -> str:
        now = datetime.now(timezone.utc).strftime("%d.%m.%Y %H:%M:%S.%f")
        pid = os.getpid()
        tid = threading.get_native_id()
        return f"[{now}] [PID:{pid:>6}]|[TID:{tid:>3}] [{level.label}]  {message} "

    def write(
        self,
        level: LogLevel,
        message: str,
        error: Optional[BaseException] = None,
    ) -> None:
        if not self.should_log(level):
            return
        line = self.format_line(level, message)
        with self._lock:
            stream = self._target()
            color = self._use_color(stream)
            if color:
                stream.write(f"{COLORS.get(level, '')}{line}{RESET}\n")
            else:
                stream.write(line + "\n")
            if error is not None:
                rendered = format_error(error)
                if color:
                    stream.write(f"{_ERROR_STYLE}{rendered}{RESET}\n")
                else:
                    stream.write(rendered + "\n")

    def flush(self) -> None:
        with self._lock:
            for stream in (self._target(), sys.stderr):
                try:
                    stream.flush()
                except Exception:
                    # A closed or detached stream is not worth failing over
                    pass

    def dispose(self) -> None:
        # Standard streams are not owned by the sink
        self._disposed = True


__all__ = ["COLORS", "ConsoleSink", "format_error"]
