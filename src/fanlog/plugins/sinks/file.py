from __future__ import annotations

import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO, Union

from ...core.errors import SinkError
from ...core.levels import LevelLike, LogLevel
from ...core.validation import ensure_directory_writable
from . import LevelSink
from .console import format_error


def make_log_filename(prefix: str = "fanlog", when: Optional[datetime] = None) -> str:
    """Return ``<prefix>__dd_mm_yy__HH_MM_SS.log`` for ``when`` (UTC now)."""
    stamp = (when or datetime.now(timezone.utc)).strftime("%d_%m_%y__%H_%M_%S")
    return f"{prefix}__{stamp}.log"


class FileSink(LevelSink):
    """Plain-text file sink writing one line per entry.

    The directory is checked for write permission and created on
    construction; a failure raises ``ConfigurationError``. The file is
    opened in append mode, so a new sink pointed at an existing file name
    continues it.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        min_level: LevelLike = LogLevel.INFO,
        *,
        filename_prefix: str = "fanlog",
        filename: Optional[str] = None,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(min_level)
        self._directory = ensure_directory_writable(directory)
        self._path = self._directory / (filename or make_log_filename(filename_prefix))
        self._lock = threading.Lock()
        self._file: Optional[TextIO] = open(
            self._path, "a", encoding=encoding, buffering=1
        )

    @property
    def name(self) -> str:
        return "file"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def disposed(self) -> bool:
        return self._file is None

    def write(
        self,
        level: LogLevel,
        message: str,
        error: Optional[BaseException] = None,
    ) -> None:
        if not self.should_log(level):
            return
        now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")[:-2]
        line = f"[{now}]  [{level.label}]    {message}\n"
        if error is not None:
            line += f"EXC: {format_error(error)}\n"
        with self._lock:
            if self._file is None:
                raise SinkError(
                    f"File sink for {self._path} is disposed", sink_name=self.name
                )
            self._file.write(line)

    def flush(self) -> None:
        with self._lock:
            if self._file is None:
                return
            self._file.flush()
            os.fsync(self._file.fileno())

    def dispose(self) -> None:
        with self._lock:
            if self._file is None:
                return
            try:
                self._file.flush()
            finally:
                self._file.close()
                self._file = None


__all__ = ["FileSink", "make_log_filename"]
