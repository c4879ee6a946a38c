"""End-to-end: many producer threads through a manager into a log file."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from fanlog.core.dispatch import DispatchQueue
from fanlog.core.entry import LogEntry
from fanlog.core.levels import LogLevel
from fanlog.core.logger import LogManager, SinkKind
from fanlog.core.settings import CoreSettings, Settings
from fanlog.plugins.sinks.file import FileSink
from fanlog.testing import RecordingSink

pytestmark = pytest.mark.integration


def test_concurrent_producers_end_up_in_one_file(tmp_path: Path) -> None:
    fallback = RecordingSink(name="fb")
    settings = Settings(
        core=CoreSettings(default_console=False, enqueue_timeout_seconds=5.0)
    )
    manager = LogManager(settings, fallback=fallback)
    manager.add_sink(SinkKind.FILE, tmp_path)

    def produce(worker: int) -> None:
        for i in range(200):
            manager.info(f"worker={worker} seq={i}")

    threads = [threading.Thread(target=produce, args=(w,)) for w in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    manager.shutdown()

    lines = next(tmp_path.glob("*.log")).read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1000
    for worker in range(5):
        seqs = [
            int(line.rsplit("seq=", 1)[1])
            for line in lines
            if f"worker={worker} " in line
        ]
        assert seqs == list(range(200))
    assert fallback.writes == []


def test_file_sink_survives_a_failing_neighbour(tmp_path: Path) -> None:
    fallback = RecordingSink(name="fb")
    broken = RecordingSink(name="broken", fail_writes=True, fail_flush=True)
    file_sink = FileSink(tmp_path, LogLevel.TRACE, filename="mixed.log")

    with DispatchQueue([broken, file_sink], fallback=fallback) as queue:
        for level in LogLevel:
            queue.enqueue(LogEntry(level, f"at {level.name}"))

    text = (tmp_path / "mixed.log").read_text(encoding="utf-8")
    for level in LogLevel:
        assert f"[{level.label}]    at {level.name}\n" in text
    assert file_sink.disposed
    messages = [w.message for w in fallback.writes]
    assert sum("Error in sink broken" in m for m in messages) == len(LogLevel)
    assert any("Error during flush of sink broken" in m for m in messages)
