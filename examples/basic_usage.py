"""
Basic usage example for fanlog.

Several worker threads log through one manager; every entry is fanned out
to the console and to a file in ./logs. Shutting the manager down drains
the queue before the process exits.
"""

import sys
import threading
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fanlog import LogManager, Settings, SinkKind
from fanlog.core.settings import CoreSettings


def work(manager: LogManager, worker: int) -> None:
    for step in range(3):
        manager.info(f"worker {worker} finished step {step}")
    try:
        raise ValueError(f"worker {worker} could not parse input")
    except ValueError as exc:
        manager.error("Parsing failed", exc)


def main() -> None:
    settings = Settings(core=CoreSettings(min_level="debug", default_console=False))
    with LogManager(settings) as manager:
        manager.add_sink(SinkKind.CONSOLE_AND_FILE, Path(__file__).parent / "logs")
        manager.debug("Application started")

        threads = [
            threading.Thread(target=work, args=(manager, i)) for i in range(3)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        manager.warn("About to shut down")


if __name__ == "__main__":
    main()
