"""Exit-time draining of live log managers.

Managers register themselves on construction and unregister on explicit
shutdown. At interpreter exit every manager still registered is shut down
with the drain window from its own settings, so buffered entries reach
their sinks.

Registration is weak: an abandoned manager can still be garbage collected.
"""

from __future__ import annotations

import atexit
import threading
import weakref
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .logger import LogManager

_managers: weakref.WeakSet[Any] = weakref.WeakSet()
_exit_lock = threading.Lock()
_exit_ran = False


def register_manager(manager: LogManager) -> None:
    _managers.add(manager)


def unregister_manager(manager: LogManager) -> None:
    _managers.discard(manager)


def registered_managers() -> list[Any]:
    return list(_managers)


def _drain_window(manager: Any) -> Optional[float]:
    """Exit drain timeout from the manager's own settings, None if disabled."""
    settings = getattr(manager, "settings", None)
    core = getattr(settings, "core", None)
    if core is None:
        from .settings import CoreSettings

        core = CoreSettings()
    if not core.atexit_drain_enabled:
        return None
    return core.atexit_drain_timeout_seconds


def _atexit_handler() -> None:
    """Shut down every registered manager once; never raises."""
    global _exit_ran

    with _exit_lock:
        if _exit_ran:
            return
        _exit_ran = True

    for manager in registered_managers():
        timeout = _drain_window(manager)
        if timeout is None:
            continue
        try:
            manager.shutdown(timeout=timeout)
        except Exception:  # noqa: BLE001
            # One stuck manager must not keep the others from draining
            continue


def _reset_for_tests() -> None:
    global _exit_ran
    with _exit_lock:
        _exit_ran = False
    _managers.clear()


atexit.register(_atexit_handler)
