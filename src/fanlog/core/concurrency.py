"""
Thread-safe bounded queue used by the dispatch engine.

``ClosableQueue`` is a multi-producer FIFO with:
- bounded ``put`` that waits up to a timeout for space
- blocking ``get`` that sleeps on a condition variable (no polling)
- ``close`` to stop accepting items while letting the consumer drain
- ``cancel`` to abandon the backlog and wake the consumer immediately

Design:
- One ``threading.Condition`` guards the deque and both wait sets
- Closing wakes blocked producers, which then observe ``QueueClosedError``
- A consumer sees ``QueueClosedError`` only once the queue is closed *and*
  empty, so every accepted item is handed out unless the queue is cancelled
"""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Deque, Generic, Optional, TypeVar

T = TypeVar("T")


class QueueClosedError(Exception):
    """Raised by ``put`` after close, and by ``get`` once closed and drained."""


class QueueCancelledError(Exception):
    """Raised by ``get`` after the queue has been cancelled."""


class ClosableQueue(Generic[T]):
    """Bounded FIFO with close/cancel semantics for one consumer."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._capacity = capacity
        self._items: Deque[T] = deque()
        self._cond = threading.Condition(threading.Lock())
        self._closed = False
        self._cancelled = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def qsize(self) -> int:
        with self._cond:
            return len(self._items)

    def put(self, item: T, timeout: Optional[float] = None) -> bool:
        """Add ``item``, waiting up to ``timeout`` seconds for space.

        Returns:
            True if the item was accepted, False if no space opened in time.

        Raises:
            QueueClosedError: If the queue is (or becomes) closed.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while True:
                if self._closed:
                    raise QueueClosedError("queue is closed")
                if len(self._items) < self._capacity:
                    self._items.append(item)
                    self._cond.notify_all()
                    return True
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._cond.wait(remaining)

    def try_put(self, item: T) -> bool:
        """Non-blocking put; False when full."""
        return self.put(item, timeout=0)

    def get(self) -> T:
        """Remove and return the oldest item, blocking until one exists.

        Raises:
            QueueCancelledError: If the queue was cancelled.
            QueueClosedError: If the queue is closed and fully drained.
        """
        with self._cond:
            while True:
                if self._cancelled:
                    raise QueueCancelledError("queue was cancelled")
                if self._items:
                    item = self._items.popleft()
                    self._cond.notify_all()
                    return item
                if self._closed:
                    raise QueueClosedError("queue is closed and drained")
                self._cond.wait()

    def close(self) -> None:
        """Stop accepting new items. Idempotent."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def cancel(self) -> int:
        """Close, discard the backlog, and wake every waiter.

        Returns:
            The number of discarded items.
        """
        with self._cond:
            self._closed = True
            self._cancelled = True
            dropped = len(self._items)
            self._items.clear()
            self._cond.notify_all()
            return dropped
