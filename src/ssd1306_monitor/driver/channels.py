"""
Observation Channels
====================

Thread-safe containers through which a display driver publishes its state
to readers running in other threads (the web front end).

- HistoryChannel: bounded ring of recent values; the oldest value is
  dropped when a new one arrives at capacity.
- LatestValue: single slot; each publish replaces the previous value.

Both have exactly one producer (the thread driving the display) and any
number of readers. Readers get copies, so they never hold the lock while
processing, and the producer is never blocked for longer than an append.
"""

import threading
from collections import deque
from typing import Deque, Generic, List, Optional, TypeVar

T = TypeVar("T")


class HistoryChannel(Generic[T]):
    """
    Fixed-capacity, drop-oldest history of published values.

    Example:
        >>> ch = HistoryChannel(capacity=2)
        >>> for v in (1, 2, 3):
        ...     ch.publish(v)
        >>> ch.snapshot()
        [2, 3]
    """

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._items: Deque[T] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._published = 0

    @property
    def capacity(self) -> int:
        """Maximum number of values retained."""
        return self._items.maxlen or 0

    @property
    def published(self) -> int:
        """Total number of values ever published (including dropped ones)."""
        return self._published

    def publish(self, value: T) -> None:
        """Append a value, dropping the oldest one if the channel is full."""
        with self._lock:
            self._items.append(value)
            self._published += 1

    def snapshot(self) -> List[T]:
        """Return the retained values, oldest first."""
        with self._lock:
            return list(self._items)

    def latest(self) -> Optional[T]:
        """Return the most recent value, or None if nothing was published."""
        with self._lock:
            return self._items[-1] if self._items else None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class LatestValue(Generic[T]):
    """
    Latest-value-wins cell.

    Readers poll value; published counts every publish, so a reader can
    tell a republished equal value from no publish at all.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._lock = threading.Lock()
        self._published = 0

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    @property
    def published(self) -> int:
        """Number of values published since construction."""
        return self._published

    def publish(self, value: T) -> None:
        with self._lock:
            self._value = value
            self._published += 1
