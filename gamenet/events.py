"""Bounded, thread-safe first-in first-out event queue."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Deque


class EventQueueFull(Exception):
    """Raised when pushing onto a queue that holds its maximum of events."""


class EventQueueEmpty(Exception):
    """Raised when popping from a queue that holds no events."""


class EventQueue:
    """A fixed-capacity FIFO of events shared safely between threads."""

    def __init__(self, max_events: int) -> None:
        if max_events < 0:
            raise ValueError("max_events must not be negative")
        self.max_events = max_events
        self._events: Deque[Any] = deque()
        self._lock = threading.Lock()

    def push(self, event: Any) -> None:
        """Append *event*; raise :class:`EventQueueFull` when at capacity."""
        with self._lock:
            if len(self._events) >= self.max_events:
                raise EventQueueFull(f"queue holds {self.max_events} events")
            self._events.append(event)

    def pop(self) -> Any:
        """Remove and return the oldest event; raise :class:`EventQueueEmpty`."""
        with self._lock:
            if not self._events:
                raise EventQueueEmpty("queue is empty")
            return self._events.popleft()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)