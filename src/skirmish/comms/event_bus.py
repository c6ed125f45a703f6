"""EventBus — pub/sub for mission lifecycle events.

The mission controller publishes here (``mission_added``,
``mission_disbanded``, ``units_granted``) so hosts can log, chart or react
without the controller knowing who listens.
"""

from __future__ import annotations

import queue
import threading

_QUEUE_SIZE = 256


class EventBus:
    """Thread-safe pub/sub.  Each subscriber gets its own bounded queue."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[tuple[queue.Queue, str | None]] = []

    def subscribe(self, event_type: str | None = None) -> queue.Queue:
        """Return a queue receiving events of *event_type* (all when None)."""
        q: queue.Queue = queue.Queue(maxsize=_QUEUE_SIZE)
        with self._lock:
            self._subscribers.append((q, event_type))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [(s, f) for s, f in self._subscribers if s is not q]

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            targets = [q for q, f in self._subscribers if f is None or f == event_type]
        for q in targets:
            try:
                q.put_nowait(msg)
            except queue.Full:
                # Drop oldest so the newest lifecycle event is kept
                try:
                    q.get_nowait()
                except queue.Empty:
                    pass
                try:
                    q.put_nowait(msg)
                except queue.Full:
                    pass
