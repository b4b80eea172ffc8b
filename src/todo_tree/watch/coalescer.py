"""Per-path change coalescing with a fixed quiet period."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

ContentSink = Callable[[str, str], None]
Clock = Callable[[], float]


@dataclass(slots=True, frozen=True)
class PendingChange:
    """Latest content snapshot waiting for its quiet period to elapse."""

    path: str
    content: str
    due_at: float


class ChangeCoalescer:
    """Collapse bursts of content changes for one path into a single sink call.

    Every ``push`` for a path replaces that path's pending content and restarts
    its quiet period. ``flush_due`` hands each path whose quiet period has
    elapsed to the sink exactly once, with the last pushed content.
    """

    def __init__(
        self,
        quiet_period_seconds: float,
        sink: ContentSink,
        clock: Clock = time.monotonic,
    ) -> None:
        if quiet_period_seconds < 0:
            raise ValueError("quiet_period_seconds must be >= 0")
        self._quiet_period_seconds = quiet_period_seconds
        self._sink = sink
        self._clock = clock
        self._pending: dict[str, PendingChange] = {}
        self._lock = threading.Lock()

    def push(self, path: str, content: str) -> None:
        """Record the latest content for ``path`` and restart its quiet period."""
        due_at = self._clock() + self._quiet_period_seconds
        with self._lock:
            self._pending[path] = PendingChange(path=path, content=content, due_at=due_at)

    def pending_paths(self) -> tuple[str, ...]:
        """Return paths still waiting to be flushed, in path order."""
        with self._lock:
            return tuple(sorted(self._pending))

    def next_due_at(self) -> float | None:
        """Return the earliest due time, or None when nothing is pending."""
        with self._lock:
            if not self._pending:
                return None
            return min(change.due_at for change in self._pending.values())

    def flush_due(self) -> int:
        """Deliver every change whose quiet period has elapsed; return the count."""
        now = self._clock()
        with self._lock:
            ready = sorted(
                (change for change in self._pending.values() if change.due_at <= now),
                key=lambda item: item.path,
            )
        return self._deliver(ready)

    def flush_all(self) -> int:
        """Deliver every pending change regardless of its quiet period."""
        with self._lock:
            ready = sorted(self._pending.values(), key=lambda item: item.path)
        return self._deliver(ready)

    def discard(self) -> None:
        """Drop pending changes without delivering them."""
        with self._lock:
            self._pending.clear()

    def _deliver(self, changes: list[PendingChange]) -> int:
        # A change leaves the queue only once the sink accepted it. Failed
        # changes stay pending for the next flush; the first failure is
        # re-raised after the remaining changes were delivered.
        delivered = 0
        first_error: Exception | None = None
        for change in changes:
            try:
                self._sink(change.path, change.content)
            except Exception as error:
                if first_error is None:
                    first_error = error
                continue
            with self._lock:
                if self._pending.get(change.path) is change:
                    del self._pending[change.path]
            delivered += 1
        if first_error is not None:
            raise first_error
        return delivered
