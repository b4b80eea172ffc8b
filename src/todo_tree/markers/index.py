"""In-memory marker index with whole-file replacement."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

from todo_tree.markers.extractor import extract_markers
from todo_tree.markers.models import FileGroup, Marker, MarkerKey

ChangeListener = Callable[[], None]


@dataclass(slots=True, frozen=True)
class Subscription:
    """Handle returned by MarkerIndex.subscribe."""

    index: MarkerIndex
    listener: ChangeListener

    def dispose(self) -> None:
        """Stop delivering change notifications to the listener."""
        self.index.unsubscribe(self.listener)


class MarkerIndex:
    """Maps (path, line) keys to markers and notifies listeners on change.

    Each ``update_file`` call fully replaces the markers of one path. Reads and
    the replace-then-notify sequence share one re-entrant lock, so listeners may
    re-query the index from inside a notification.
    """

    def __init__(self) -> None:
        self._markers: dict[MarkerKey, Marker] = {}
        self._keys_by_path: dict[str, list[MarkerKey]] = {}
        self._listeners: list[ChangeListener] = []
        self._lock = threading.RLock()

    def update_file(self, path: str, content: str) -> None:
        """Replace every marker of ``path`` with the markers found in ``content``."""
        with self._lock:
            for key in self._keys_by_path.pop(path, []):
                del self._markers[key]

            keys: list[MarkerKey] = []
            for extracted in extract_markers(content):
                key = MarkerKey(path=path, line=extracted.line)
                self._markers[key] = Marker(path=path, line=extracted.line, text=extracted.text)
                keys.append(key)
            if keys:
                self._keys_by_path[path] = keys

            self._notify()

    def get_total_count(self) -> int:
        """Return the number of markers across all files."""
        with self._lock:
            return len(self._markers)

    def get_file_count(self) -> int:
        """Return the number of files holding at least one marker."""
        with self._lock:
            return len(self._keys_by_path)

    def get_file_paths(self) -> list[str]:
        """Return indexed paths in code-point order."""
        with self._lock:
            return sorted(self._keys_by_path)

    def has_file(self, path: str) -> bool:
        with self._lock:
            return path in self._keys_by_path

    def get_markers_for_file(self, path: str) -> list[Marker]:
        """Return markers of one file ascending by line; empty for unknown paths."""
        with self._lock:
            keys = self._keys_by_path.get(path, [])
            markers = [self._markers[key] for key in keys]
        markers.sort(key=lambda item: item.line)
        return markers

    def get_files_grouped(self) -> list[FileGroup]:
        """Return per-file marker groups, files by path and markers by line."""
        with self._lock:
            return [
                FileGroup(path=path, markers=tuple(self.get_markers_for_file(path)))
                for path in sorted(self._keys_by_path)
            ]

    def clear(self) -> None:
        """Drop every marker and notify listeners once."""
        with self._lock:
            self._markers.clear()
            self._keys_by_path.clear()
            self._notify()

    def subscribe(self, listener: ChangeListener) -> Subscription:
        """Register a zero-argument listener called after every change."""
        with self._lock:
            self._listeners.append(listener)
        return Subscription(index=self, listener=listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self) -> None:
        # Every listener is called even if an earlier one fails; the first
        # failure is re-raised once the state change is fully announced.
        first_error: Exception | None = None
        for listener in tuple(self._listeners):
            try:
                listener()
            except Exception as error:
                if first_error is None:
                    first_error = error
        if first_error is not None:
            raise first_error
