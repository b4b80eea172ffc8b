"""Structured JSONL log of index changes."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

from todo_tree.markers import MarkerIndex, Subscription

EVENT_KIND_UPDATE = "update_file"
EVENT_KIND_CLEAR = "clear"
EVENT_KIND_CHANGE = "change"


@dataclass(slots=True, frozen=True)
class IndexEvent:
    """One index change. Marker text is never recorded, only counts."""

    timestamp: str
    kind: str
    path: str | None
    marker_count: int
    total_count: int


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonlEventLogger:
    """Append-only JSONL event logger and bounded reader."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def append(self, event: IndexEvent) -> None:
        """Append an event as one JSON object per line."""
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def read(self, since: str | None = None, limit: int = 50) -> list[dict[str, object]]:
        """Read recent events, optionally filtered by timestamp lower bound."""
        if limit < 1:
            return []
        entries: list[dict[str, object]] = []
        if not self._path.exists():
            return entries
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    record = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if not isinstance(record, dict):
                    continue
                if since is not None:
                    ts = record.get("timestamp")
                    if not isinstance(ts, str) or ts < since:
                        continue
                entries.append(record)
        if len(entries) <= limit:
            return entries
        return entries[-limit:]


class IndexEventRecorder:
    """Write one IndexEvent per MarkerIndex change.

    The index notification carries no payload, so changes made through
    ``update_file`` and ``clear`` here are tagged with their kind and path.
    Changes made on the index directly are logged as ``"change"``.
    """

    def __init__(self, index: MarkerIndex, logger: JsonlEventLogger) -> None:
        self._index = index
        self._logger = logger
        self._expected_kind: str | None = None
        self._expected_path: str | None = None
        self._subscription: Subscription | None = index.subscribe(self._on_change)

    def update_file(self, path: str, content: str) -> None:
        """Forward to the index, tagging the resulting event with ``path``."""
        self._expected_kind = EVENT_KIND_UPDATE
        self._expected_path = path
        self._index.update_file(path, content)

    def clear(self) -> None:
        """Forward to the index, tagging the resulting event as a clear."""
        self._expected_kind = EVENT_KIND_CLEAR
        self._expected_path = None
        self._index.clear()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

    def _on_change(self) -> None:
        kind = self._expected_kind or EVENT_KIND_CHANGE
        path = self._expected_path
        self._expected_kind = None
        self._expected_path = None
        marker_count = 0
        if path is not None:
            marker_count = len(self._index.get_markers_for_file(path))
        self._logger.append(
            IndexEvent(
                timestamp=utc_timestamp(),
                kind=kind,
                path=path,
                marker_count=marker_count,
                total_count=self._index.get_total_count(),
            )
        )
