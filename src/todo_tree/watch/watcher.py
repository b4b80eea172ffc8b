"""Polling workspace watcher feeding changed file text to a coalescer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from todo_tree.config import ScanConfig
from todo_tree.watch.coalescer import ChangeCoalescer
from todo_tree.watch.discovery import detect_file_delta, discover_files, read_text, record_map
from todo_tree.watch.models import FileRecord


@dataclass(slots=True, frozen=True)
class PollResult:
    """Counts from one poll pass."""

    added: int
    updated: int
    removed: int
    pushed: int


class WorkspaceWatcher:
    """Detect added, updated and removed files between polls.

    Paths handed to the coalescer are workspace-relative POSIX paths. Removed
    files are pushed with empty content so their markers disappear.
    """

    def __init__(self, workspace_root: Path, config: ScanConfig, coalescer: ChangeCoalescer) -> None:
        self._workspace_root = workspace_root.resolve()
        self._config = config
        self._coalescer = coalescer
        self._records: dict[str, FileRecord] = {}

    @property
    def tracked_paths(self) -> tuple[str, ...]:
        return tuple(sorted(self._records))

    def poll(self) -> PollResult:
        """Diff the workspace against the previous poll and push the changes."""
        current = discover_files(self._workspace_root, self._config, previous_records=self._records)
        delta = detect_file_delta(previous=self._records, current_records=current)
        current_map = record_map(current)

        pushed = 0
        for path in delta.changed:
            content = self._read(path)
            if content is None:
                current_map.pop(path, None)
                continue
            self._coalescer.push(path, content)
            pushed += 1
        for path in delta.removed:
            self._coalescer.push(path, "")
            pushed += 1

        self._records = current_map
        return PollResult(
            added=len(delta.added),
            updated=len(delta.updated),
            removed=len(delta.removed),
            pushed=pushed,
        )

    def refresh(self) -> int:
        """Push every discoverable file, changed or not."""
        current = discover_files(self._workspace_root, self._config, previous_records=self._records)
        current_map = record_map(current)
        pushed = 0
        for record in current:
            content = self._read(record.path)
            if content is None:
                current_map.pop(record.path, None)
                continue
            self._coalescer.push(record.path, content)
            pushed += 1
        for path in sorted(set(self._records) - set(current_map)):
            self._coalescer.push(path, "")
            pushed += 1
        self._records = current_map
        return pushed

    def _read(self, relative_path: str) -> str | None:
        try:
            return read_text(self._workspace_root / relative_path)
        except OSError:
            return None
