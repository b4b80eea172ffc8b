"""Typed models for workspace change detection."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class FileRecord:
    """Represents a workspace file seen by the last poll."""

    path: str
    size: int
    mtime_ns: int
    content_hash: str


@dataclass(slots=True, frozen=True)
class FileDelta:
    """Deterministic change classification between two polls."""

    added: tuple[str, ...]
    updated: tuple[str, ...]
    unchanged: tuple[str, ...]
    removed: tuple[str, ...]

    @property
    def changed(self) -> tuple[str, ...]:
        """Added and updated paths in path order."""
        return tuple(sorted(self.added + self.updated))
