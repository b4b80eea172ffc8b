"""Resolve a marker to an on-disk location inside the workspace."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from todo_tree.markers import Marker
from todo_tree.watch.discovery import read_text

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")


class PathBlockedError(Exception):
    """Raised when a marker path escapes the workspace root."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


class LocationUnavailableError(Exception):
    """Raised when the marker's file or line no longer exists on disk."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


@dataclass(slots=True, frozen=True)
class Location:
    """Start of a marker line; ``line`` is 1-based, ``column`` 0-based."""

    path: Path
    line: int
    column: int
    line_text: str


def _normalize_relative_input(candidate: str) -> tuple[str, bool]:
    """Normalize path separators and detect absolute-style inputs."""
    normalized = candidate.replace("\\", "/")
    if normalized.startswith("/"):
        return normalized, True
    if WINDOWS_ABSOLUTE_PATTERN.match(normalized):
        return normalized, True
    return normalized, False


def resolve_workspace_path(workspace_root: Path, candidate: str) -> Path:
    """Resolve a candidate path against the workspace root."""
    root = workspace_root.resolve()
    normalized, is_absolute_style = _normalize_relative_input(candidate)

    if not normalized:
        raise PathBlockedError(
            reason="Path is empty.",
            hint="Provide a workspace-relative path such as 'src/module.py'.",
        )

    if is_absolute_style:
        resolved_absolute = Path(normalized).resolve(strict=False)
        if not resolved_absolute.is_relative_to(root):
            raise PathBlockedError(
                reason="Absolute path is outside the workspace root.",
                hint="Use a path located under the workspace root.",
            )
        return resolved_absolute

    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    if any(part == ".." for part in parts):
        raise PathBlockedError(
            reason="Path traversal is blocked.",
            hint="Remove '..' segments and use a workspace-relative path.",
        )

    resolved = (root / Path(*parts)).resolve(strict=False)
    if not resolved.is_relative_to(root):
        raise PathBlockedError(
            reason="Resolved path escapes the workspace root.",
            hint="Use a path located under the workspace root.",
        )
    return resolved


def resolve_location(workspace_root: Path, marker: Marker) -> Location:
    """Map a marker to the current file content.

    The index reflects content as of the last update; the file may have changed
    since, so a missing file or a short file is reported, not guessed around.
    """
    resolved = resolve_workspace_path(workspace_root, marker.path)
    if not resolved.exists() or not resolved.is_file():
        raise LocationUnavailableError(
            reason=f"File is no longer available: {marker.path}",
            hint="Refresh the index to drop markers of removed files.",
        )
    try:
        lines = read_text(resolved).split("\n")
    except OSError as error:
        raise LocationUnavailableError(
            reason=f"File could not be read: {marker.path}",
            hint="Check file permissions and refresh the index.",
        ) from error
    if marker.line > len(lines):
        raise LocationUnavailableError(
            reason=f"Line {marker.line} is out of range for {marker.path}.",
            hint="The file changed since it was indexed; refresh the index.",
        )
    return Location(path=resolved, line=marker.line, column=0, line_text=lines[marker.line - 1])
