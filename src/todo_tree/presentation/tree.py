"""Grouped tree rendering over a MarkerIndex."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from todo_tree.markers import Marker, MarkerIndex, Subscription

_PATH_SEPARATORS = re.compile(r"[/\\]")


@dataclass(slots=True, frozen=True)
class FileItem:
    """Top-level node for one file."""

    path: str
    label: str
    count: int


@dataclass(slots=True, frozen=True)
class PathItem:
    """First child of a file node showing its workspace-relative path."""

    label: str


@dataclass(slots=True, frozen=True)
class MarkerItem:
    """Leaf node; ``marker`` is the navigation target."""

    label: str
    description: str
    marker: Marker


TreeItem = FileItem | PathItem | MarkerItem


@dataclass(slots=True, frozen=True)
class Badge:
    """Summary count shown next to the view title."""

    value: int
    tooltip: str


def file_label(path: str, count: int) -> str:
    """Return ``"<basename> (<count>)"`` for a file node."""
    basename = _PATH_SEPARATORS.split(path)[-1]
    return f"{basename} ({count})"


class LabelCache:
    """Memoizes file labels by (path, count).

    Entries are cosmetic; keying by path alone would hide count changes.
    """

    def __init__(self) -> None:
        self._items: dict[tuple[str, int], FileItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def get(self, path: str, count: int) -> FileItem:
        key = (path, count)
        item = self._items.get(key)
        if item is None:
            item = FileItem(path=path, label=file_label(path, count), count=count)
            self._items[key] = item
        return item

    def prune(self, live_keys: set[tuple[str, int]]) -> None:
        """Drop entries whose (path, count) is no longer current."""
        for key in [key for key in self._items if key not in live_keys]:
            del self._items[key]

    def clear(self) -> None:
        self._items.clear()


class MarkerTree:
    """Long-lived presentation object holding the single index reference."""

    def __init__(self, index: MarkerIndex, workspace_root: Path | None = None) -> None:
        self._index = index
        self._workspace_root = workspace_root.resolve() if workspace_root is not None else None
        self._labels = LabelCache()
        self._dirty = True
        self._subscription: Subscription | None = index.subscribe(self._on_index_changed)

    @property
    def dirty(self) -> bool:
        """True when the index changed since the last ``root_items`` call."""
        return self._dirty

    @property
    def label_cache(self) -> LabelCache:
        return self._labels

    def root_items(self) -> list[FileItem]:
        groups = self._index.get_files_grouped()
        items = [self._labels.get(group.path, group.count) for group in groups]
        self._labels.prune({(group.path, group.count) for group in groups})
        self._dirty = False
        items.sort(key=lambda item: (item.label, item.path))
        return items

    def children(self, item: FileItem) -> list[TreeItem]:
        markers = self._index.get_markers_for_file(item.path)
        children: list[TreeItem] = [PathItem(label=self.relative_label(item.path))]
        children.extend(
            MarkerItem(label=marker.text, description=str(marker.line), marker=marker)
            for marker in markers
        )
        return children

    def badge(self) -> Badge:
        total = self._index.get_total_count()
        return Badge(value=total, tooltip=f"{total} TODOs")

    def relative_label(self, path: str) -> str:
        """Return ``path`` relative to the workspace root when it lies under it."""
        if self._workspace_root is not None:
            candidate = Path(path)
            if candidate.is_absolute() and candidate.is_relative_to(self._workspace_root):
                return candidate.relative_to(self._workspace_root).as_posix()
        return path

    def render_lines(self) -> list[str]:
        """Render the whole tree as indented text lines."""
        badge = self.badge()
        lines = [badge.tooltip]
        for file_item in self.root_items():
            lines.append(file_item.label)
            for child in self.children(file_item):
                if isinstance(child, PathItem):
                    lines.append(f"  {child.label}")
                    continue
                if isinstance(child, MarkerItem):
                    lines.append(f"    {child.description}: {child.label}")
        return lines

    def dispose(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None
        self._labels.clear()

    def _on_index_changed(self) -> None:
        self._dirty = True
