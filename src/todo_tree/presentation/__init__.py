"""Tree presentation and navigation over the marker index."""

from .navigation import (
    Location,
    LocationUnavailableError,
    PathBlockedError,
    resolve_location,
    resolve_workspace_path,
)
from .tree import Badge, FileItem, LabelCache, MarkerItem, MarkerTree, PathItem, TreeItem, file_label

__all__ = [
    "Badge",
    "FileItem",
    "LabelCache",
    "Location",
    "LocationUnavailableError",
    "MarkerItem",
    "MarkerTree",
    "PathBlockedError",
    "PathItem",
    "TreeItem",
    "file_label",
    "resolve_location",
    "resolve_workspace_path",
]
