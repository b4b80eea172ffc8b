"""Workspace change detection and update coalescing."""

from .coalescer import ChangeCoalescer, ContentSink, PendingChange
from .discovery import detect_file_delta, discover_files, record_map
from .models import FileDelta, FileRecord
from .watcher import PollResult, WorkspaceWatcher

__all__ = [
    "ChangeCoalescer",
    "ContentSink",
    "FileDelta",
    "FileRecord",
    "PendingChange",
    "PollResult",
    "WorkspaceWatcher",
    "detect_file_delta",
    "discover_files",
    "record_map",
]
