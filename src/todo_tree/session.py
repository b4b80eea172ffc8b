"""Session wiring: index, tree, coalescer, watcher and event log."""

from __future__ import annotations

import time
from pathlib import Path

from todo_tree.config import CliOverrides, TodoTreeConfig, load_effective_config
from todo_tree.logging import IndexEventRecorder, JsonlEventLogger
from todo_tree.markers import Marker, MarkerIndex
from todo_tree.presentation import Location, MarkerTree, resolve_location
from todo_tree.watch import ChangeCoalescer, PollResult, WorkspaceWatcher
from todo_tree.watch.coalescer import Clock


class Session:
    """Owns one MarkerIndex and everything that feeds or renders it."""

    def __init__(self, config: TodoTreeConfig, clock: Clock = time.monotonic) -> None:
        self._config = config
        self._index = MarkerIndex()
        self._tree = MarkerTree(self._index, workspace_root=config.workspace_root)
        self._recorder: IndexEventRecorder | None = None
        if config.log.events_enabled:
            self._recorder = IndexEventRecorder(
                self._index, JsonlEventLogger(path=config.data_dir / "events.jsonl")
            )
        sink = self._recorder.update_file if self._recorder is not None else self._index.update_file
        self._coalescer = ChangeCoalescer(
            quiet_period_seconds=config.watch.quiet_period_ms / 1000,
            sink=sink,
            clock=clock,
        )
        self._watcher = WorkspaceWatcher(
            workspace_root=config.workspace_root,
            config=config.scan,
            coalescer=self._coalescer,
        )

    @property
    def config(self) -> TodoTreeConfig:
        return self._config

    @property
    def index(self) -> MarkerIndex:
        return self._index

    @property
    def tree(self) -> MarkerTree:
        return self._tree

    @property
    def coalescer(self) -> ChangeCoalescer:
        return self._coalescer

    def refresh(self) -> int:
        """Re-read every workspace file and apply it immediately."""
        self._watcher.refresh()
        return self._coalescer.flush_all()

    def poll_once(self) -> PollResult:
        """Detect changes and apply those whose quiet period has elapsed."""
        result = self._watcher.poll()
        self._coalescer.flush_due()
        return result

    def open_location(self, marker: Marker) -> Location:
        return resolve_location(self._config.workspace_root, marker)

    def close(self) -> None:
        """Tear down: drop pending changes, clear the index, release listeners."""
        self._coalescer.discard()
        if self._recorder is not None:
            self._recorder.clear()
        else:
            self._index.clear()
        self._tree.dispose()
        if self._recorder is not None:
            self._recorder.close()
            self._recorder = None


def create_session(
    workspace_root: str | Path,
    cli_overrides: CliOverrides | None = None,
    clock: Clock = time.monotonic,
) -> Session:
    """Build a session from the effective config of ``workspace_root``."""
    config = load_effective_config(Path(workspace_root), overrides=cli_overrides)
    return Session(config, clock=clock)
