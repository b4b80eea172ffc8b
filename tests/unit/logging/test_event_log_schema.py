from __future__ import annotations

import json
from pathlib import Path

from todo_tree.logging import IndexEventRecorder, JsonlEventLogger
from todo_tree.markers import MarkerIndex


def test_recorder_writes_one_event_per_index_change(tmp_path: Path) -> None:
    index = MarkerIndex()
    logger = JsonlEventLogger(path=tmp_path / "logs" / "events.jsonl")
    recorder = IndexEventRecorder(index, logger)

    recorder.update_file("a.py", "# TODO: secret plan\n# FIXME: b")
    recorder.clear()

    lines = logger.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    update = json.loads(lines[0])
    clear = json.loads(lines[1])

    assert set(update.keys()) == {"kind", "marker_count", "path", "timestamp", "total_count"}
    assert update["kind"] == "update_file"
    assert update["path"] == "a.py"
    assert update["marker_count"] == 2
    assert update["total_count"] == 2
    assert "secret plan" not in lines[0]
    assert clear["kind"] == "clear"
    assert clear["path"] is None
    assert clear["total_count"] == 0


def test_closed_recorder_stops_logging(tmp_path: Path) -> None:
    index = MarkerIndex()
    logger = JsonlEventLogger(path=tmp_path / "events.jsonl")
    recorder = IndexEventRecorder(index, logger)
    recorder.close()

    index.update_file("a.py", "# TODO: a")

    assert logger.read() == []


def test_read_applies_since_and_limit(tmp_path: Path) -> None:
    path = tmp_path / "events.jsonl"
    logger = JsonlEventLogger(path=path)
    rows = [
        {"timestamp": "2026-01-01T00:00:00.000Z", "kind": "clear"},
        {"timestamp": "2026-01-02T00:00:00.000Z", "kind": "update_file"},
        {"timestamp": "2026-01-03T00:00:00.000Z", "kind": "update_file"},
    ]
    path.write_text(
        "\n".join(json.dumps(row) for row in rows) + "\nnot json\n\n",
        encoding="utf-8",
    )

    assert [row["timestamp"] for row in logger.read(since="2026-01-02")] == [
        "2026-01-02T00:00:00.000Z",
        "2026-01-03T00:00:00.000Z",
    ]
    assert len(logger.read(limit=1)) == 1
    assert logger.read(limit=0) == []


def test_untagged_index_change_is_not_logged_as_clear(tmp_path: Path) -> None:
    index = MarkerIndex()
    logger = JsonlEventLogger(path=tmp_path / "events.jsonl")
    IndexEventRecorder(index, logger)

    index.update_file("a.py", "")
    index.update_file("b.py", "# TODO: b")

    events = logger.read()
    assert [event["kind"] for event in events] == ["change", "change"]
    assert [event["path"] for event in events] == [None, None]
    assert [event["total_count"] for event in events] == [0, 1]
