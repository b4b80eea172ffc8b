from __future__ import annotations

from todo_tree.markers import Marker, MarkerIndex


def test_five_formats_on_one_file() -> None:
    index = MarkerIndex()
    index.update_file(
        "t.ts",
        "// TODO: Format 1\n// FIXME: Format 2\n// Todo - Format 3\n# TODO: Format 4\n# FIXME - Format 5",
    )

    markers = index.get_markers_for_file("t.ts")

    assert index.get_total_count() == 5
    assert [marker.line for marker in markers] == [1, 2, 3, 4, 5]
    assert [marker.text for marker in markers] == [f"Format {n}" for n in range(1, 6)]
    assert all(marker.path == "t.ts" for marker in markers)


def test_empty_content_yields_no_markers() -> None:
    index = MarkerIndex()
    index.update_file("empty.ts", "")

    assert index.get_total_count() == 0
    assert index.get_markers_for_file("empty.ts") == []
    assert index.get_files_grouped() == []


def test_second_update_fully_replaces_first() -> None:
    index = MarkerIndex()
    index.update_file("t.ts", "// TODO: Old")
    index.update_file("t.ts", "// TODO: New")

    assert index.get_markers_for_file("t.ts") == [Marker(path="t.ts", line=1, text="New")]
    assert index.get_total_count() == 1


def test_replacement_drops_markers_on_lines_no_longer_present() -> None:
    index = MarkerIndex()
    index.update_file("a.py", "# TODO: one\n\n# TODO: three\n# TODO: four")
    index.update_file("a.py", "x = 1\n# FIXME: two")

    assert index.get_markers_for_file("a.py") == [Marker(path="a.py", line=2, text="two")]
    assert index.get_total_count() == 1


def test_empty_content_removes_existing_markers() -> None:
    index = MarkerIndex()
    index.update_file("a.py", "# TODO: gone soon")
    index.update_file("a.py", "")

    assert index.get_markers_for_file("a.py") == []
    assert not index.has_file("a.py")
    assert index.get_total_count() == 0


def test_identical_updates_are_idempotent() -> None:
    content = "# TODO: a\ncode\n// FIXME: b"
    once = MarkerIndex()
    once.update_file("p.py", content)
    twice = MarkerIndex()
    twice.update_file("p.py", content)
    twice.update_file("p.py", content)

    assert twice.get_markers_for_file("p.py") == once.get_markers_for_file("p.py")
    assert twice.get_total_count() == once.get_total_count() == 2


def test_unknown_path_yields_empty_results() -> None:
    index = MarkerIndex()

    assert index.get_markers_for_file("missing.py") == []
    assert not index.has_file("missing.py")


def test_clear_resets_everything() -> None:
    index = MarkerIndex()
    index.update_file("a.py", "# TODO: a")
    index.update_file("b.py", "# TODO: b")

    index.clear()

    assert index.get_total_count() == 0
    assert index.get_file_count() == 0
    assert index.get_files_grouped() == []
