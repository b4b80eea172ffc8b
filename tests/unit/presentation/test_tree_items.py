from __future__ import annotations

from pathlib import Path

from todo_tree.markers import Marker, MarkerIndex
from todo_tree.presentation import Badge, MarkerItem, MarkerTree, PathItem, file_label


def test_children_start_with_path_item_then_markers_by_line() -> None:
    index = MarkerIndex()
    tree = MarkerTree(index)
    index.update_file(
        "test.ts",
        "\n      // TODO: First\n      code...\n      // TODO: Second\n      code...\n      // TODO: Third\n    ",
    )

    file_items = tree.root_items()
    children = tree.children(file_items[0])

    assert isinstance(children[0], PathItem)
    assert [child.label for child in children[1:]] == ["First", "Second", "Third"]
    assert [child.description for child in children[1:]] == ["2", "4", "6"]
    third = children[3]
    assert isinstance(third, MarkerItem)
    assert third.marker == Marker(path="test.ts", line=6, text="Third")


def test_root_items_are_sorted_by_label() -> None:
    index = MarkerIndex()
    tree = MarkerTree(index)
    index.update_file("src/zeta.py", "# TODO: z")
    index.update_file("lib/alpha.py", "# TODO: a\n# TODO: b")

    labels = [item.label for item in tree.root_items()]

    assert labels == ["alpha.py (2)", "zeta.py (1)"]


def test_file_label_uses_basename_for_both_separators() -> None:
    assert file_label("/a/b/c.py", 3) == "c.py (3)"
    assert file_label("C:\\work\\d.ts", 1) == "d.ts (1)"


def test_path_item_is_relative_to_workspace_root(tmp_path: Path) -> None:
    index = MarkerIndex()
    tree = MarkerTree(index, workspace_root=tmp_path)
    absolute = str(tmp_path.resolve() / "src" / "a.py")
    index.update_file(absolute, "# TODO: a")

    children = tree.children(tree.root_items()[0])

    assert children[0] == PathItem(label="src/a.py")


def test_badge_reports_total() -> None:
    index = MarkerIndex()
    tree = MarkerTree(index)
    index.update_file("a.py", "# TODO: a\n# FIXME: b")

    assert tree.badge() == Badge(value=2, tooltip="2 TODOs")


def test_render_lines_lists_every_marker() -> None:
    index = MarkerIndex()
    tree = MarkerTree(index)
    index.update_file("a.py", "x\n# TODO: a")

    assert tree.render_lines() == ["1 TODOs", "a.py (1)", "  a.py", "    2: a"]


def test_sibling_directory_sharing_root_prefix_is_not_stripped(tmp_path: Path) -> None:
    workspace = tmp_path / "ws"
    workspace.mkdir()
    index = MarkerIndex()
    tree = MarkerTree(index, workspace_root=workspace)
    sibling = str(tmp_path.resolve() / "ws2" / "x.py")
    index.update_file(sibling, "# TODO: x")

    children = tree.children(tree.root_items()[0])

    assert children[0] == PathItem(label=sibling)
