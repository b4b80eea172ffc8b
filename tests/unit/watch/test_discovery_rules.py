from __future__ import annotations

from pathlib import Path

from todo_tree.config import ScanConfig
from todo_tree.watch import detect_file_delta, discover_files, record_map


def test_discovery_filters_extensions_globs_binaries_and_size(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "src" / "a.py").write_text("# TODO: a\n", encoding="utf-8")
    (tmp_path / "src" / "b.ts").write_text("// TODO: b\n", encoding="utf-8")
    (tmp_path / "src" / "notes.md").write_text("# TODO: not included\n", encoding="utf-8")
    (tmp_path / "src" / "blob.py").write_bytes(b"\x00\x01binary")
    (tmp_path / "src" / "big.py").write_text("#" * 200, encoding="utf-8")
    (tmp_path / "node_modules" / "pkg" / "index.ts").write_text("// TODO: vendored\n", encoding="utf-8")

    config = ScanConfig(
        include_extensions=(".py", ".ts"),
        exclude_globs=("**/node_modules/**",),
        max_file_bytes=100,
    )
    records = discover_files(tmp_path, config)

    assert [record.path for record in records] == ["src/a.py", "src/b.ts"]


def test_delta_classifies_added_updated_unchanged_removed(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    alpha = tmp_path / "src" / "alpha.py"
    beta = tmp_path / "src" / "beta.py"
    gone = tmp_path / "src" / "gone.py"
    alpha.write_text("# TODO: alpha v1\n", encoding="utf-8")
    beta.write_text("# TODO: beta\n", encoding="utf-8")
    gone.write_text("# TODO: gone\n", encoding="utf-8")

    config = ScanConfig(include_extensions=(".py",), exclude_globs=())
    previous = record_map(discover_files(tmp_path, config))

    alpha.write_text("# TODO: alpha v2 changed\n", encoding="utf-8")
    gone.unlink()
    (tmp_path / "src" / "gamma.py").write_text("# TODO: gamma\n", encoding="utf-8")

    delta = detect_file_delta(previous=previous, current_records=discover_files(tmp_path, config))

    assert delta.added == ("src/gamma.py",)
    assert delta.updated == ("src/alpha.py",)
    assert delta.unchanged == ("src/beta.py",)
    assert delta.removed == ("src/gone.py",)
    assert delta.changed == ("src/alpha.py", "src/gamma.py")
