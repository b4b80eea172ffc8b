"""Deterministic workspace file discovery and change detection."""

from __future__ import annotations

import fnmatch
import hashlib
import os
from dataclasses import dataclass
from pathlib import Path

from todo_tree.config import ScanConfig
from todo_tree.watch.models import FileDelta, FileRecord

_BINARY_SNIFF_BYTES = 4096


@dataclass(slots=True, frozen=True)
class _CandidateFile:
    """Candidate discovered during traversal, before hashing."""

    relative_path: str
    full_path: Path
    size: int
    mtime_ns: int


def discover_files(
    workspace_root: Path,
    config: ScanConfig,
    previous_records: dict[str, FileRecord] | None = None,
) -> list[FileRecord]:
    """Discover indexable text files in path order.

    Files whose size and mtime match ``previous_records`` reuse the stored hash
    instead of being read again.
    """
    root = workspace_root.resolve()
    candidates = _discover_candidates(
        root=root,
        include_extensions=set(config.include_extensions),
        exclude_globs=config.exclude_globs,
        excluded_dir_names=_excluded_dir_names(config.exclude_globs),
    )
    candidates.sort(key=lambda item: item.relative_path)

    records: list[FileRecord] = []
    prior = previous_records or {}
    for candidate in candidates:
        if candidate.size > config.max_file_bytes:
            continue
        previous = prior.get(candidate.relative_path)
        if (
            previous is not None
            and previous.size == candidate.size
            and previous.mtime_ns == candidate.mtime_ns
        ):
            records.append(previous)
            continue
        try:
            if is_binary_file(candidate.full_path):
                continue
            content_hash = sha256_file(candidate.full_path)
        except OSError:
            continue
        records.append(
            FileRecord(
                path=candidate.relative_path,
                size=candidate.size,
                mtime_ns=candidate.mtime_ns,
                content_hash=content_hash,
            )
        )
    return records


def detect_file_delta(
    previous: dict[str, FileRecord],
    current_records: list[FileRecord],
) -> FileDelta:
    """Compute deterministic added/updated/unchanged/removed sets."""
    current = record_map(current_records)
    previous_paths = set(previous.keys())
    current_paths = set(current.keys())

    added = sorted(current_paths - previous_paths)
    removed = sorted(previous_paths - current_paths)

    updated: list[str] = []
    unchanged: list[str] = []
    for path in sorted(previous_paths & current_paths):
        if previous[path].content_hash == current[path].content_hash:
            unchanged.append(path)
            continue
        updated.append(path)

    return FileDelta(
        added=tuple(added),
        updated=tuple(updated),
        unchanged=tuple(unchanged),
        removed=tuple(removed),
    )


def record_map(records: list[FileRecord]) -> dict[str, FileRecord]:
    """Map records by relative path."""
    return {record.path: record for record in records}


def should_exclude(relative_path: str, exclude_globs: tuple[str, ...]) -> bool:
    """Return True when a path matches configured ignore globs."""
    anchored = f"/{relative_path}"
    return any(
        fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(anchored, pattern)
        for pattern in exclude_globs
    )


def _excluded_dir_names(exclude_globs: tuple[str, ...]) -> set[str]:
    """Extract directory-name prunes from **/name/** glob patterns."""
    output: set[str] = set()
    for pattern in exclude_globs:
        if not pattern.startswith("**/") or not pattern.endswith("/**"):
            continue
        name = pattern[3:-3].strip("/")
        if not name:
            continue
        if any(char in name for char in "*?[]{}"):
            continue
        output.add(name)
    return output


def _discover_candidates(
    *,
    root: Path,
    include_extensions: set[str],
    exclude_globs: tuple[str, ...],
    excluded_dir_names: set[str],
) -> list[_CandidateFile]:
    """Walk the tree with light pruning for excluded directories."""
    candidates: list[_CandidateFile] = []
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError:
            continue
        for entry in reversed(ordered_entries):
            full_path = Path(entry.path)
            relative = full_path.relative_to(root).as_posix()
            if entry.is_dir(follow_symlinks=False):
                if entry.name in excluded_dir_names and should_exclude(
                    f"{relative}/", exclude_globs
                ):
                    continue
                stack.append(full_path)
                continue
            if not entry.is_file(follow_symlinks=False):
                continue
            if should_exclude(relative, exclude_globs):
                continue
            if full_path.suffix.lower() not in include_extensions:
                continue
            try:
                stat = entry.stat(follow_symlinks=False)
            except OSError:
                continue
            candidates.append(
                _CandidateFile(
                    relative_path=relative,
                    full_path=full_path,
                    size=stat.st_size,
                    mtime_ns=stat.st_mtime_ns,
                )
            )
    return candidates


def read_text(path: Path) -> str:
    """Read file text the way every indexed file is read."""
    return path.read_text(encoding="utf-8", errors="replace")


def sha256_file(path: Path) -> str:
    """Compute SHA-256 hash in chunked reads."""
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(1024 * 128)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()


def is_binary_file(path: Path) -> bool:
    """Use content sniffing to exclude binary files."""
    with path.open("rb") as handle:
        sample = handle.read(_BINARY_SNIFF_BYTES)
    if b"\x00" in sample:
        return True
    try:
        sample.decode("utf-8")
    except UnicodeDecodeError:
        return True
    return False
