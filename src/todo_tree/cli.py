"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from todo_tree.config import CliOverrides
from todo_tree.markers import Marker
from todo_tree.presentation import LocationUnavailableError, PathBlockedError
from todo_tree.session import Session, create_session

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_LOCATION_ERROR = 2


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for all subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--root", required=False, default=".")
    common.add_argument("--data-dir", required=False, default=None)
    common.add_argument("--quiet-period-ms", type=int, required=False, default=None)
    common.add_argument("--poll-interval-ms", type=int, required=False, default=None)
    common.add_argument("--events", choices=("true", "false"), required=False, default=None)

    parser = argparse.ArgumentParser(prog="todo-tree")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", parents=[common])
    scan.add_argument("--json", action="store_true", default=False)

    watch = subparsers.add_parser("watch", parents=[common])
    watch.add_argument("--iterations", type=int, required=False, default=None)

    open_parser = subparsers.add_parser("open", parents=[common])
    open_parser.add_argument("path")
    open_parser.add_argument("line", type=int)

    subparsers.add_parser("config", parents=[common])
    return parser


def overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    events_enabled: bool | None = None
    if args.events == "true":
        events_enabled = True
    if args.events == "false":
        events_enabled = False
    return CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        quiet_period_ms=args.quiet_period_ms,
        poll_interval_ms=args.poll_interval_ms,
        events_enabled=events_enabled,
    )


def grouped_payload(session: Session) -> dict[str, object]:
    """Serializable grouped listing."""
    index = session.index
    return {
        "total_count": index.get_total_count(),
        "files": [
            {
                "path": group.path,
                "markers": [
                    {"line": marker.line, "text": marker.text} for marker in group.markers
                ],
            }
            for group in index.get_files_grouped()
        ],
    }


def run_scan(session: Session, as_json: bool, out_stream: TextIO) -> int:
    session.refresh()
    if as_json:
        out_stream.write(f"{json.dumps(grouped_payload(session), sort_keys=True)}\n")
        return EXIT_OK
    _write_lines(out_stream, session.tree.render_lines())
    return EXIT_OK


def run_watch(
    session: Session,
    iterations: int | None,
    out_stream: TextIO,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll until interrupted (or for ``iterations`` polls), re-rendering on change."""
    session.refresh()
    _write_lines(out_stream, session.tree.render_lines())
    interval = session.config.watch.poll_interval_ms / 1000
    completed = 0
    try:
        while iterations is None or completed < iterations:
            sleep(interval)
            session.poll_once()
            completed += 1
            if session.tree.dirty:
                _write_lines(out_stream, session.tree.render_lines())
    except KeyboardInterrupt:
        pass
    session.coalescer.flush_all()
    if session.tree.dirty:
        _write_lines(out_stream, session.tree.render_lines())
    return EXIT_OK


def run_open(session: Session, path: str, line: int, out_stream: TextIO, err_stream: TextIO) -> int:
    if line < 1:
        err_stream.write("error: line must be >= 1\n")
        return EXIT_LOCATION_ERROR
    try:
        location = session.open_location(Marker(path=path, line=line, text=""))
    except (PathBlockedError, LocationUnavailableError) as error:
        err_stream.write(f"error: {error.reason} ({error.hint})\n")
        return EXIT_LOCATION_ERROR
    out_stream.write(f"{location.path}:{location.line}:{location.column + 1}: {location.line_text}\n")
    return EXIT_OK


def main(
    argv: list[str] | None = None,
    out_stream: TextIO | None = None,
    err_stream: TextIO | None = None,
) -> int:
    """Entrypoint for the todo-tree command."""
    out = out_stream or sys.stdout
    err = err_stream or sys.stderr
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        session = create_session(args.root, cli_overrides=overrides_from_args(args))
    except ValueError as error:
        err.write(f"error: {error}\n")
        return EXIT_CONFIG_ERROR

    try:
        if args.command == "scan":
            return run_scan(session, as_json=args.json, out_stream=out)
        if args.command == "watch":
            return run_watch(session, iterations=args.iterations, out_stream=out)
        if args.command == "open":
            return run_open(session, args.path, args.line, out_stream=out, err_stream=err)
        out.write(f"{json.dumps(session.config.to_public_dict(), sort_keys=True)}\n")
        return EXIT_OK
    finally:
        session.close()


def _write_lines(out_stream: TextIO, lines: list[str]) -> None:
    for line in lines:
        out_stream.write(f"{line}\n")
    out_stream.flush()


if __name__ == "__main__":
    raise SystemExit(main())
