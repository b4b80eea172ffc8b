"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "todo_tree.toml"

MAX_FILE_BYTES_CAP = 16 * 1024 * 1024
QUIET_PERIOD_MS_CAP = 60_000
POLL_INTERVAL_MS_CAP = 60_000

DEFAULT_MAX_FILE_BYTES = 1024 * 1024
DEFAULT_QUIET_PERIOD_MS = 250
DEFAULT_POLL_INTERVAL_MS = 1_000

DEFAULT_INCLUDE_EXTENSIONS = (
    ".py",
    ".pyi",
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".go",
    ".rs",
    ".java",
    ".c",
    ".h",
    ".cpp",
    ".hpp",
    ".cs",
    ".rb",
    ".sh",
    ".toml",
    ".yaml",
    ".yml",
    ".cfg",
    ".ini",
)
DEFAULT_EXCLUDE_GLOBS = (
    "**/.git/**",
    "**/__pycache__/**",
    "**/.venv/**",
    "**/node_modules/**",
    "**/.todo_tree/**",
)


@dataclass(slots=True, frozen=True)
class ScanConfig:
    """Which workspace files are fed to the index."""

    include_extensions: tuple[str, ...]
    exclude_globs: tuple[str, ...]
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES


@dataclass(slots=True, frozen=True)
class WatchConfig:
    """Change coalescing and polling cadence."""

    quiet_period_ms: int = DEFAULT_QUIET_PERIOD_MS
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS


@dataclass(slots=True, frozen=True)
class LogConfig:
    """Index event log toggle."""

    events_enabled: bool = False


@dataclass(slots=True, frozen=True)
class TodoTreeConfig:
    """Fully merged session configuration."""

    workspace_root: Path
    data_dir: Path
    scan: ScanConfig
    watch: WatchConfig
    log: LogConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "workspace_root": str(self.workspace_root),
            "data_dir": str(self.data_dir),
            "scan": {
                "include_extensions": list(self.scan.include_extensions),
                "exclude_globs": list(self.scan.exclude_globs),
                "max_file_bytes": self.scan.max_file_bytes,
            },
            "watch": {
                "quiet_period_ms": self.watch.quiet_period_ms,
                "poll_interval_ms": self.watch.poll_interval_ms,
            },
            "log": {
                "events_enabled": self.log.events_enabled,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    quiet_period_ms: int | None = None
    poll_interval_ms: int | None = None
    events_enabled: bool | None = None


def default_config(workspace_root: Path) -> TodoTreeConfig:
    """Build default config for a given workspace root."""
    resolved_root = workspace_root.resolve()
    return TodoTreeConfig(
        workspace_root=resolved_root,
        data_dir=resolved_root / ".todo_tree",
        scan=ScanConfig(
            include_extensions=DEFAULT_INCLUDE_EXTENSIONS,
            exclude_globs=DEFAULT_EXCLUDE_GLOBS,
        ),
        watch=WatchConfig(),
        log=LogConfig(),
    )


def load_workspace_config_file(workspace_root: Path) -> dict[str, object]:
    """Load optional todo_tree.toml from the workspace root."""
    config_path = workspace_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _normalize_extensions(extensions: tuple[str, ...]) -> tuple[str, ...]:
    output: list[str] = []
    for extension in extensions:
        lowered = extension.strip().lower()
        if not lowered:
            continue
        if not lowered.startswith("."):
            lowered = f".{lowered}"
        output.append(lowered)
    return tuple(output)


def merge_config(
    base: TodoTreeConfig, workspace_payload: dict[str, object], overrides: CliOverrides
) -> TodoTreeConfig:
    """Merge defaults, workspace config, then CLI/startup overrides."""
    scan_payload = _get_table(workspace_payload, "scan")
    watch_payload = _get_table(workspace_payload, "watch")
    log_payload = _get_table(workspace_payload, "log")

    include_extensions = base.scan.include_extensions
    if "include_extensions" in scan_payload:
        include_extensions = _normalize_extensions(
            _tuple_of_strings(scan_payload["include_extensions"], "scan", "include_extensions")
        )
    exclude_globs = base.scan.exclude_globs
    if "exclude_globs" in scan_payload:
        exclude_globs = _tuple_of_strings(scan_payload["exclude_globs"], "scan", "exclude_globs")
    max_file_bytes = _optional_positive_int_with_cap(
        scan_payload.get("max_file_bytes"),
        "scan.max_file_bytes",
        base.scan.max_file_bytes,
        MAX_FILE_BYTES_CAP,
    )

    quiet_period_ms = _optional_positive_int_with_cap(
        watch_payload.get("quiet_period_ms"),
        "watch.quiet_period_ms",
        base.watch.quiet_period_ms,
        QUIET_PERIOD_MS_CAP,
    )
    poll_interval_ms = _optional_positive_int_with_cap(
        watch_payload.get("poll_interval_ms"),
        "watch.poll_interval_ms",
        base.watch.poll_interval_ms,
        POLL_INTERVAL_MS_CAP,
    )

    events_enabled = base.log.events_enabled
    if "events_enabled" in log_payload:
        raw_events_enabled = log_payload["events_enabled"]
        if not isinstance(raw_events_enabled, bool):
            raise ValueError("Config field 'log.events_enabled' must be a boolean.")
        events_enabled = raw_events_enabled

    merged = TodoTreeConfig(
        workspace_root=base.workspace_root,
        data_dir=base.data_dir,
        scan=ScanConfig(
            include_extensions=include_extensions,
            exclude_globs=exclude_globs,
            max_file_bytes=max_file_bytes,
        ),
        watch=WatchConfig(
            quiet_period_ms=quiet_period_ms,
            poll_interval_ms=poll_interval_ms,
        ),
        log=LogConfig(events_enabled=events_enabled),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: TodoTreeConfig, overrides: CliOverrides) -> TodoTreeConfig:
    """Apply startup overrides at highest precedence."""
    quiet_period_ms = _optional_positive_int_with_cap(
        overrides.quiet_period_ms,
        "overrides.quiet_period_ms",
        config.watch.quiet_period_ms,
        QUIET_PERIOD_MS_CAP,
    )
    poll_interval_ms = _optional_positive_int_with_cap(
        overrides.poll_interval_ms,
        "overrides.poll_interval_ms",
        config.watch.poll_interval_ms,
        POLL_INTERVAL_MS_CAP,
    )
    log = LogConfig(
        events_enabled=(
            overrides.events_enabled
            if overrides.events_enabled is not None
            else config.log.events_enabled
        )
    )
    data_dir = overrides.data_dir or config.data_dir
    return TodoTreeConfig(
        workspace_root=config.workspace_root,
        data_dir=data_dir.resolve(),
        scan=config.scan,
        watch=WatchConfig(quiet_period_ms=quiet_period_ms, poll_interval_ms=poll_interval_ms),
        log=log,
    )


def load_effective_config(
    workspace_root: Path, overrides: CliOverrides | None = None
) -> TodoTreeConfig:
    """Load effective config using merge order defaults -> workspace config -> overrides."""
    resolved_root = workspace_root.resolve()
    base = default_config(resolved_root)
    payload = load_workspace_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
