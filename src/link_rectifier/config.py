"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from link_rectifier.security import SecurityLimits

CONFIG_FILE_NAME = "link_rectifier.toml"
MAX_FILE_BYTES_CAP = 64 * 1024 * 1024

DEFAULT_SIMILARITY_THRESHOLD = 0.6
BACKUP_POLICY_FAIL_OPEN = "fail-open"
BACKUP_POLICY_FAIL_CLOSED = "fail-closed"
BACKUP_POLICIES = (BACKUP_POLICY_FAIL_OPEN, BACKUP_POLICY_FAIL_CLOSED)

DEFAULT_INCLUDE_EXTENSIONS = (".md", ".markdown")
DEFAULT_EXCLUDE_GLOBS = (
    "**/.git/**",
    "**/node_modules/**",
    "**/vendor/**",
    "**/.link_rectifier/**",
)


@dataclass(slots=True, frozen=True)
class ScanConfig:
    """Deterministic markup discovery settings."""

    include_extensions: tuple[str, ...]
    exclude_globs: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class RectifyConfig:
    """Rewrite behavior for the rectification pass."""

    create_backup: bool = True
    backup_policy: str = BACKUP_POLICY_FAIL_OPEN
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD


@dataclass(slots=True, frozen=True)
class ToolConfig:
    """Fully merged tool configuration."""

    root: Path
    data_dir: Path
    limits: SecurityLimits
    scan: ScanConfig
    rectify: RectifyConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for JSON reports."""
        return {
            "root": str(self.root),
            "data_dir": str(self.data_dir),
            "limits": {
                "max_file_bytes": self.limits.max_file_bytes,
            },
            "scan": {
                "include_extensions": list(self.scan.include_extensions),
                "exclude_globs": list(self.scan.exclude_globs),
            },
            "rectify": {
                "create_backup": self.rectify.create_backup,
                "backup_policy": self.rectify.backup_policy,
                "similarity_threshold": self.rectify.similarity_threshold,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command line overrides applied at highest precedence."""

    data_dir: Path | None = None
    max_file_bytes: int | None = None
    create_backup: bool | None = None
    backup_policy: str | None = None
    similarity_threshold: float | None = None


def default_config(root: Path) -> ToolConfig:
    """Build default config for a given documentation root."""
    resolved_root = root.resolve()
    return ToolConfig(
        root=resolved_root,
        data_dir=resolved_root / ".link_rectifier",
        limits=SecurityLimits(),
        scan=ScanConfig(
            include_extensions=DEFAULT_INCLUDE_EXTENSIONS,
            exclude_globs=DEFAULT_EXCLUDE_GLOBS,
        ),
        rectify=RectifyConfig(),
    )


def load_config_file(root: Path) -> dict[str, object]:
    """Load optional link_rectifier.toml from the root."""
    config_path = root / CONFIG_FILE_NAME
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


def _normalize_extensions(values: tuple[str, ...]) -> tuple[str, ...]:
    output: list[str] = []
    for value in values:
        lowered = value.lower()
        if not lowered.startswith("."):
            lowered = f".{lowered}"
        if lowered not in output:
            output.append(lowered)
    return tuple(output)


def merge_config(
    base: ToolConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> ToolConfig:
    """Merge defaults, the config file, then command line overrides."""
    limits_payload = _get_table(file_payload, "limits")
    scan_payload = _get_table(file_payload, "scan")
    rectify_payload = _get_table(file_payload, "rectify")

    max_file_bytes = _optional_positive_int_with_cap(
        limits_payload.get("max_file_bytes"),
        "limits.max_file_bytes",
        base.limits.max_file_bytes,
        MAX_FILE_BYTES_CAP,
    )

    include_extensions = base.scan.include_extensions
    if "include_extensions" in scan_payload:
        include_extensions = _normalize_extensions(
            _tuple_of_strings(scan_payload["include_extensions"], "scan", "include_extensions")
        )
        if not include_extensions:
            raise ValueError("Config field 'scan.include_extensions' must not be empty.")
    exclude_globs = base.scan.exclude_globs
    if "exclude_globs" in scan_payload:
        exclude_globs = _tuple_of_strings(scan_payload["exclude_globs"], "scan", "exclude_globs")

    create_backup = _optional_bool(
        rectify_payload.get("create_backup"),
        "rectify.create_backup",
        base.rectify.create_backup,
    )
    backup_policy = _optional_backup_policy(
        rectify_payload.get("backup_policy"),
        "rectify.backup_policy",
        base.rectify.backup_policy,
    )
    similarity_threshold = _optional_threshold(
        rectify_payload.get("similarity_threshold"),
        "rectify.similarity_threshold",
        base.rectify.similarity_threshold,
    )

    merged = ToolConfig(
        root=base.root,
        data_dir=base.data_dir,
        limits=SecurityLimits(max_file_bytes=max_file_bytes),
        scan=ScanConfig(
            include_extensions=include_extensions,
            exclude_globs=exclude_globs,
        ),
        rectify=RectifyConfig(
            create_backup=create_backup,
            backup_policy=backup_policy,
            similarity_threshold=similarity_threshold,
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ToolConfig, overrides: CliOverrides) -> ToolConfig:
    """Apply command line overrides at highest precedence."""
    max_file_bytes = _optional_positive_int_with_cap(
        overrides.max_file_bytes,
        "overrides.max_file_bytes",
        config.limits.max_file_bytes,
        MAX_FILE_BYTES_CAP,
    )
    rectify = RectifyConfig(
        create_backup=_optional_bool(
            overrides.create_backup,
            "overrides.create_backup",
            config.rectify.create_backup,
        ),
        backup_policy=_optional_backup_policy(
            overrides.backup_policy,
            "overrides.backup_policy",
            config.rectify.backup_policy,
        ),
        similarity_threshold=_optional_threshold(
            overrides.similarity_threshold,
            "overrides.similarity_threshold",
            config.rectify.similarity_threshold,
        ),
    )
    data_dir = overrides.data_dir or config.data_dir
    return ToolConfig(
        root=config.root,
        data_dir=data_dir.resolve(),
        limits=SecurityLimits(max_file_bytes=max_file_bytes),
        scan=config.scan,
        rectify=rectify,
    )


def load_effective_config(root: Path, overrides: CliOverrides | None = None) -> ToolConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_backup_policy(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or value not in BACKUP_POLICIES:
        choices = ", ".join(BACKUP_POLICIES)
        raise ValueError(f"Config field '{name}' must be one of: {choices}.")
    return value


def _optional_threshold(value: object, name: str, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Config field '{name}' must be a number.")
    if not 0.0 < float(value) < 1.0:
        raise ValueError(f"Config field '{name}' must be between 0 and 1 (exclusive).")
    return float(value)


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
