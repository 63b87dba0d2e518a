"""Deterministic markup file discovery."""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from link_rectifier.config import ScanConfig
from link_rectifier.index.models import FileRecord

_BINARY_SNIFF_BYTES = 4096


@dataclass(slots=True, frozen=True)
class _CandidateFile:
    """Prepared candidate record discovered during traversal."""

    relative_path: str
    full_path: Path
    size: int


def discover_markup_files(root: Path, config: ScanConfig) -> list[FileRecord]:
    """Discover markup files under root, sorted by relative path."""
    resolved_root = root.resolve()
    candidates = _discover_candidates(
        root=resolved_root,
        include_extensions=set(config.include_extensions),
        exclude_globs=config.exclude_globs,
        excluded_dir_names=_excluded_dir_names(config.exclude_globs),
    )
    candidates.sort(key=lambda item: item.relative_path)
    records: list[FileRecord] = []
    for candidate in candidates:
        if is_binary_file(candidate.full_path):
            continue
        records.append(
            FileRecord(
                path=str(candidate.full_path),
                relative_path=candidate.relative_path,
                size=candidate.size,
            )
        )
    return records


def collect_markup_files(paths: Iterable[Path], config: ScanConfig) -> list[FileRecord]:
    """Expand files and directories into a deduplicated, ordered file list.

    Explicit files are kept when they carry an included extension, even if an
    exclude glob would have pruned them during a directory walk.
    """
    seen: set[str] = set()
    records: list[FileRecord] = []
    for raw in paths:
        path = raw.resolve()
        if path.is_dir():
            found = discover_markup_files(path, config)
        elif path.is_file() and has_allowed_extension(path.name, config.include_extensions):
            if is_binary_file(path):
                continue
            found = [FileRecord(path=str(path), relative_path=path.name, size=path.stat().st_size)]
        else:
            continue
        for record in found:
            if record.path in seen:
                continue
            seen.add(record.path)
            records.append(record)
    return records


def should_exclude(relative_path: str, exclude_globs: tuple[str, ...]) -> bool:
    """Return True when a path matches configured ignore globs."""
    anchored = f"/{relative_path}"
    return any(
        fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(anchored, pattern)
        for pattern in exclude_globs
    )


def has_allowed_extension(relative_path: str, include_extensions: tuple[str, ...]) -> bool:
    """Return True when file extension is included."""
    suffix = Path(relative_path).suffix.lower()
    return suffix in include_extensions


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
    """Walk tree with light pruning for excluded directories."""
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
                if entry.name in excluded_dir_names:
                    continue
                stack.append(full_path)
                continue
            if not entry.is_file(follow_symlinks=False):
                continue
            if should_exclude(relative, exclude_globs):
                continue
            if Path(relative).suffix.lower() not in include_extensions:
                continue
            try:
                stat = entry.stat(follow_symlinks=False)
            except OSError:
                continue
            candidates.append(
                _CandidateFile(relative_path=relative, full_path=full_path, size=stat.st_size)
            )
    return candidates


def is_binary_file(path: Path) -> bool:
    """Use content sniffing to exclude binary files."""
    try:
        with path.open("rb") as handle:
            sample = handle.read(_BINARY_SNIFF_BYTES)
    except OSError:
        return True
    if b"\x00" in sample:
        return True
    try:
        sample.decode("utf-8")
    except UnicodeDecodeError as exc:
        # A multi-byte character cut at the sniff boundary is still text.
        if len(sample) < _BINARY_SNIFF_BYTES or exc.start < len(sample) - 3:
            return True
    return False
