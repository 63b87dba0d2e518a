"""Line-targeted link replacement and backed-up file writes."""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from link_rectifier.config import BACKUP_POLICY_FAIL_CLOSED, BACKUP_POLICY_FAIL_OPEN

BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M-%S"

# Text that may precede a link target, before an optional "<".
_TARGET_PREFIXES = ("](", "]:", '="', "='")
_TARGET_TERMINATORS = frozenset(")>\"' \t\r")


@dataclass(slots=True, frozen=True)
class FileWriteError(Exception):
    """Raised when rewritten content cannot be persisted."""

    path: str
    reason: str
    hint: str


@dataclass(slots=True, frozen=True)
class BackupFailedError(Exception):
    """Raised under the fail-closed policy when a backup copy cannot be made."""

    path: str
    reason: str
    hint: str


@dataclass(slots=True, frozen=True)
class WriteOutcome:
    """Result of persisting one rewritten file."""

    path: str
    backup_path: str | None
    warnings: tuple[str, ...]


def apply_fix(content: str, old_url: str, new_url: str, line: int) -> str:
    """Replace old_url with new_url on the 1-indexed line only.

    The first occurrence sitting in a link-target position is replaced, so a
    label that repeats the url text is left alone. Content is returned
    unchanged when the line does not exist or no longer holds old_url.
    """
    lines = content.split("\n")
    position = line - 1
    if not old_url or position < 0 or position >= len(lines):
        return content
    text = lines[position]
    start = _find_target_occurrence(text, old_url)
    if start < 0:
        return content
    lines[position] = text[:start] + new_url + text[start + len(old_url) :]
    return "\n".join(lines)


def _find_target_occurrence(text: str, old_url: str) -> int:
    for match in re.finditer(re.escape(old_url), text):
        end = match.end()
        if end < len(text) and text[end] not in _TARGET_TERMINATORS:
            continue
        prefix = text[: match.start()].rstrip(" \t<")
        if prefix.endswith(_TARGET_PREFIXES):
            return match.start()
    return -1


def backup_path_for(path: Path, now: datetime | None = None) -> Path:
    """Return '<path>.backup.<timestamp>' for a file about to be overwritten."""
    stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    return path.with_name(f"{path.name}.backup.{stamp}")


def read_markup(path: Path) -> str:
    """Read a file as UTF-8 keeping its original line terminators."""
    with path.open("r", encoding="utf-8", newline="") as handle:
        return handle.read()


def write_fixed_file(
    path: Path,
    content: str,
    create_backup: bool = True,
    backup_policy: str = BACKUP_POLICY_FAIL_OPEN,
) -> WriteOutcome:
    """Back up the original when requested, then overwrite it with content."""
    warnings: list[str] = []
    backup_path: str | None = None
    if create_backup:
        candidate = backup_path_for(path)
        try:
            shutil.copy2(path, candidate)
        except OSError as exc:
            if backup_policy == BACKUP_POLICY_FAIL_CLOSED:
                raise BackupFailedError(
                    path=str(path),
                    reason=f"Failed to create backup: {candidate} ({exc.strerror or exc})",
                    hint="Fix permissions on the directory or use backup_policy 'fail-open'.",
                ) from exc
            warnings.append(f"Failed to create backup: {candidate} ({exc.strerror or exc})")
        else:
            backup_path = str(candidate)

    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise FileWriteError(
            path=str(path),
            reason=f"Failed to write fixed file: {path} ({exc.strerror or exc})",
            hint="Check that the file is writable; the original content was left in place.",
        ) from exc
    return WriteOutcome(path=str(path), backup_path=backup_path, warnings=tuple(warnings))
