"""Link target resolution relative to the referencing file."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Final
from urllib.parse import unquote

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")


class PathBlockedError(Exception):
    """Raised when a link target cannot be mapped onto the local tree."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


def _normalize_relative_input(candidate: str) -> tuple[str, bool]:
    """Normalize path separators and detect absolute-style inputs."""
    normalized = candidate.replace("\\", "/")
    if normalized.startswith("/"):
        return normalized, True
    if WINDOWS_ABSOLUTE_PATTERN.match(normalized):
        return normalized, True
    return normalized, False


def resolve_link_target(source_path: Path, target: str) -> Path:
    """Resolve the file part of a link against the directory of its source file."""
    decoded = unquote(target.strip())
    normalized, is_absolute_style = _normalize_relative_input(decoded)

    if not normalized:
        raise PathBlockedError(
            reason="Link target is empty.",
            hint="Provide a relative path such as 'guide/setup.md'.",
        )

    if is_absolute_style:
        raise PathBlockedError(
            reason="Absolute link targets are not resolved against the file tree.",
            hint="Use a path relative to the referencing document.",
        )

    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    return Path(os.path.normpath(source_path.parent.joinpath(*parts)))


def exists_with_exact_case(path: Path) -> bool:
    """Return True when the path exists and its final component matches case exactly."""
    if not path.exists():
        return False
    try:
        names = os.listdir(path.parent)
    except OSError:
        return False
    return path.name in names
