"""Readability and size policy for markup files touched by a run."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class SecurityLimits:
    """Runtime limits applied before a file is read or rewritten."""

    max_file_bytes: int = 10 * 1024 * 1024


@dataclass(slots=True, frozen=True)
class PolicyBlockedError(Exception):
    """Raised when the file policy blocks a read or write."""

    reason: str
    hint: str


def enforce_file_access_policy(path: Path, limits: SecurityLimits) -> None:
    """Raise PolicyBlockedError when a file cannot or should not be read."""
    if not path.exists():
        raise PolicyBlockedError(
            reason="File does not exist.",
            hint="Re-run link detection so results match the current tree.",
        )
    if not path.is_file():
        raise PolicyBlockedError(
            reason="Path is not a regular file.",
            hint="Only markup files can be scanned or rewritten.",
        )
    if not os.access(path, os.R_OK):
        raise PolicyBlockedError(
            reason="File is not readable.",
            hint="Check file permissions.",
        )
    if path.stat().st_size > limits.max_file_bytes:
        raise PolicyBlockedError(
            reason="File exceeds max_file_bytes limit.",
            hint="Raise limits.max_file_bytes in link_rectifier.toml.",
        )


def is_file_readable(path: Path, limits: SecurityLimits) -> bool:
    """Return True when the policy allows reading the file."""
    try:
        enforce_file_access_policy(path, limits)
    except (PolicyBlockedError, OSError):
        return False
    return True
