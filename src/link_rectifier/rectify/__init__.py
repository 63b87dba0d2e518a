"""Fix strategies, file mutation and the rectification driver."""

from .engine import FileError, LinkRectifier, RectifyReport
from .mutator import (
    BackupFailedError,
    FileWriteError,
    WriteOutcome,
    apply_fix,
    backup_path_for,
    write_fixed_file,
)
from .strategies import FixDecision, resolve_fix

__all__ = [
    "BackupFailedError",
    "FileError",
    "FileWriteError",
    "FixDecision",
    "LinkRectifier",
    "RectifyReport",
    "WriteOutcome",
    "apply_fix",
    "backup_path_for",
    "resolve_fix",
    "write_fixed_file",
]
