"""Read-only index of candidate filenames and headings for link rectification."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

from link_rectifier.index.anchors import generate_anchor
from link_rectifier.index.markup import iter_unfenced_lines, match_heading
from link_rectifier.index.models import HeadingEntry, ValidationResultSet
from link_rectifier.security import SecurityLimits, is_file_readable


@dataclass(slots=True, frozen=True)
class CandidateIndex:
    """Filenames per directory and headings per file, built once per run.

    Only files present as keys of the result set are indexed; the index never
    walks the filesystem, so files nobody scanned are invisible to it.
    """

    files_by_directory: dict[str, tuple[str, ...]]
    headings_by_filename: dict[str, tuple[HeadingEntry, ...]]
    headings_by_path: dict[str, tuple[HeadingEntry, ...]]

    @classmethod
    def build(
        cls,
        result_set: ValidationResultSet,
        limits: SecurityLimits | None = None,
    ) -> CandidateIndex:
        active_limits = limits or SecurityLimits()
        files_by_directory: dict[str, list[str]] = {}
        headings_by_filename: dict[str, tuple[HeadingEntry, ...]] = {}
        headings_by_path: dict[str, tuple[HeadingEntry, ...]] = {}

        for file_path in result_set.results:
            directory, filename = os.path.split(file_path)
            names = files_by_directory.setdefault(directory, [])
            if filename not in names:
                names.append(filename)

            content = _read_if_allowed(Path(file_path), active_limits)
            if content is None:
                continue
            headings = tuple(extract_headings(content))
            headings_by_path[file_path] = headings
            headings_by_filename.setdefault(filename, headings)

        return cls(
            files_by_directory={key: tuple(value) for key, value in files_by_directory.items()},
            headings_by_filename=headings_by_filename,
            headings_by_path=headings_by_path,
        )

    def filenames_in(self, directory: str) -> tuple[str, ...]:
        """Return indexed filenames for a directory in registration order."""
        return self.files_by_directory.get(directory, ())

    def headings_for(self, current_file_path: str, file_part: str) -> tuple[HeadingEntry, ...]:
        """Return headings of the file a link points at.

        An empty file part means the current file. Otherwise the exact resolved
        path wins, falling back to the first indexed file with that basename.
        """
        if not file_part:
            return self.headings_by_path.get(current_file_path, ())
        decoded = unquote(file_part).replace("\\", "/")
        resolved = os.path.normpath(os.path.join(os.path.dirname(current_file_path), decoded))
        if resolved in self.headings_by_path:
            return self.headings_by_path[resolved]
        return self.headings_by_filename.get(os.path.basename(decoded), ())


def extract_headings(content: str) -> list[HeadingEntry]:
    """Extract ATX headings outside fenced code blocks, in document order."""
    headings: list[HeadingEntry] = []
    for _, line in iter_unfenced_lines(content):
        heading = match_heading(line)
        if heading is None:
            continue
        level, text = heading
        headings.append(HeadingEntry(level=level, text=text, anchor=generate_anchor(text)))
    return headings


def _read_if_allowed(path: Path, limits: SecurityLimits) -> str | None:
    if not is_file_readable(path, limits):
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
