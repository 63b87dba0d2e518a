"""Typed models for link validation results and the candidate index."""

from __future__ import annotations

from dataclasses import dataclass, field

STATUS_INTERNAL_TARGET_MISSING = "internal-target-missing"
STATUS_ANCHOR_MISSING = "anchor-missing"
STATUS_CROSS_REFERENCE_TARGET_MISSING = "cross-reference-target-missing"
LINK_STATUSES = (
    STATUS_INTERNAL_TARGET_MISSING,
    STATUS_ANCHOR_MISSING,
    STATUS_CROSS_REFERENCE_TARGET_MISSING,
)


@dataclass(slots=True)
class BrokenLinkRecord:
    """One unresolved reference as authored in a markup file."""

    url: str
    line: int
    status: str
    fix_applied: str | None = None

    def __post_init__(self) -> None:
        if self.line < 1:
            raise ValueError("Broken link line numbers are 1-indexed.")
        if self.status not in LINK_STATUSES:
            raise ValueError(f"Unknown broken link status: {self.status}")

    def mark_fixed(self, description: str) -> None:
        """Record the applied fix; a record is fixed at most once."""
        if self.fix_applied is not None:
            raise ValueError(f"Link '{self.url}' on line {self.line} is already fixed.")
        self.fix_applied = description

    def to_dict(self) -> dict[str, object]:
        return {
            "url": self.url,
            "line": self.line,
            "status": self.status,
            "fix_applied": self.fix_applied,
        }


@dataclass(slots=True)
class FileResult:
    """Broken links detected in one file, in ascending line order."""

    path: str
    broken_links: list[BrokenLinkRecord] = field(default_factory=list)

    def unresolved(self) -> list[BrokenLinkRecord]:
        """Return records that have not been fixed."""
        return [record for record in self.broken_links if record.fix_applied is None]


@dataclass(slots=True)
class ValidationResultSet:
    """Ordered mapping of absolute file path to its FileResult."""

    results: dict[str, FileResult] = field(default_factory=dict)

    def add(self, file_result: FileResult) -> None:
        self.results[file_result.path] = file_result

    def broken_link_count(self) -> int:
        return sum(len(result.broken_links) for result in self.results.values())

    def unresolved_count(self) -> int:
        """Return the number of broken links still lacking a fix."""
        return sum(len(result.unresolved()) for result in self.results.values())

    def unresolved_files(self) -> list[str]:
        return [path for path, result in self.results.items() if result.unresolved()]

    def to_dict(self) -> dict[str, object]:
        """Return a serializable snapshot preserving file and line order."""
        return {
            path: [record.to_dict() for record in result.broken_links]
            for path, result in self.results.items()
        }


@dataclass(slots=True, frozen=True)
class HeadingEntry:
    """Markdown heading with its generated anchor."""

    level: int
    text: str
    anchor: str


@dataclass(slots=True, frozen=True)
class FileRecord:
    """Markup file found by discovery."""

    path: str
    relative_path: str
    size: int
