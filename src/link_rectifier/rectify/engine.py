"""Batch rectification of broken links across a validation result set."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from link_rectifier.config import RectifyConfig
from link_rectifier.index import BrokenLinkRecord, CandidateIndex, FileResult, ValidationResultSet
from link_rectifier.rectify.mutator import (
    BackupFailedError,
    FileWriteError,
    apply_fix,
    read_markup,
    write_fixed_file,
)
from link_rectifier.rectify.strategies import resolve_fix
from link_rectifier.security import PolicyBlockedError, SecurityLimits, enforce_file_access_policy


@dataclass(slots=True, frozen=True)
class FileError:
    """Per-file failure collected instead of aborting the run."""

    path: str
    reason: str
    hint: str


@dataclass(slots=True)
class RectifyReport:
    """Outcome of one rectification pass."""

    result_set: ValidationResultSet
    dry_run: bool
    files_scanned: int = 0
    fixes_applied: int = 0
    files_modified: list[str] = field(default_factory=list)
    unresolved_files: list[str] = field(default_factory=list)
    backups: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[FileError] = field(default_factory=list)

    def summary(self) -> dict[str, object]:
        return {
            "dry_run": self.dry_run,
            "files_scanned": self.files_scanned,
            "fixes_applied": self.fixes_applied,
            "files_modified": len(self.files_modified),
            "files_with_unresolved_links": len(self.unresolved_files),
            "unresolved_links": self.result_set.unresolved_count(),
            "backups_created": len(self.backups),
            "warnings": len(self.warnings),
            "errors": len(self.errors),
        }


class LinkRectifier:
    """Applies the fix strategy chain to every broken link, file by file.

    The candidate index is built once from the incoming result set and is not
    refreshed as files are rewritten; rename chains across files in one run
    are not followed.
    """

    def __init__(
        self,
        config: RectifyConfig | None = None,
        limits: SecurityLimits | None = None,
        dry_run: bool = False,
    ) -> None:
        self._config = config or RectifyConfig()
        self._limits = limits or SecurityLimits()
        self._dry_run = dry_run

    def fix_links(self, result_set: ValidationResultSet) -> RectifyReport:
        """Rewrite fixable links and return the annotated result set with a report."""
        index = CandidateIndex.build(result_set, self._limits)
        report = RectifyReport(result_set=result_set, dry_run=self._dry_run)
        for file_path, file_result in result_set.results.items():
            report.files_scanned += 1
            if not file_result.broken_links:
                continue
            self._fix_file(file_path, file_result, index, report)
        report.unresolved_files = result_set.unresolved_files()
        return report

    def _fix_file(
        self,
        file_path: str,
        file_result: FileResult,
        index: CandidateIndex,
        report: RectifyReport,
    ) -> None:
        path = Path(file_path)
        try:
            enforce_file_access_policy(path, self._limits)
            content = read_markup(path)
        except PolicyBlockedError as exc:
            report.warnings.append(f"Cannot read file for fixing: {file_path} ({exc.reason})")
            return
        except (OSError, UnicodeDecodeError) as exc:
            report.warnings.append(f"Failed to read file content: {file_path} ({exc})")
            return

        original = content
        pending: list[tuple[BrokenLinkRecord, str]] = []
        ordered = sorted(file_result.broken_links, key=lambda record: record.line)
        for record in reversed(ordered):
            if record.fix_applied is not None:
                continue
            decision = resolve_fix(
                record, file_path, index, self._config.similarity_threshold
            )
            if decision is None:
                continue
            updated = apply_fix(content, record.url, decision.new_url, record.line)
            if updated == content:
                report.warnings.append(
                    f"Link '{record.url}' not found on line {record.line} of {file_path}; "
                    "results may be stale."
                )
                continue
            content = updated
            pending.append((record, decision.description))

        if content == original:
            return

        if not self._dry_run:
            try:
                outcome = write_fixed_file(
                    path,
                    content,
                    create_backup=self._config.create_backup,
                    backup_policy=self._config.backup_policy,
                )
            except (BackupFailedError, FileWriteError) as exc:
                report.errors.append(FileError(path=file_path, reason=exc.reason, hint=exc.hint))
                return
            report.warnings.extend(outcome.warnings)
            if outcome.backup_path is not None:
                report.backups.append(outcome.backup_path)

        for record, description in pending:
            record.mark_fixed(description)
        report.fixes_applied += len(pending)
        report.files_modified.append(file_path)
