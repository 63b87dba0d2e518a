"""Command line entrypoint for detecting and rectifying broken documentation links."""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from link_rectifier.config import BACKUP_POLICIES, CliOverrides, ToolConfig, load_effective_config
from link_rectifier.detect import LinkDetector
from link_rectifier.index import ValidationResultSet, collect_markup_files
from link_rectifier.logging import JsonlAuditLogger, RunEvent, sanitize_metadata, utc_timestamp
from link_rectifier.rectify import LinkRectifier, RectifyReport

EXIT_OK = 0
EXIT_UNRESOLVED = 1
EXIT_USAGE = 2


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for a detection or rectification run."""
    parser = argparse.ArgumentParser(
        prog="link-rectifier",
        description="Find broken links in markdown files and optionally fix them.",
    )
    parser.add_argument("paths", nargs="*", default=None, help="Files or directories to scan.")
    parser.add_argument("--root", default=".", help="Directory holding link_rectifier.toml.")
    parser.add_argument("--data-dir", default=None, help="Directory for the audit log.")
    parser.add_argument("--fix", action="store_true", help="Rewrite fixable links in place.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the fixes that would be applied without writing anything.",
    )
    parser.add_argument("--no-backup", action="store_true", help="Skip .backup copies.")
    parser.add_argument("--backup-policy", choices=BACKUP_POLICIES, default=None)
    parser.add_argument("--similarity-threshold", type=float, default=None)
    parser.add_argument("--max-file-bytes", type=int, default=None)
    parser.add_argument("--json", action="store_true", help="Emit a JSON report.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the link-rectifier command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        max_file_bytes=args.max_file_bytes,
        create_backup=False if args.no_backup else None,
        backup_policy=args.backup_policy,
        similarity_threshold=args.similarity_threshold,
    )
    try:
        config = load_effective_config(Path(args.root), overrides)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    raw_paths = [Path(item) for item in args.paths] if args.paths else [config.root]
    missing = [str(path) for path in raw_paths if not path.exists()]
    if missing:
        print(f"error: path not found: {', '.join(missing)}", file=sys.stderr)
        return EXIT_USAGE

    rectify = args.fix or args.dry_run
    files = collect_markup_files(raw_paths, config.scan)
    detector = LinkDetector(limits=config.limits, include_extensions=config.scan.include_extensions)
    result_set = detector.detect(Path(record.path) for record in files)

    report: RectifyReport | None = None
    if rectify:
        rectifier = LinkRectifier(config=config.rectify, limits=config.limits, dry_run=args.dry_run)
        report = rectifier.fix_links(result_set)

    payload = build_report_payload(config, result_set, report)
    if args.json:
        sys.stdout.write(f"{json.dumps(payload, sort_keys=True, indent=2)}\n")
    else:
        write_text_report(sys.stdout, config, result_set, report)
    if report is not None:
        for warning in report.warnings:
            print(f"warning: {warning}", file=sys.stderr)
        for error in report.errors:
            print(f"error: {error.reason} ({error.hint})", file=sys.stderr)

    unresolved = result_set.unresolved_count()
    if not args.dry_run:
        _log_run(config, payload, mode="fix" if args.fix else "check", ok=unresolved == 0)
    return EXIT_OK if unresolved == 0 else EXIT_UNRESOLVED


def build_report_payload(
    config: ToolConfig,
    result_set: ValidationResultSet,
    report: RectifyReport | None,
) -> dict[str, object]:
    """Return the deterministic JSON report for a run."""
    summary: dict[str, object] = {
        "files_scanned": len(result_set.results),
        "broken_links": result_set.broken_link_count(),
        "unresolved_links": result_set.unresolved_count(),
        "files_with_unresolved_links": len(result_set.unresolved_files()),
        "fixes_applied": 0,
        "dry_run": False,
    }
    if report is not None:
        summary.update(report.summary())
    files = {
        _display_path(path, config.root): [record.to_dict() for record in result.broken_links]
        for path, result in result_set.results.items()
        if result.broken_links
    }
    payload: dict[str, object] = {
        "summary": summary,
        "files": files,
        "config": config.to_public_dict(),
    }
    if report is not None:
        payload["warnings"] = list(report.warnings)
        payload["errors"] = [asdict(error) for error in report.errors]
        payload["backups"] = list(report.backups)
    return payload


def write_text_report(
    out_stream: TextIO,
    config: ToolConfig,
    result_set: ValidationResultSet,
    report: RectifyReport | None,
) -> None:
    """Write a human-readable report listing every broken link."""
    for path, result in result_set.results.items():
        for record in result.broken_links:
            location = f"{_display_path(path, config.root)}:{record.line}"
            line = f"{location}: {record.status}: {record.url}"
            if record.fix_applied is not None:
                line = f"{line} [fixed: {record.fix_applied}]"
            out_stream.write(f"{line}\n")
    out_stream.write(f"Files scanned: {len(result_set.results)}\n")
    out_stream.write(f"Broken links: {result_set.broken_link_count()}\n")
    if report is not None:
        suffix = " (dry run, nothing written)" if report.dry_run else ""
        out_stream.write(f"Fixes applied: {report.fixes_applied}{suffix}\n")
    out_stream.write(f"Files with unresolved links: {len(result_set.unresolved_files())}\n")


def _log_run(config: ToolConfig, payload: dict[str, object], mode: str, ok: bool) -> None:
    summary = payload.get("summary")
    metadata: dict[str, object] = dict(summary) if isinstance(summary, dict) else {}
    metadata["mode"] = mode
    metadata["backup_policy"] = config.rectify.backup_policy
    logger = JsonlAuditLogger(path=config.data_dir / "audit.jsonl")
    logger.append(
        RunEvent(
            timestamp=utc_timestamp(),
            run_id=f"run-{uuid.uuid4().hex[:12]}",
            command=mode,
            ok=ok,
            error_code=None if ok else "UNRESOLVED_LINKS",
            metadata=sanitize_metadata(metadata),
        )
    )


def _display_path(path: str, root: Path) -> str:
    candidate = Path(path)
    if candidate.is_relative_to(root):
        return candidate.relative_to(root).as_posix()
    return candidate.as_posix()


if __name__ == "__main__":
    raise SystemExit(main())
