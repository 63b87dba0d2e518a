from __future__ import annotations

import json
from pathlib import Path

from link_rectifier.logging import JsonlAuditLogger, RunEvent, sanitize_metadata, utc_timestamp


def _event(timestamp: str, run_id: str) -> RunEvent:
    return RunEvent(
        timestamp=timestamp,
        run_id=run_id,
        command="fix",
        ok=True,
        error_code=None,
        metadata={"fixes_applied": 1},
    )


def test_append_creates_parent_and_writes_jsonl_schema(tmp_path: Path) -> None:
    audit_path = tmp_path / "nested" / "audit.jsonl"
    logger = JsonlAuditLogger(path=audit_path)

    logger.append(_event(utc_timestamp(), "run-1"))

    lines = audit_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert set(event.keys()) == {"command", "error_code", "metadata", "ok", "run_id", "timestamp"}
    assert event["run_id"] == "run-1"
    assert event["timestamp"].endswith("Z")


def test_append_keeps_earlier_runs(tmp_path: Path) -> None:
    audit_path = tmp_path / "audit.jsonl"
    logger = JsonlAuditLogger(path=audit_path)
    logger.append(_event("2026-01-01T00:00:00.000Z", "run-a"))
    logger.append(_event("2026-01-02T00:00:00.000Z", "run-b"))

    lines = audit_path.read_text(encoding="utf-8").splitlines()

    assert [json.loads(line)["run_id"] for line in lines] == ["run-a", "run-b"]


def test_sanitize_metadata_reduces_strings_and_containers() -> None:
    sanitized = sanitize_metadata(
        {
            "fixes_applied": 3,
            "dry_run": False,
            "mode": "fix",
            "backup_policy": "fail-open",
            "path": "/home/user/secret-notes.md",
            "files": ["a.md", "b.md"],
            "config": {"root": "/x"},
        }
    )

    assert sanitized == {
        "backup_policy": "fail-open",
        "config_keys": ["root"],
        "config_type": "dict",
        "dry_run": False,
        "files_length": 2,
        "files_type": "list",
        "fixes_applied": 3,
        "mode": "fix",
        "path_length": len("/home/user/secret-notes.md"),
        "path_present": True,
    }
