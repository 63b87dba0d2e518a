"""Structured logging utilities."""

from .audit import JsonlAuditLogger, RunEvent, sanitize_metadata, utc_timestamp

__all__ = ["JsonlAuditLogger", "RunEvent", "sanitize_metadata", "utc_timestamp"]
