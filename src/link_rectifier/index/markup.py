"""Line scanning shared by heading extraction and link detection."""

from __future__ import annotations

import re
from collections.abc import Iterator

FENCE_PATTERN = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
# A closing run of '#' only counts when separated by whitespace ("C#" keeps its hash).
HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)(?:\s+#+)?\s*$")


def iter_unfenced_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield (1-indexed line number, line) outside fenced code blocks.

    Fence delimiter lines are not yielded and '\\r' is stripped from each line.
    """
    fence: str | None = None
    for line_number, raw_line in enumerate(content.split("\n"), start=1):
        line = raw_line.rstrip("\r")
        fence_match = FENCE_PATTERN.match(line)
        if fence_match is not None:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker[0] * 3
            elif marker.startswith(fence):
                fence = None
            continue
        if fence is not None:
            continue
        yield line_number, line


def match_heading(line: str) -> tuple[int, str] | None:
    """Return (level, text) for an ATX heading line."""
    match = HEADING_PATTERN.match(line)
    if match is None:
        return None
    text = match.group(2).strip()
    if not text:
        return None
    return len(match.group(1)), text
