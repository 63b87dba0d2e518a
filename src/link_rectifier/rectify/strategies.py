"""Ordered fix strategies for broken link records."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass

from link_rectifier.config import DEFAULT_SIMILARITY_THRESHOLD
from link_rectifier.index import (
    STATUS_ANCHOR_MISSING,
    STATUS_CROSS_REFERENCE_TARGET_MISSING,
    STATUS_INTERNAL_TARGET_MISSING,
    BrokenLinkRecord,
    CandidateIndex,
    HeadingEntry,
    similarity_score,
)


@dataclass(slots=True, frozen=True)
class FixDecision:
    """Replacement url for one record and a human-readable description."""

    new_url: str
    description: str


def resolve_fix(
    record: BrokenLinkRecord,
    current_file_path: str,
    index: CandidateIndex,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> FixDecision | None:
    """Dispatch on record status and return the first strategy that succeeds."""
    if record.status in (STATUS_INTERNAL_TARGET_MISSING, STATUS_CROSS_REFERENCE_TARGET_MISSING):
        return resolve_target_link(record.url, current_file_path, index, threshold)
    if record.status == STATUS_ANCHOR_MISSING:
        return resolve_anchor_link(record.url, current_file_path, index, threshold)
    return None


def resolve_target_link(
    url: str,
    current_file_path: str,
    index: CandidateIndex,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> FixDecision | None:
    """Try case, then extension, then fuzzy filename matching in the same directory."""
    target_file, _, anchor = url.partition("#")
    if not target_file:
        return None
    candidates = index.filenames_in(os.path.dirname(current_file_path))

    case_match = find_case_match(target_file, candidates)
    if case_match is not None:
        return FixDecision(
            new_url=_with_anchor(case_match, anchor),
            description=f"Fixed case: '{target_file}' -> '{case_match}'",
        )

    extension_match = find_extension_match(target_file, candidates)
    if extension_match is not None:
        return FixDecision(
            new_url=_with_anchor(extension_match, anchor),
            description=f"Fixed extension: '{target_file}' -> '{extension_match}'",
        )

    # Candidates are bare names from the current directory; a fuzzy hit would drop "sub/".
    if "/" in target_file or "\\" in target_file:
        return None
    fuzzy_match = find_similar_file(target_file, candidates, threshold)
    if fuzzy_match is not None:
        return FixDecision(
            new_url=_with_anchor(fuzzy_match, anchor),
            description=f"Fuzzy match: '{target_file}' -> '{fuzzy_match}'",
        )
    return None


def resolve_anchor_link(
    url: str,
    current_file_path: str,
    index: CandidateIndex,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> FixDecision | None:
    """Try an exact case-insensitive anchor, then the most similar heading anchor.

    The file part is kept exactly as authored, so a self reference stays '#...'.
    """
    if "#" not in url:
        return None
    file_part, _, anchor = url.partition("#")
    headings = index.headings_for(current_file_path, file_part)
    if not headings or any(heading.anchor == anchor for heading in headings):
        return None

    lowered = anchor.lower()
    for heading in headings:
        if heading.anchor.lower() == lowered:
            return FixDecision(
                new_url=f"{file_part}#{heading.anchor}",
                description=f"Fixed anchor case: '#{anchor}' -> '#{heading.anchor}'",
            )

    similar = find_similar_heading(anchor, headings, threshold)
    if similar is not None:
        return FixDecision(
            new_url=f"{file_part}#{similar.anchor}",
            description=f"Fuzzy anchor match: '#{anchor}' -> '#{similar.anchor}'",
        )
    return None


def find_case_match(target_file: str, candidates: Iterable[str]) -> str | None:
    """Return a filename equal to target_file ignoring case but differing in case."""
    lowered = target_file.lower()
    for candidate in candidates:
        if candidate != target_file and candidate.lower() == lowered:
            return candidate
    return None


def find_extension_match(target_file: str, candidates: Iterable[str]) -> str | None:
    """Return a filename whose extension-stripped name matches target_file's."""
    base_name = os.path.splitext(target_file)[0].lower()
    for candidate in candidates:
        if candidate == target_file:
            continue
        if os.path.splitext(candidate)[0].lower() == base_name:
            return candidate
    return None


def find_similar_file(
    target_file: str,
    candidates: Iterable[str],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> str | None:
    """Return the best scoring filename strictly above threshold; first wins ties."""
    best_match: str | None = None
    best_score = 0.0
    for candidate in candidates:
        if candidate == target_file:
            continue
        score = similarity_score(target_file, candidate)
        if score > best_score and score > threshold:
            best_match = candidate
            best_score = score
    return best_match


def find_similar_heading(
    anchor: str,
    headings: Iterable[HeadingEntry],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> HeadingEntry | None:
    """Return the heading whose anchor scores best strictly above threshold."""
    best_match: HeadingEntry | None = None
    best_score = 0.0
    for heading in headings:
        score = similarity_score(anchor, heading.anchor)
        if score > best_score and score > threshold:
            best_match = heading
            best_score = score
    return best_match


def _with_anchor(filename: str, anchor: str) -> str:
    if anchor:
        return f"{filename}#{anchor}"
    return filename
