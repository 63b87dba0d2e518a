"""Result models, discovery and the candidate index."""

from .anchors import FALLBACK_ANCHOR, generate_anchor
from .candidates import CandidateIndex, extract_headings
from .discovery import collect_markup_files, discover_markup_files
from .markup import iter_unfenced_lines, match_heading
from .models import (
    LINK_STATUSES,
    STATUS_ANCHOR_MISSING,
    STATUS_CROSS_REFERENCE_TARGET_MISSING,
    STATUS_INTERNAL_TARGET_MISSING,
    BrokenLinkRecord,
    FileRecord,
    FileResult,
    HeadingEntry,
    ValidationResultSet,
)
from .similarity import normalize_for_similarity, similarity_score

__all__ = [
    "BrokenLinkRecord",
    "CandidateIndex",
    "FALLBACK_ANCHOR",
    "FileRecord",
    "FileResult",
    "HeadingEntry",
    "LINK_STATUSES",
    "STATUS_ANCHOR_MISSING",
    "STATUS_CROSS_REFERENCE_TARGET_MISSING",
    "STATUS_INTERNAL_TARGET_MISSING",
    "ValidationResultSet",
    "collect_markup_files",
    "discover_markup_files",
    "extract_headings",
    "generate_anchor",
    "iter_unfenced_lines",
    "match_heading",
    "normalize_for_similarity",
    "similarity_score",
]
