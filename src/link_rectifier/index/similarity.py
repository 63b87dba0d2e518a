"""Normalized edit-distance similarity for filenames and anchors."""

from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

_SEPARATOR_PATTERN = re.compile(r"[-_ .]")


def normalize_for_similarity(value: str) -> str:
    """Lowercase and drop the separators '-', '_', ' ' and '.'."""
    return _SEPARATOR_PATTERN.sub("", value.lower())


def similarity_score(left: str, right: str) -> float:
    """Return 1 - distance / longest length over normalized forms, in [0, 1]."""
    normalized_left = normalize_for_similarity(left)
    normalized_right = normalize_for_similarity(right)
    longest = max(len(normalized_left), len(normalized_right))
    if longest == 0:
        return 1.0
    distance = Levenshtein.distance(normalized_left, normalized_right)
    return 1.0 - (distance / longest)
