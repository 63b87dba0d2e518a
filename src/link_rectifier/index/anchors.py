"""GitHub-compatible heading anchor generation."""

from __future__ import annotations

import re

FALLBACK_ANCHOR = "section"

# Stands in for "&" while punctuation is stripped; expands to "--" at the end.
_AMPERSAND_MARKER = "\x00"
_DISALLOWED_PATTERN = re.compile(r"[^a-z0-9 \-\x00]")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_HYPHEN_RUN_PATTERN = re.compile(r"-{2,}")
_MARKER_PATTERN = re.compile(r"-*\x00-*")


def generate_anchor(heading_text: str) -> str:
    """Map heading text to the slug GitHub renders for it.

    >>> generate_anchor("1. Introduction")
    '1-introduction'
    >>> generate_anchor("API & Integration")
    'api--integration'
    """
    slug = heading_text.lower()
    slug = slug.replace("&", _AMPERSAND_MARKER)
    slug = _DISALLOWED_PATTERN.sub("", slug)
    slug = _WHITESPACE_PATTERN.sub("-", slug)
    slug = _HYPHEN_RUN_PATTERN.sub("-", slug)
    slug = _MARKER_PATTERN.sub("--", slug)
    slug = slug.strip("-")
    return slug or FALLBACK_ANCHOR
