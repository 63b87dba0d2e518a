"""Broken link detection feeding the rectifier."""

from .detector import (
    KIND_DEFINITION,
    KIND_INLINE,
    LinkDetector,
    LinkReference,
    collect_anchors,
    is_external,
    iter_link_references,
)

__all__ = [
    "KIND_DEFINITION",
    "KIND_INLINE",
    "LinkDetector",
    "LinkReference",
    "collect_anchors",
    "is_external",
    "iter_link_references",
]
