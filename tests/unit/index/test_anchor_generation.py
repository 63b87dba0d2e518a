from __future__ import annotations

import pytest

from link_rectifier.index import FALLBACK_ANCHOR, generate_anchor


@pytest.mark.parametrize(
    ("heading", "expected"),
    [
        ("1. Introduction", "1-introduction"),
        ("API & Integration", "api--integration"),
        ("Getting Started", "getting-started"),
        ("What's new?", "whats-new"),
        ("`code` block", "code-block"),
        ("  Leading  and trailing  ", "leading-and-trailing"),
        ("foo -- bar", "foo-bar"),
        ("Q&A", "q--a"),
        ("& Intro", "intro"),
    ],
)
def test_generate_anchor_matches_github_slugs(heading: str, expected: str) -> None:
    assert generate_anchor(heading) == expected


@pytest.mark.parametrize("heading", ["", "!!!", "   ", "???&"])
def test_generate_anchor_never_returns_empty(heading: str) -> None:
    anchor = generate_anchor(heading)

    assert anchor == FALLBACK_ANCHOR
    assert anchor != ""


def test_generate_anchor_is_deterministic() -> None:
    assert generate_anchor("Setup & Config (v2)") == generate_anchor("Setup & Config (v2)")
    assert generate_anchor("Setup & Config (v2)") == "setup--config-v2"
