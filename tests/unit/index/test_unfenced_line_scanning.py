from __future__ import annotations

from link_rectifier.index import iter_unfenced_lines, match_heading


def test_fenced_lines_are_skipped_and_numbers_kept() -> None:
    content = "intro\r\n```\r\ncode\r\n```\r\noutro\r\n"

    assert list(iter_unfenced_lines(content)) == [(1, "intro"), (5, "outro"), (6, "")]


def test_tilde_fence_is_not_closed_by_backticks() -> None:
    content = "\n".join(["~~~", "```", "still code", "~~~", "after"])

    assert list(iter_unfenced_lines(content)) == [(5, "after")]


def test_match_heading_levels_and_closing_sequence() -> None:
    assert match_heading("### Setup & Config ###") == (3, "Setup & Config")
    assert match_heading("# C#") == (1, "C#")
    assert match_heading("####### too deep") is None
    assert match_heading("#NoSpace") is None
