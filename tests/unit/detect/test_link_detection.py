from __future__ import annotations

from pathlib import Path

from link_rectifier.detect import (
    KIND_DEFINITION,
    KIND_INLINE,
    LinkDetector,
    LinkReference,
    collect_anchors,
    is_external,
    iter_link_references,
)
from link_rectifier.index import (
    STATUS_ANCHOR_MISSING,
    STATUS_CROSS_REFERENCE_TARGET_MISSING,
    STATUS_INTERNAL_TARGET_MISSING,
)


def test_iter_link_references_finds_inline_and_definitions() -> None:
    content = "\n".join(
        [
            "# Title",
            "See [a](a.md) and ![img](pic.png \"caption\").",
            "[ref]: <docs/b.md> 'Title'",
            "[^note]: footnotes are not links",
        ]
    )

    references = list(iter_link_references(content))

    assert references == [
        LinkReference(line=2, url="a.md", kind=KIND_INLINE),
        LinkReference(line=2, url="pic.png", kind=KIND_INLINE),
        LinkReference(line=3, url="docs/b.md", kind=KIND_DEFINITION),
    ]


def test_code_fences_and_spans_are_ignored() -> None:
    content = "\n".join(
        [
            "```markdown",
            "[inside](fence.md)",
            "```",
            "Inline `[code](span.md)` then [real](real.md)",
        ]
    )

    urls = [reference.url for reference in iter_link_references(content)]

    assert urls == ["real.md"]


def test_collect_anchors_handles_duplicates_and_tags() -> None:
    content = "\n".join(
        [
            "# Overview",
            "## Overview",
            "### Setup & Config ###",
            '<a name="custom-spot"></a>',
            "```",
            "# not a heading",
            "```",
        ]
    )

    anchors = collect_anchors(content)

    assert anchors == frozenset({"overview", "overview-1", "setup--config", "custom-spot"})


def test_is_external_recognises_schemes() -> None:
    assert is_external("https://example.com")
    assert is_external("mailto:someone@example.com")
    assert not is_external("docs/guide.md")
    assert not is_external("#section")


def test_detector_reports_each_status(tmp_path: Path) -> None:
    (tmp_path / "b.md").write_text("# Usage\n", encoding="utf-8")
    doc = tmp_path / "doc.md"
    doc.write_text(
        "\n".join(
            [
                "# Intro",
                "[ok](b.md) [ok2](b.md#usage) [self](#intro)",
                "[missing](B.MD)",
                "[anchor](b.md#Usage)",
                "[selfbad](#nope)",
                "[web](https://example.com/x.md)",
                "[ref]: gone.md",
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    result_set = LinkDetector().detect([doc, tmp_path / "b.md"])

    doc_result = result_set.results[str(doc.resolve())]
    found = [(record.line, record.url, record.status) for record in doc_result.broken_links]
    assert found == [
        (3, "B.MD", STATUS_INTERNAL_TARGET_MISSING),
        (4, "b.md#Usage", STATUS_ANCHOR_MISSING),
        (5, "#nope", STATUS_ANCHOR_MISSING),
        (7, "gone.md", STATUS_CROSS_REFERENCE_TARGET_MISSING),
    ]
    assert result_set.results[str((tmp_path / "b.md").resolve())].broken_links == []


def test_fragment_on_non_markup_target_is_not_checked(tmp_path: Path) -> None:
    (tmp_path / "data.txt").write_text("plain\n", encoding="utf-8")
    doc = tmp_path / "doc.md"
    doc.write_text("[x](data.txt#line-3)\n", encoding="utf-8")

    result_set = LinkDetector().detect([doc])

    assert result_set.broken_link_count() == 0


def test_percent_encoded_paths_resolve(tmp_path: Path) -> None:
    (tmp_path / "my notes.md").write_text("# Notes\n", encoding="utf-8")
    doc = tmp_path / "doc.md"
    doc.write_text("[x](my%20notes.md#notes)\n", encoding="utf-8")

    result_set = LinkDetector().detect([doc])

    assert result_set.broken_link_count() == 0


def test_unreadable_file_is_listed_without_links(tmp_path: Path) -> None:
    doc = tmp_path / "doc.md"
    doc.write_bytes(b"\xff\xfe[x](gone.md)\n")

    result_set = LinkDetector().detect([doc])

    assert list(result_set.results) == [str(doc.resolve())]
    assert result_set.broken_link_count() == 0
