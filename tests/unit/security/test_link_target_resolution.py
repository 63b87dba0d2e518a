from __future__ import annotations

from pathlib import Path

import pytest

from link_rectifier.security import PathBlockedError, exists_with_exact_case, resolve_link_target


def test_relative_target_resolves_against_source_directory(tmp_path: Path) -> None:
    source = tmp_path / "docs" / "guide.md"

    target = resolve_link_target(source, "../README.md")

    assert target == tmp_path / "README.md"


def test_backslashes_and_percent_encoding_are_normalized(tmp_path: Path) -> None:
    source = tmp_path / "index.md"

    target = resolve_link_target(source, "sub\\my%20notes.md")

    assert target == tmp_path / "sub" / "my notes.md"


@pytest.mark.parametrize("target", ["/abs/path.md", "C:\\docs\\x.md", "C:/docs/x.md"])
def test_absolute_style_targets_are_blocked(tmp_path: Path, target: str) -> None:
    with pytest.raises(PathBlockedError) as error:
        resolve_link_target(tmp_path / "index.md", target)

    assert error.value.reason == "Absolute link targets are not resolved against the file tree."


def test_empty_target_is_blocked(tmp_path: Path) -> None:
    with pytest.raises(PathBlockedError) as error:
        resolve_link_target(tmp_path / "index.md", "   ")

    assert error.value.reason == "Link target is empty."


def test_exact_case_check_rejects_case_variants(tmp_path: Path) -> None:
    (tmp_path / "Guide.md").write_text("# Guide\n", encoding="utf-8")

    assert exists_with_exact_case(tmp_path / "Guide.md")
    assert not exists_with_exact_case(tmp_path / "guide.md")
    assert not exists_with_exact_case(tmp_path / "missing.md")
