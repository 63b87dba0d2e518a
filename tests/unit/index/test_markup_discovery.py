from __future__ import annotations

from pathlib import Path

from link_rectifier.config import ScanConfig
from link_rectifier.index import collect_markup_files, discover_markup_files


def test_discovery_honors_extensions_excludes_and_stable_order(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    (tmp_path / "guide").mkdir()
    (tmp_path / ".git").mkdir()
    (tmp_path / "guide" / "z.md").write_text("# Z\n", encoding="utf-8")
    (tmp_path / "guide" / "a.markdown").write_text("# A\n", encoding="utf-8")
    (tmp_path / "docs" / "index.md").write_text("# Index\n", encoding="utf-8")
    (tmp_path / "docs" / "image.png").write_bytes(b"\x89PNG")
    (tmp_path / ".git" / "notes.md").write_text("internal", encoding="utf-8")

    config = ScanConfig(
        include_extensions=(".md", ".markdown"),
        exclude_globs=("**/.git/**",),
    )
    records = discover_markup_files(tmp_path, config=config)

    assert [record.relative_path for record in records] == [
        "docs/index.md",
        "guide/a.markdown",
        "guide/z.md",
    ]
    assert records[0].path == str(tmp_path.resolve() / "docs" / "index.md")


def test_discovery_excludes_binary_file_with_allowed_extension(tmp_path: Path) -> None:
    (tmp_path / "ok.md").write_text("# ok\n", encoding="utf-8")
    (tmp_path / "bad.md").write_bytes(b"\x00\x01\x02")

    config = ScanConfig(include_extensions=(".md",), exclude_globs=())
    records = discover_markup_files(tmp_path, config=config)

    assert [record.relative_path for record in records] == ["ok.md"]


def test_collect_accepts_files_and_directories_without_duplicates(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "a.md").write_text("# A\n", encoding="utf-8")
    (tmp_path / "docs" / "b.md").write_text("# B\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("plain\n", encoding="utf-8")

    config = ScanConfig(include_extensions=(".md",), exclude_globs=())
    records = collect_markup_files(
        [tmp_path / "docs" / "b.md", tmp_path / "docs", tmp_path / "notes.txt"],
        config,
    )

    assert [Path(record.path).name for record in records] == ["b.md", "a.md"]
