from __future__ import annotations

from pathlib import Path

import pytest

from link_rectifier.security import (
    PolicyBlockedError,
    SecurityLimits,
    enforce_file_access_policy,
    is_file_readable,
)


def test_missing_file_is_blocked(tmp_path: Path) -> None:
    with pytest.raises(PolicyBlockedError) as error:
        enforce_file_access_policy(tmp_path / "gone.md", SecurityLimits())

    assert error.value.reason == "File does not exist."


def test_directory_is_blocked(tmp_path: Path) -> None:
    with pytest.raises(PolicyBlockedError) as error:
        enforce_file_access_policy(tmp_path, SecurityLimits())

    assert error.value.reason == "Path is not a regular file."


def test_max_file_bytes_limit_blocks_large_file(tmp_path: Path) -> None:
    target = tmp_path / "large.md"
    target.write_text("a" * 20, encoding="utf-8")

    with pytest.raises(PolicyBlockedError) as error:
        enforce_file_access_policy(target, SecurityLimits(max_file_bytes=10))

    assert error.value.reason == "File exceeds max_file_bytes limit."
    assert not is_file_readable(target, SecurityLimits(max_file_bytes=10))


def test_small_regular_file_is_readable(tmp_path: Path) -> None:
    target = tmp_path / "doc.md"
    target.write_text("# Doc\n", encoding="utf-8")

    enforce_file_access_policy(target, SecurityLimits())
    assert is_file_readable(target, SecurityLimits())
