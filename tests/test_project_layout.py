from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/link_rectifier/cli.py",
        "src/link_rectifier/config.py",
        "src/link_rectifier/detect/__init__.py",
        "src/link_rectifier/index/__init__.py",
        "src/link_rectifier/rectify/__init__.py",
        "src/link_rectifier/security/__init__.py",
        "src/link_rectifier/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
