from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/confroot/__init__.py",
        "src/confroot/cli.py",
        "src/confroot/config.py",
        "src/confroot/errors.py",
        "src/confroot/resolver.py",
        "src/confroot/security/__init__.py",
        "src/confroot/workspace/__init__.py",
        "src/confroot/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
