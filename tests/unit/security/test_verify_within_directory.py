from __future__ import annotations

import logging
from pathlib import Path

from confroot.security import verify_within_directory


def test_file_inside_base_is_accepted(tmp_path: Path) -> None:
    base = tmp_path / "toolset"
    base.mkdir()
    target = base / "core.json"
    target.write_text("{}", encoding="utf-8")

    assert verify_within_directory(target, base) is True


def test_dotdot_segments_are_normalized_before_the_check(tmp_path: Path) -> None:
    base = tmp_path / "toolset"
    base.mkdir()
    sibling = tmp_path / "sibling.json"
    sibling.write_text("{}", encoding="utf-8")

    assert verify_within_directory(base / ".." / "sibling.json", base) is False


def test_escape_through_symlink_is_refused_and_logged(tmp_path: Path, caplog) -> None:
    base = tmp_path / "toolset"
    base.mkdir()
    outside = tmp_path / "outside.json"
    outside.write_text("{}", encoding="utf-8")
    (base / "link.json").symlink_to(outside)

    with caplog.at_level(logging.WARNING, logger="confroot"):
        assert verify_within_directory(base / "link.json", base) is False

    assert "escapes base directory" in caplog.text


def test_nonexistent_path_or_base_is_refused(tmp_path: Path) -> None:
    assert verify_within_directory(tmp_path / "missing.json", tmp_path) is False
    assert verify_within_directory(tmp_path, tmp_path / "missing") is False
