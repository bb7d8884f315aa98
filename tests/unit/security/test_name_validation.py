from __future__ import annotations

from pathlib import Path

import pytest

from confroot.errors import InvalidNameError
from confroot.security import PosixPolicy, WindowsPolicy, validate_name

POSIX = PosixPolicy(home=Path("/home/user"))
WINDOWS = WindowsPolicy(environ={})


@pytest.mark.parametrize("name", ["core", "my-tool_v2", "toolset2", "settings.toml"])
def test_plain_names_are_accepted(name: str) -> None:
    validate_name(name, POSIX)


@pytest.mark.parametrize(
    "name",
    ["", "   ", "a/b", "/abs", "a\\b", "..", "a..b", "a\0b", ".hidden", "./core"],
)
def test_unsafe_names_are_rejected(name: str) -> None:
    with pytest.raises(InvalidNameError) as error:
        validate_name(name, POSIX)

    assert error.value.name == name


def test_first_failing_rule_determines_the_error() -> None:
    with pytest.raises(InvalidNameError) as error:
        validate_name("../etc/passwd", POSIX)

    assert "forward slash" in error.value.reason


def test_traversal_without_separator_reports_dots() -> None:
    with pytest.raises(InvalidNameError) as error:
        validate_name("core..json", POSIX)

    assert "'..'" in error.value.reason


@pytest.mark.parametrize("name", ["CON", "con", "Lpt9", "nul.json", "COM1.tar.gz"])
def test_windows_reserved_device_names_are_rejected(name: str) -> None:
    with pytest.raises(InvalidNameError) as error:
        validate_name(name, WINDOWS)

    assert "reserved device name" in error.value.reason


@pytest.mark.parametrize("name", ["CONSOLE", "com10", "lpt0", "auxiliary.json"])
def test_windows_near_miss_names_are_accepted(name: str) -> None:
    validate_name(name, WINDOWS)


def test_reserved_names_only_apply_under_windows_policy() -> None:
    validate_name("CON", POSIX)
