"""Validation of caller-supplied resource names.

Names are joined onto trusted directories, so anything that could change the
directory a name lands in is refused before the filesystem is consulted.
"""

from __future__ import annotations

from confroot.errors import InvalidNameError
from confroot.security.platform import PlatformPolicy, detect_policy


def validate_name(name: str, policy: PlatformPolicy | None = None) -> None:
    """Raise InvalidNameError unless ``name`` is a plain, single path segment."""
    if not name.strip():
        raise InvalidNameError(
            name,
            "Name cannot be empty or whitespace-only.",
            "Provide a name such as 'core'.",
        )
    if "/" in name:
        raise InvalidNameError(
            name,
            f"Name {name!r} contains forward slash - path separators not allowed.",
            "Remove '/' from the name.",
        )
    if "\\" in name:
        raise InvalidNameError(
            name,
            f"Name {name!r} contains backslash - path separators not allowed.",
            "Remove '\\' from the name.",
        )
    if ".." in name:
        raise InvalidNameError(
            name,
            f"Name {name!r} contains '..' - path traversal sequences not allowed.",
            "Remove '..' from the name.",
        )
    if "\0" in name:
        raise InvalidNameError(
            name,
            f"Name {name!r} contains null bytes - invalid character.",
            "Remove NUL characters from the name.",
        )
    if name.startswith("."):
        raise InvalidNameError(
            name,
            f"Name {name!r} starts with '.' - hidden files not allowed.",
            "Drop the leading '.'.",
        )

    reserved = (policy or detect_policy()).reserved_names
    if reserved:
        stem = name.upper().split(".", 1)[0]
        if stem in reserved:
            raise InvalidNameError(
                name,
                f"Name {name!r} is a Windows reserved device name.",
                "Pick a name that is not CON, PRN, AUX, NUL, COM1-9 or LPT1-9.",
            )
