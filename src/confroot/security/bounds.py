"""Canonicalize-then-contain checks for files under trusted directories.

No separate existence probe is ever made: strict canonicalization fails for a
missing file, which removes the check-then-use window between "does it exist"
and "where does it point". A smaller window remains between a caller receiving
a path and opening it; that is inherent to returning paths and callers must
still handle I/O errors when they open the file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from confroot.logging import get_logger

LOGGER = get_logger(__name__)

FOUND = "found"
MISSING = "missing"
OUTSIDE_BOUNDARY = "outside_boundary"


@dataclass(slots=True, frozen=True)
class Probe:
    """Result of looking for one file under one base directory."""

    candidate: Path
    resolved: Path | None
    outcome: str


def _canonical(path: Path) -> Path | None:
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        # Missing, inaccessible, symlink loop, or an embedded NUL.
        return None


def probe_in_dir(base: Path, subdir: str, filename: str) -> Probe:
    """Look for ``base/subdir/filename`` and report where it canonically lives."""
    boundary = base / subdir if subdir else base
    candidate = boundary / filename

    canonical_file = _canonical(candidate)
    if canonical_file is None:
        return Probe(candidate=candidate, resolved=None, outcome=MISSING)
    canonical_boundary = _canonical(boundary)
    if canonical_boundary is None:
        return Probe(candidate=candidate, resolved=None, outcome=MISSING)

    if not canonical_file.is_relative_to(canonical_boundary):
        LOGGER.warning(
            "Path traversal detected: %s resolves to %s outside %s",
            candidate,
            canonical_file,
            canonical_boundary,
        )
        return Probe(candidate=candidate, resolved=None, outcome=OUTSIDE_BOUNDARY)
    return Probe(candidate=candidate, resolved=canonical_file, outcome=FOUND)


def try_resolve_in_dir(base: Path, subdir: str, filename: str) -> Path | None:
    """Return the canonical file path when it exists inside ``base/subdir``."""
    return probe_in_dir(base, subdir, filename).resolved


def verify_within_directory(path: Path, base: Path) -> bool:
    """Return True when ``path`` canonically resolves inside ``base``."""
    canonical_path = _canonical(path)
    if canonical_path is None:
        LOGGER.warning("Cannot canonicalize resolved path: %s", path)
        return False
    canonical_base = _canonical(base)
    if canonical_base is None:
        LOGGER.warning("Cannot canonicalize base directory: %s", base)
        return False
    if not canonical_path.is_relative_to(canonical_base):
        LOGGER.warning(
            "Path traversal detected: %s escapes base directory %s",
            canonical_path,
            canonical_base,
        )
        return False
    return True
