"""Validation of directory paths read from environment variables."""

from __future__ import annotations

import unicodedata
from pathlib import Path

from confroot.errors import BoundaryViolationError, RejectedPathError
from confroot.logging import JsonlSecurityLog, get_logger, report_rejection
from confroot.security.platform import PlatformPolicy, detect_policy

LOGGER = get_logger(__name__)

_ALLOWED_CONTROL_CHARS = frozenset("\t\n")


def has_suspicious_patterns(raw: str) -> bool:
    """Return True for values carrying excessive dots, NUL or control characters."""
    if "...." in raw:
        return True
    if "\0" in raw:
        return True
    return any(
        unicodedata.category(char) == "Cc" and char not in _ALLOWED_CONTROL_CHARS
        for char in raw
    )


def _canonicalize(raw: str) -> Path:
    path = Path(raw)
    try:
        return path.resolve(strict=True)
    except FileNotFoundError:
        pass
    except (OSError, RuntimeError) as error:
        raise RejectedPathError(
            f"Failed to canonicalize path: {error}",
            "Point the variable at an accessible directory.",
            rule="canonicalize_failed",
        ) from error

    # Not created yet: the parent must exist, the final name is re-appended.
    if not path.name:
        raise RejectedPathError(
            "Path has no final component.",
            "Point the variable at a named directory.",
            rule="no_filename",
        )
    try:
        canonical_parent = path.parent.resolve(strict=True)
    except FileNotFoundError as error:
        raise RejectedPathError(
            f"Parent directory does not exist: {path.parent}",
            "Create the parent directory first.",
            rule="parent_missing",
        ) from error
    except (OSError, RuntimeError) as error:
        raise RejectedPathError(
            f"Failed to canonicalize parent directory: {error}",
            "Point the variable at an accessible directory.",
            rule="canonicalize_failed",
        ) from error
    return canonical_parent / path.name


def validate_env_path(
    var_name: str,
    raw: str,
    policy: PlatformPolicy | None = None,
    audit_log: JsonlSecurityLog | None = None,
) -> Path:
    """Return the canonical form of ``raw`` when it is safe to use as a directory.

    The textual pre-filter runs before any syscall. A path that does not exist
    yet is accepted when its parent exists, so callers may create it later.
    The canonical result must satisfy the host policy boundary.
    """
    policy = policy or detect_policy()
    try:
        if not raw.strip():
            raise RejectedPathError(
                "Path is empty.",
                "Unset the variable or give it an absolute directory.",
                rule="empty",
            )
        if has_suspicious_patterns(raw):
            raise RejectedPathError(
                "Path contains suspicious patterns "
                "(null bytes, excessive dots, or control characters).",
                "Remove control characters and runs of dots from the value.",
                rule="suspicious_pattern",
            )
        canonical = _canonicalize(raw)
        if not canonical.is_absolute():
            raise RejectedPathError(
                "Path must be absolute.",
                "Give the variable an absolute directory.",
                rule="not_absolute",
            )
        policy.validate_boundary(canonical)
    except RejectedPathError as error:
        attributed = error.for_variable(var_name)
        report_rejection(
            LOGGER,
            category=(
                "boundary_violation"
                if isinstance(error, BoundaryViolationError)
                else "input_rejected"
            ),
            source=var_name,
            code=attributed.code,
            reason=attributed.reason,
            raw=raw,
            audit_log=audit_log,
        )
        raise attributed from error
    return canonical
