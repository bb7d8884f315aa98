"""Typed failures raised by path resolution and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class ConfrootError(Exception):
    """Base class for every resolution failure surfaced to callers."""

    code = "CONFROOT_ERROR"

    def __init__(self, reason: str, hint: str = "") -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


class InputRejectedError(ConfrootError):
    """Raised when untrusted input is malformed; never touches disk."""

    code = "INPUT_REJECTED"


class InvalidNameError(InputRejectedError):
    """Raised when a resource name fails validation."""

    code = "INVALID_NAME"

    def __init__(self, name: str, reason: str, hint: str = "") -> None:
        super().__init__(reason, hint)
        self.name = name


class RejectedPathError(InputRejectedError):
    """Raised when an environment-supplied path is rejected."""

    code = "PATH_REJECTED"

    def __init__(
        self,
        reason: str,
        hint: str = "",
        *,
        rule: str,
        var_name: str | None = None,
    ) -> None:
        super().__init__(reason, hint)
        self.rule = rule
        self.var_name = var_name

    def for_variable(self, var_name: str) -> RejectedPathError:
        """Return a copy of this error attributed to ``var_name``."""
        return type(self)(self.reason, self.hint, rule=self.rule, var_name=var_name)


class BoundaryViolationError(RejectedPathError):
    """Raised when a canonical path escapes its trusted base."""

    code = "BOUNDARY_VIOLATION"


class EnvironmentUnavailableError(ConfrootError):
    """Raised when the host cannot supply a required directory."""

    code = "ENVIRONMENT_UNAVAILABLE"


class NotInWorkspaceError(ConfrootError):
    """Raised when the working directory is not inside a repository."""

    code = "NOT_IN_WORKSPACE"

    def __init__(self, start: Path, reason: str | None = None) -> None:
        super().__init__(
            reason or f"Not in a git repository (searched from: {start})",
            "Run inside a git working tree or rely on the user-global root.",
        )
        self.start = start


@dataclass(slots=True, frozen=True)
class SearchAttempt:
    """One candidate visited during a precedence search."""

    candidate: Path
    outcome: str


class NotFoundError(ConfrootError):
    """Raised when no root holds the requested resource."""

    code = "NOT_FOUND"

    def __init__(self, label: str, identifier: str, searched: tuple[SearchAttempt, ...]) -> None:
        lines = "\n  ".join(str(attempt.candidate) for attempt in searched)
        super().__init__(
            f"{label} '{identifier}' not found. Searched:\n  {lines}",
            "Create the file under one of the searched locations.",
        )
        self.label = label
        self.identifier = identifier
        self.searched = searched

    @property
    def searched_paths(self) -> tuple[Path, ...]:
        """Return candidate paths in the order they were attempted."""
        return tuple(attempt.candidate for attempt in self.searched)
