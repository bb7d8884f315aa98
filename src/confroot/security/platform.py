"""Per-host rules for where the user-global root may live."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from confroot.errors import BoundaryViolationError, EnvironmentUnavailableError

WINDOWS_RESERVED_NAMES: frozenset[str] = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{index}" for index in range(1, 10)}
    | {f"LPT{index}" for index in range(1, 10)}
)
DEFAULT_TEMP_ROOTS: tuple[Path, ...] = (Path("/tmp"), Path("/var/tmp"))


class PlatformPolicy(Protocol):
    """Host capability consulted by validation and global-root resolution."""

    name: str
    config_root_var: str
    reserved_names: frozenset[str]

    def resolve_config_root(self) -> Path:
        """Return the default base directory for per-user configuration."""
        ...

    def validate_boundary(self, path: Path) -> None:
        """Raise BoundaryViolationError when ``path`` is outside allowed locations."""
        ...


def detect_home() -> Path | None:
    """Return the current user's home directory, or None when unknown."""
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def canonical_or_self(path: Path) -> Path:
    """Canonicalize a boundary directory, keeping it as-is when that fails."""
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return path


@dataclass(slots=True, frozen=True)
class PosixPolicy:
    """Linux and other XDG hosts: home, /tmp and /var/tmp are allowed."""

    home: Path | None = field(default_factory=detect_home)
    temp_roots: tuple[Path, ...] = DEFAULT_TEMP_ROOTS
    name: str = "posix"
    config_root_var: str = "XDG_CONFIG_HOME"
    reserved_names: frozenset[str] = frozenset()

    def resolve_config_root(self) -> Path:
        return self._require_home() / ".config"

    def allowed_roots(self) -> tuple[Path, ...]:
        """Return canonical boundaries in the order they are checked."""
        roots = [canonical_or_self(root) for root in self.temp_roots]
        if self.home is not None:
            roots.insert(0, canonical_or_self(self.home))
        return tuple(roots)

    def validate_boundary(self, path: Path) -> None:
        if any(path.is_relative_to(root) for root in self.allowed_roots()):
            return
        raise BoundaryViolationError(
            "Path is outside allowed boundaries (must be under $HOME, /tmp, or /var/tmp).",
            f"Choose a directory under the home directory or a temp directory. Got: {path}",
            rule="outside_boundary",
        )

    def _require_home(self) -> Path:
        if self.home is None:
            raise EnvironmentUnavailableError(
                "Cannot determine config directory: no home directory.",
                "Set HOME or point the config-root variable at an allowed directory.",
            )
        return self.home


@dataclass(slots=True, frozen=True)
class MacOSPolicy(PosixPolicy):
    """macOS keeps per-user configuration under Application Support."""

    name: str = "macos"

    def resolve_config_root(self) -> Path:
        return self._require_home() / "Library" / "Application Support"


@dataclass(slots=True, frozen=True)
class WindowsPolicy:
    """Windows hosts: app-data directories only; UNC and device paths refused.

    The default root is the roaming profile folder under the user's home.
    ``APPDATA`` is an untrusted override and is never read here, so a
    rejected override cannot come back as the fallback.
    """

    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    home: Path | None = field(default_factory=detect_home)
    name: str = "windows"
    config_root_var: str = "APPDATA"
    reserved_names: frozenset[str] = WINDOWS_RESERVED_NAMES

    def resolve_config_root(self) -> Path:
        if self.home is None:
            raise EnvironmentUnavailableError(
                "Cannot determine config directory: no user profile directory.",
                "Run under a user profile or point %APPDATA% at an allowed directory.",
            )
        return self.home / "AppData" / "Roaming"

    def allowed_roots(self) -> tuple[Path, ...]:
        roots: list[Path] = []
        for var in ("APPDATA", "LOCALAPPDATA"):
            value = self.environ.get(var)
            if not value:
                continue
            try:
                roots.append(Path(value).resolve(strict=True))
            except (OSError, RuntimeError):
                continue
        return tuple(roots)

    def validate_boundary(self, path: Path) -> None:
        text = str(path)
        if text.startswith(("\\\\?\\", "\\\\.\\")):
            raise BoundaryViolationError(
                f"Device paths are not allowed: {text}",
                "Use a regular drive path under %APPDATA% or %LOCALAPPDATA%.",
                rule="device_path",
            )
        if text.startswith("\\\\"):
            raise BoundaryViolationError(
                f"UNC paths are not allowed: {text}",
                "Use a local path under %APPDATA% or %LOCALAPPDATA%.",
                rule="unc_path",
            )
        if any(path.is_relative_to(root) for root in self.allowed_roots()):
            return
        raise BoundaryViolationError(
            "Path must be under %APPDATA% or %LOCALAPPDATA%.",
            "Choose a directory under the user's application data folders.",
            rule="outside_boundary",
        )


def detect_policy(platform: str | None = None) -> PlatformPolicy:
    """Select the policy for the running host (or for ``platform`` when given)."""
    host = platform or sys.platform
    if host.startswith("win"):
        return WindowsPolicy()
    if host == "darwin":
        return MacOSPolicy()
    return PosixPolicy()
