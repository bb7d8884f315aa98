"""Memoized workspace-root discovery keyed by working directory."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from confroot.errors import EnvironmentUnavailableError, NotInWorkspaceError
from confroot.logging import get_logger
from confroot.workspace.discovery import discover_workspace_root
from confroot.workspace.locking import ReadWriteLock

LOGGER = get_logger(__name__)

DiscoverFn = Callable[[Path], Path]
CwdFn = Callable[[], Path]


class RepoRootCache:
    """Caches discovery results, negative ones included, for the process lifetime.

    Lookups share the lock. A miss takes it exclusively, re-checks, and runs
    discovery while still holding it, so the first concurrent lookups for a
    new directory wait on one filesystem walk instead of repeating it.
    """

    def __init__(
        self,
        discover: DiscoverFn = discover_workspace_root,
        cwd: CwdFn = Path.cwd,
    ) -> None:
        self._discover = discover
        self._cwd = cwd
        self._lock = ReadWriteLock()
        self._entries: dict[Path, Path | None] = {}

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def find_root(self) -> Path:
        """Return the workspace root enclosing the current working directory."""
        key = self._current_dir()

        with self._lock.read():
            if key in self._entries:
                LOGGER.debug("Workspace root cache hit for %s", key)
                return _unwrap(key, self._entries[key])

        with self._lock.write():
            if key in self._entries:
                return _unwrap(key, self._entries[key])
            LOGGER.debug("Workspace root cache miss for %s", key)
            try:
                root = self._discover(key)
            except NotInWorkspaceError:
                self._entries[key] = None
                raise
            self._entries[key] = root
            return root

    def clear(self) -> None:
        """Drop every entry; the next lookup rediscovers."""
        with self._lock.write():
            self._entries.clear()

    def _current_dir(self) -> Path:
        try:
            return self._cwd()
        except OSError as error:
            raise EnvironmentUnavailableError(
                f"Failed to determine current directory: {error}",
                "Change into an existing directory.",
            ) from error


def _unwrap(key: Path, cached: Path | None) -> Path:
    if cached is None:
        raise NotInWorkspaceError(key)
    return cached
