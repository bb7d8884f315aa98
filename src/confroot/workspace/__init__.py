"""Workspace-root discovery and caching."""

from .cache import RepoRootCache
from .discovery import discover_workspace_root
from .locking import ReadWriteLock

__all__ = ["ReadWriteLock", "RepoRootCache", "discover_workspace_root"]
