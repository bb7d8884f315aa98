"""Repository discovery using GitPython."""

from __future__ import annotations

from pathlib import Path

import git
import git.exc

from confroot.errors import NotInWorkspaceError


def discover_workspace_root(start: Path) -> Path:
    """Walk up from ``start`` to the enclosing git working tree.

    Raises NotInWorkspaceError when no repository is found before the
    filesystem root, or when the repository found is bare.
    """
    try:
        repo = git.Repo(start, search_parent_directories=True)
    except git.exc.GitError as error:
        raise NotInWorkspaceError(start) from error
    try:
        working_tree = repo.working_tree_dir
    finally:
        repo.close()
    if working_tree is None:
        raise NotInWorkspaceError(
            start,
            f"Git repository has no working directory (bare repository?) at {repo.git_dir}",
        )
    return Path(working_tree)
