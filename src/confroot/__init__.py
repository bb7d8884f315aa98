"""Secure resolution of project-local and user-global configuration paths."""

from .config import CliOverrides, ResolverConfig, default_config, load_effective_config
from .errors import (
    BoundaryViolationError,
    ConfrootError,
    EnvironmentUnavailableError,
    InputRejectedError,
    InvalidNameError,
    NotFoundError,
    NotInWorkspaceError,
    RejectedPathError,
    SearchAttempt,
)
from .resolver import ConfigPaths, create_config_paths
from .security import (
    PlatformPolicy,
    detect_policy,
    try_resolve_in_dir,
    validate_env_path,
    validate_name,
    verify_within_directory,
)
from .workspace import RepoRootCache

__all__ = [
    "BoundaryViolationError",
    "CliOverrides",
    "ConfigPaths",
    "ConfrootError",
    "EnvironmentUnavailableError",
    "InputRejectedError",
    "InvalidNameError",
    "NotFoundError",
    "NotInWorkspaceError",
    "PlatformPolicy",
    "RejectedPathError",
    "RepoRootCache",
    "ResolverConfig",
    "SearchAttempt",
    "create_config_paths",
    "default_config",
    "detect_policy",
    "load_effective_config",
    "try_resolve_in_dir",
    "validate_env_path",
    "validate_name",
    "verify_within_directory",
]
