"""Local-over-global precedence resolution of configuration files."""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Final, Literal

from confroot.config import CliOverrides, ResolverConfig, load_effective_config
from confroot.errors import (
    InvalidNameError,
    NotFoundError,
    NotInWorkspaceError,
    RejectedPathError,
    SearchAttempt,
)
from confroot.logging import JsonlSecurityLog, get_logger, report_rejection
from confroot.security import PlatformPolicy, detect_policy, probe_in_dir, validate_env_path
from confroot.security import validate_name as _validate_name
from confroot.workspace import RepoRootCache

LOGGER = get_logger(__name__)

ResourceKind = Literal["toolset", "config_file"]
RESOURCE_KINDS: Final[tuple[str, ...]] = ("toolset", "config_file")


class ConfigPaths:
    """Resolves project-local and user-global configuration locations.

    Search order for every resource is the workspace-local root
    (``{workspace}/{local_dir_name}``) followed by the user-global root
    (``{config_base}/{app_name}``). Paths are returned canonical; nothing is
    created on disk.
    """

    def __init__(
        self,
        config: ResolverConfig,
        policy: PlatformPolicy | None = None,
        root_cache: RepoRootCache | None = None,
        environ: Mapping[str, str] | None = None,
        audit_log: JsonlSecurityLog | None = None,
    ) -> None:
        self._config = config
        self._policy = policy if policy is not None else detect_policy()
        self._root_cache = root_cache if root_cache is not None else RepoRootCache()
        self._environ = environ if environ is not None else os.environ
        if audit_log is None and config.audit_log_path is not None:
            audit_log = JsonlSecurityLog(config.audit_log_path)
        self._audit_log = audit_log

    @property
    def config(self) -> ResolverConfig:
        return self._config

    @property
    def policy(self) -> PlatformPolicy:
        return self._policy

    @property
    def audit_log(self) -> JsonlSecurityLog | None:
        return self._audit_log

    def resolve_local_root(self) -> Path:
        """Return ``{workspace_root}/{local_dir_name}``; raises NotInWorkspaceError."""
        return self._root_cache.find_root() / self._config.local_dir_name

    def resolve_global_root(self) -> Path:
        """Return the user-global root; raises EnvironmentUnavailableError."""
        var = self._policy.config_root_var
        raw = self._environ.get(var)
        if raw and self._config.allow_custom_paths:
            LOGGER.warning(
                "Custom paths are allowed - bypassing validation for %s (UNSAFE)", var
            )
            return Path(raw).absolute() / self._config.app_name
        if raw:
            try:
                base = validate_env_path(var, raw, self._policy, self._audit_log)
            except RejectedPathError as error:
                LOGGER.warning(
                    "Invalid %s environment variable: %s Falling back to system default.",
                    var,
                    error.reason,
                )
            else:
                return base / self._config.app_name
        return self._policy.resolve_config_root() / self._config.app_name

    def config_dir(self) -> Path:
        return self.resolve_global_root() / "config"

    def toolset_dir(self) -> Path:
        return self.resolve_global_root() / self._config.toolset_subdir

    def state_dir(self) -> Path:
        return self.resolve_global_root() / "state"

    def log_dir(self) -> Path:
        return self.resolve_global_root() / "logs"

    def data_dir(self) -> Path:
        return self.resolve_global_root() / "data"

    def bin_dir(self) -> Path:
        return self.resolve_global_root() / "bin"

    def cache_dir(self) -> Path:
        return self.resolve_global_root() / "cache"

    def resolve(self, kind: ResourceKind, identifier: str) -> Path:
        """Resolve a named resource of ``kind`` with local > global precedence."""
        if kind == "toolset":
            return self.resolve_toolset(identifier)
        if kind == "config_file":
            return self.resolve_config_file(identifier)
        raise ValueError(f"Unknown resource kind: {kind!r}; expected one of {RESOURCE_KINDS}")

    def resolve_toolset(self, name: str) -> Path:
        """Resolve ``{root}/toolset/{name}.json``, local root first."""
        self.validate_name(name, source="toolset")
        filename = f"{name}{self._config.toolset_extension}"
        return self._search("Toolset", name, self._config.toolset_subdir, filename)

    def resolve_config_file(self, filename: str) -> Path:
        """Resolve ``{root}/{filename}``, local root first."""
        if filename.strip() in ("", ".", ".."):
            error = InvalidNameError(
                filename,
                f"Config file name {filename!r} does not name a file.",
                "Provide a file name such as 'settings.toml'.",
            )
            report_rejection(
                LOGGER,
                category="input_rejected",
                source="config_file",
                code=error.code,
                reason=error.reason,
                raw=filename,
                audit_log=self._audit_log,
            )
            raise error
        return self._search("Config file", filename, "", filename)

    def validate_name(self, name: str, source: str = "name") -> None:
        """Validate ``name`` under this resolver's policy, logging rejections."""
        try:
            _validate_name(name, self._policy)
        except InvalidNameError as error:
            report_rejection(
                LOGGER,
                category="input_rejected",
                source=source,
                code=error.code,
                reason=error.reason,
                raw=name,
                audit_log=self._audit_log,
            )
            raise

    def clear_root_cache(self) -> None:
        """Forget every discovered workspace root."""
        self._root_cache.clear()

    def _search_roots(self) -> Iterator[Path]:
        try:
            yield self.resolve_local_root()
        except NotInWorkspaceError as error:
            LOGGER.debug("Skipping local root: %s", error.reason)
        yield self.resolve_global_root()

    def _search(self, label: str, identifier: str, subdir: str, filename: str) -> Path:
        attempts: list[SearchAttempt] = []
        for root in self._search_roots():
            probe = probe_in_dir(root, subdir, filename)
            attempts.append(SearchAttempt(candidate=probe.candidate, outcome=probe.outcome))
            if probe.resolved is not None:
                return probe.resolved
        raise NotFoundError(label=label, identifier=identifier, searched=tuple(attempts))


def create_config_paths(
    environ: Mapping[str, str] | None = None,
    overrides: CliOverrides | None = None,
    policy: PlatformPolicy | None = None,
    root_cache: RepoRootCache | None = None,
) -> ConfigPaths:
    """Build a resolver from the effective configuration."""
    env = environ if environ is not None else os.environ
    policy = policy if policy is not None else detect_policy()
    config = load_effective_config(env, overrides=overrides, policy=policy)
    return ConfigPaths(config=config, policy=policy, root_cache=root_cache, environ=env)
