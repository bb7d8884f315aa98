"""Configuration loading and deterministic merge order."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from confroot.errors import InvalidNameError, RejectedPathError
from confroot.security import PlatformPolicy, validate_env_path, validate_name

DEFAULT_APP_NAME = "confroot"
DEFAULT_TOOLSET_SUBDIR = "toolset"
DEFAULT_TOOLSET_EXTENSION = ".json"

ALLOW_CUSTOM_PATHS_VAR = "CONFROOT_ALLOW_CUSTOM_PATHS"
AUDIT_LOG_VAR = "CONFROOT_AUDIT_LOG"


@dataclass(slots=True, frozen=True)
class ResolverConfig:
    """Fully merged resolver configuration."""

    app_name: str
    local_dir_name: str
    toolset_subdir: str
    toolset_extension: str
    allow_custom_paths: bool
    audit_log_path: Path | None

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for CLI output."""
        return {
            "app_name": self.app_name,
            "local_dir_name": self.local_dir_name,
            "toolset_subdir": self.toolset_subdir,
            "toolset_extension": self.toolset_extension,
            "allow_custom_paths": self.allow_custom_paths,
            "audit_log_path": str(self.audit_log_path) if self.audit_log_path else None,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    app_name: str | None = None
    local_dir_name: str | None = None
    allow_custom_paths: bool | None = None
    audit_log_path: Path | None = None


def default_config(app_name: str = DEFAULT_APP_NAME) -> ResolverConfig:
    """Build default config for an application name."""
    return ResolverConfig(
        app_name=app_name,
        local_dir_name=f".{app_name}",
        toolset_subdir=DEFAULT_TOOLSET_SUBDIR,
        toolset_extension=DEFAULT_TOOLSET_EXTENSION,
        allow_custom_paths=False,
        audit_log_path=None,
    )


def load_environment_payload(
    environ: Mapping[str, str], policy: PlatformPolicy | None = None
) -> dict[str, object]:
    """Read resolver settings from the environment.

    The audit log location is untrusted input like any other path variable;
    a rejected value is dropped (the rejection itself is logged).
    """
    payload: dict[str, object] = {}
    if ALLOW_CUSTOM_PATHS_VAR in environ:
        payload["allow_custom_paths"] = _env_flag(environ[ALLOW_CUSTOM_PATHS_VAR])
    raw_audit = environ.get(AUDIT_LOG_VAR)
    if raw_audit:
        try:
            payload["audit_log_path"] = validate_env_path(AUDIT_LOG_VAR, raw_audit, policy)
        except RejectedPathError:
            pass
    return payload


def _env_flag(value: str) -> bool:
    return value == "1" or value.lower() == "true"


def merge_config(
    base: ResolverConfig,
    env_payload: Mapping[str, object],
    overrides: CliOverrides,
    policy: PlatformPolicy | None = None,
) -> ResolverConfig:
    """Merge defaults, environment payload, then CLI/startup overrides."""
    allow_custom_paths = base.allow_custom_paths
    if "allow_custom_paths" in env_payload:
        raw_allow = env_payload["allow_custom_paths"]
        if not isinstance(raw_allow, bool):
            raise ValueError("Config field 'allow_custom_paths' must be a boolean.")
        allow_custom_paths = raw_allow

    audit_log_path = base.audit_log_path
    if "audit_log_path" in env_payload:
        raw_audit = env_payload["audit_log_path"]
        if not isinstance(raw_audit, Path):
            raise ValueError("Config field 'audit_log_path' must be a path.")
        audit_log_path = raw_audit

    merged = ResolverConfig(
        app_name=base.app_name,
        local_dir_name=base.local_dir_name,
        toolset_subdir=base.toolset_subdir,
        toolset_extension=base.toolset_extension,
        allow_custom_paths=allow_custom_paths,
        audit_log_path=audit_log_path,
    )
    return apply_cli_overrides(merged, overrides, policy)


def apply_cli_overrides(
    config: ResolverConfig, overrides: CliOverrides, policy: PlatformPolicy | None = None
) -> ResolverConfig:
    """Apply startup overrides at highest precedence."""
    app_name = _plain_segment(overrides.app_name, "app_name", config.app_name, policy)
    local_dir_name = config.local_dir_name
    if overrides.local_dir_name is not None:
        local_dir_name = overrides.local_dir_name
    elif overrides.app_name is not None:
        local_dir_name = f".{app_name}"
    if not local_dir_name.startswith(".") or local_dir_name in (".", ".."):
        raise ValueError("Config field 'local_dir_name' must be a hidden directory name.")
    _plain_segment(local_dir_name[1:], "local_dir_name", local_dir_name, policy)

    return ResolverConfig(
        app_name=app_name,
        local_dir_name=local_dir_name,
        toolset_subdir=config.toolset_subdir,
        toolset_extension=config.toolset_extension,
        allow_custom_paths=(
            overrides.allow_custom_paths
            if overrides.allow_custom_paths is not None
            else config.allow_custom_paths
        ),
        audit_log_path=(
            overrides.audit_log_path.resolve()
            if overrides.audit_log_path is not None
            else config.audit_log_path
        ),
    )


def load_effective_config(
    environ: Mapping[str, str],
    overrides: CliOverrides | None = None,
    policy: PlatformPolicy | None = None,
) -> ResolverConfig:
    """Load effective config using merge order defaults -> environment -> overrides."""
    base = default_config()
    payload = load_environment_payload(environ, policy)
    return merge_config(base, payload, overrides or CliOverrides(), policy)


def _plain_segment(
    value: str | None, name: str, default: str, policy: PlatformPolicy | None
) -> str:
    if value is None:
        return default
    try:
        validate_name(value, policy)
    except InvalidNameError as error:
        raise ValueError(f"Config field '{name}' is invalid: {error.reason}") from error
    return value
