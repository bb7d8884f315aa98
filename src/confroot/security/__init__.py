"""Sandboxing and path safety primitives."""

from .bounds import Probe, probe_in_dir, try_resolve_in_dir, verify_within_directory
from .env_paths import has_suspicious_patterns, validate_env_path
from .names import validate_name
from .platform import (
    WINDOWS_RESERVED_NAMES,
    MacOSPolicy,
    PlatformPolicy,
    PosixPolicy,
    WindowsPolicy,
    detect_policy,
)

__all__ = [
    "MacOSPolicy",
    "PlatformPolicy",
    "PosixPolicy",
    "Probe",
    "WINDOWS_RESERVED_NAMES",
    "WindowsPolicy",
    "detect_policy",
    "has_suspicious_patterns",
    "probe_in_dir",
    "try_resolve_in_dir",
    "validate_env_path",
    "validate_name",
    "verify_within_directory",
]
