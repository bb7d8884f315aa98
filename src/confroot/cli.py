"""Command-line entrypoint printing resolution results as JSON envelopes."""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from confroot.config import CliOverrides
from confroot.errors import (
    ConfrootError,
    EnvironmentUnavailableError,
    NotFoundError,
    NotInWorkspaceError,
    RejectedPathError,
)
from confroot.logging import setup_logging
from confroot.resolver import ConfigPaths, create_config_paths
from confroot.security import validate_env_path

Command = Callable[[ConfigPaths, argparse.Namespace], dict[str, object]]


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for resolver commands."""
    parser = argparse.ArgumentParser(prog="confroot")
    parser.add_argument("--app-name", required=False, default=None)
    parser.add_argument("--local-dir-name", required=False, default=None)
    parser.add_argument(
        "--allow-custom-paths", choices=("true", "false"), required=False, default=None
    )
    parser.add_argument("--audit-log", required=False, default=None)
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        required=False,
        default="WARNING",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("roots", help="Show local and global roots.")
    toolset = commands.add_parser("toolset", help="Resolve a toolset definition.")
    toolset.add_argument("name")
    config_file = commands.add_parser("config-file", help="Resolve a config file.")
    config_file.add_argument("filename")
    check_name = commands.add_parser("check-name", help="Validate a resource name.")
    check_name.add_argument("name")
    check_env = commands.add_parser("check-env", help="Validate a path-valued variable.")
    check_env.add_argument("var")
    check_env.add_argument("value", nargs="?", default=None)
    audit = commands.add_parser("audit", help="Show recent security rejections.")
    audit.add_argument("--since", required=False, default=None)
    audit.add_argument("--limit", type=int, required=False, default=50)
    return parser


def _roots(paths: ConfigPaths, args: argparse.Namespace) -> dict[str, object]:
    local: str | None
    try:
        local = str(paths.resolve_local_root())
    except NotInWorkspaceError:
        local = None
    return {
        "local_root": local,
        "global_root": str(paths.resolve_global_root()),
        "policy": paths.policy.name,
        "config": paths.config.to_public_dict(),
    }


def _toolset(paths: ConfigPaths, args: argparse.Namespace) -> dict[str, object]:
    return {"path": str(paths.resolve_toolset(args.name))}


def _config_file(paths: ConfigPaths, args: argparse.Namespace) -> dict[str, object]:
    return {"path": str(paths.resolve_config_file(args.filename))}


def _check_name(paths: ConfigPaths, args: argparse.Namespace) -> dict[str, object]:
    paths.validate_name(args.name, source="name")
    return {"name": args.name, "valid": True}


def _check_env(paths: ConfigPaths, args: argparse.Namespace) -> dict[str, object]:
    raw = args.value if args.value is not None else os.environ.get(args.var)
    if raw is None:
        raise EnvironmentUnavailableError(
            f"Variable {args.var} is not set.",
            "Pass a value explicitly or export the variable.",
        )
    canonical = validate_env_path(args.var, raw, paths.policy, paths.audit_log)
    return {"var": args.var, "path": str(canonical)}


def _audit(paths: ConfigPaths, args: argparse.Namespace) -> dict[str, object]:
    if paths.audit_log is None:
        raise EnvironmentUnavailableError(
            "No security audit log is configured.",
            "Pass --audit-log or set CONFROOT_AUDIT_LOG.",
        )
    return {
        "path": str(paths.audit_log.path),
        "entries": paths.audit_log.read(since=args.since, limit=args.limit),
    }


COMMANDS: dict[str, Command] = {
    "roots": _roots,
    "toolset": _toolset,
    "config-file": _config_file,
    "check-name": _check_name,
    "check-env": _check_env,
    "audit": _audit,
}


def success_response(result: dict[str, object]) -> dict[str, object]:
    """Build success envelope."""
    return {"ok": True, "result": result}


def error_response(error: ConfrootError) -> dict[str, object]:
    """Build explicit error envelope."""
    result: dict[str, object] = {"hint": error.hint}
    if isinstance(error, NotFoundError):
        result["searched"] = [
            {"candidate": str(attempt.candidate), "outcome": attempt.outcome}
            for attempt in error.searched
        ]
    if isinstance(error, RejectedPathError):
        result["rule"] = error.rule
    return {
        "ok": False,
        "result": result,
        "error": {"code": error.code, "message": error.reason},
    }


def run(paths: ConfigPaths, args: argparse.Namespace) -> dict[str, object]:
    """Execute one parsed command and return its envelope."""
    try:
        return success_response(COMMANDS[args.command](paths, args))
    except ConfrootError as error:
        return error_response(error)


def main(argv: list[str] | None = None, out_stream: TextIO | None = None) -> int:
    """Entrypoint for the confroot command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    allow_custom_paths: bool | None = None
    if args.allow_custom_paths == "true":
        allow_custom_paths = True
    if args.allow_custom_paths == "false":
        allow_custom_paths = False
    overrides = CliOverrides(
        app_name=args.app_name,
        local_dir_name=args.local_dir_name,
        allow_custom_paths=allow_custom_paths,
        audit_log_path=Path(args.audit_log) if args.audit_log is not None else None,
    )
    try:
        paths = create_config_paths(overrides=overrides)
    except ValueError as error:
        parser.error(str(error))
    response = run(paths, args)
    stream = out_stream if out_stream is not None else sys.stdout
    stream.write(f"{json.dumps(response, sort_keys=True)}\n")
    stream.flush()
    return 0 if response["ok"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
