from __future__ import annotations

import io
import json
import logging
import sys
from pathlib import Path

import git
import pytest

from confroot.cli import main

pytestmark = pytest.mark.skipif(
    sys.platform != "linux", reason="exercises the XDG layout of the posix policy"
)


def _project(tmp_path: Path, monkeypatch) -> tuple[Path, Path]:
    home = tmp_path / "home"
    home.mkdir()
    workspace = tmp_path / "project"
    git.Repo.init(workspace).close()
    (workspace / "src").mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("CONFROOT_ALLOW_CUSTOM_PATHS", raising=False)
    monkeypatch.delenv("CONFROOT_AUDIT_LOG", raising=False)
    monkeypatch.chdir(workspace / "src")
    package_logger = logging.getLogger("confroot")
    monkeypatch.setattr(package_logger, "handlers", [])
    monkeypatch.setattr(package_logger, "level", package_logger.level)
    return workspace, home


def _run(argv: list[str]) -> tuple[int, dict[str, object]]:
    out_stream = io.StringIO()
    code = main(argv, out_stream=out_stream)
    lines = [line for line in out_stream.getvalue().splitlines() if line]
    assert len(lines) == 1
    return code, json.loads(lines[0])


def test_toolset_command_prefers_workspace_copy(tmp_path: Path, monkeypatch) -> None:
    workspace, home = _project(tmp_path, monkeypatch)
    local = workspace / ".confroot" / "toolset" / "core.json"
    local.parent.mkdir(parents=True)
    local.write_text("{}", encoding="utf-8")
    global_copy = home / ".config" / "confroot" / "toolset" / "core.json"
    global_copy.parent.mkdir(parents=True)
    global_copy.write_text("{}", encoding="utf-8")

    code, response = _run(["toolset", "core"])

    assert code == 0
    assert response["ok"] is True
    assert response["result"] == {"path": str(local.resolve())}


def test_missing_toolset_reports_search_trail(tmp_path: Path, monkeypatch) -> None:
    workspace, home = _project(tmp_path, monkeypatch)

    code, response = _run(["toolset", "ghost"])

    assert code == 1
    assert response["ok"] is False
    assert response["error"]["code"] == "NOT_FOUND"
    searched = response["result"]["searched"]
    assert [entry["outcome"] for entry in searched] == ["missing", "missing"]
    assert searched[0]["candidate"].endswith(str(Path(".confroot") / "toolset" / "ghost.json"))
    assert searched[1]["candidate"] == str(
        home / ".config" / "confroot" / "toolset" / "ghost.json"
    )


def test_roots_command_reports_both_roots(tmp_path: Path, monkeypatch) -> None:
    workspace, home = _project(tmp_path, monkeypatch)

    code, response = _run(["--app-name", "toolbox", "roots"])

    assert code == 0
    result = response["result"]
    assert Path(result["local_root"]) == workspace.resolve() / ".toolbox"
    assert result["global_root"] == str(home / ".config" / "toolbox")
    assert result["policy"] == "posix"
    assert not (home / ".config").exists()


def test_roots_outside_workspace_has_no_local_root(tmp_path: Path, monkeypatch) -> None:
    _project(tmp_path, monkeypatch)
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)

    code, response = _run(["roots"])

    assert code == 0
    assert response["result"]["local_root"] is None


def test_check_name_rejects_traversal(tmp_path: Path, monkeypatch) -> None:
    _project(tmp_path, monkeypatch)

    code, response = _run(["check-name", "../../etc/passwd"])

    assert code == 1
    assert response["error"]["code"] == "INVALID_NAME"


def test_check_env_rejects_system_directory(tmp_path: Path, monkeypatch) -> None:
    _project(tmp_path, monkeypatch)

    code, response = _run(["check-env", "XDG_CONFIG_HOME", "/etc"])

    assert code == 1
    assert response["error"]["code"] == "BOUNDARY_VIOLATION"
    assert response["result"]["rule"] == "outside_boundary"


def test_check_env_accepts_directory_under_home(tmp_path: Path, monkeypatch) -> None:
    _, home = _project(tmp_path, monkeypatch)
    target = home / "custom"
    target.mkdir()

    code, response = _run(["check-env", "XDG_CONFIG_HOME", str(target)])

    assert code == 0
    assert response["result"] == {"var": "XDG_CONFIG_HOME", "path": str(target.resolve())}


def test_check_env_audit_log_records_rejection(tmp_path: Path, monkeypatch) -> None:
    _, home = _project(tmp_path, monkeypatch)
    audit = home / "audit" / "security.jsonl"

    code, _ = _run(["--audit-log", str(audit), "check-env", "XDG_CONFIG_HOME", "/etc"])

    assert code == 1
    entries = [json.loads(line) for line in audit.read_text(encoding="utf-8").splitlines()]
    assert entries[-1]["source"] == "XDG_CONFIG_HOME"
    assert entries[-1]["category"] == "boundary_violation"


def test_invalid_app_name_is_a_usage_error(tmp_path: Path, monkeypatch) -> None:
    _project(tmp_path, monkeypatch)

    with pytest.raises(SystemExit) as exit_info:
        main(["--app-name", "../escape", "roots"], out_stream=io.StringIO())

    assert exit_info.value.code == 2


def test_audit_command_lists_recent_rejections(tmp_path: Path, monkeypatch) -> None:
    _, home = _project(tmp_path, monkeypatch)
    audit = home / "audit" / "security.jsonl"
    _run(["--audit-log", str(audit), "check-env", "XDG_CONFIG_HOME", "/etc"])
    _run(["--audit-log", str(audit), "check-name", "../x"])

    code, response = _run(["--audit-log", str(audit), "audit", "--limit", "1"])

    assert code == 0
    assert response["result"]["path"] == str(audit.resolve())
    entries = response["result"]["entries"]
    assert len(entries) == 1
    assert entries[0]["source"] == "name"
    assert entries[0]["code"] == "INVALID_NAME"


def test_audit_command_without_log_is_an_error(tmp_path: Path, monkeypatch) -> None:
    _project(tmp_path, monkeypatch)

    code, response = _run(["audit"])

    assert code == 1
    assert response["error"]["code"] == "ENVIRONMENT_UNAVAILABLE"
