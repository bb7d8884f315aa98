from __future__ import annotations

import json
import logging
from pathlib import Path

from confroot.logging import (
    JsonlSecurityLog,
    build_event,
    get_logger,
    report_rejection,
    sanitize_raw_value,
)


def test_sanitize_escapes_control_sequences() -> None:
    rendered = sanitize_raw_value("/tmp/\x1b[31mred\x00")

    assert "\x1b" not in rendered
    assert "\x00" not in rendered
    assert "\\x1b" in rendered


def test_sanitize_bounds_long_values() -> None:
    rendered = sanitize_raw_value("a" * 10_000)

    assert len(rendered) == 256
    assert rendered.endswith("...")


def test_event_records_length_of_raw_value() -> None:
    event = build_event("input_rejected", "toolset", "INVALID_NAME", "bad", "../x")

    assert event.raw_length == 4
    assert event.raw_value == "'../x'"
    assert event.timestamp.endswith("Z")


def test_jsonl_log_appends_one_object_per_line(tmp_path: Path) -> None:
    log = JsonlSecurityLog(tmp_path / "nested" / "security.jsonl")
    log.append(build_event("input_rejected", "A", "PATH_REJECTED", "one", "x"))
    log.append(build_event("boundary_violation", "B", "BOUNDARY_VIOLATION", "two", "y"))

    lines = log.path.read_text(encoding="utf-8").splitlines()

    assert len(lines) == 2
    assert [json.loads(line)["source"] for line in lines] == ["A", "B"]


def test_read_applies_limit_and_since_filter(tmp_path: Path) -> None:
    log = JsonlSecurityLog(tmp_path / "security.jsonl")
    for index in range(5):
        log.append(build_event("input_rejected", f"VAR{index}", "PATH_REJECTED", "r", "v"))
    with log.path.open("a", encoding="utf-8") as handle:
        handle.write("{not-json\n\n")

    recent = log.read(limit=2)
    assert [entry["source"] for entry in recent] == ["VAR3", "VAR4"]
    assert log.read(since="9999") == []
    assert log.read(limit=0) == []


def test_read_of_missing_log_is_empty(tmp_path: Path) -> None:
    log = JsonlSecurityLog(tmp_path / "security.jsonl")

    assert log.read() == []


def test_report_rejection_logs_warning_with_source_and_raw(tmp_path: Path, caplog) -> None:
    logger = get_logger("confroot.tests")
    log = JsonlSecurityLog(tmp_path / "security.jsonl")

    with caplog.at_level(logging.WARNING, logger="confroot"):
        report_rejection(
            logger,
            category="input_rejected",
            source="toolset",
            code="INVALID_NAME",
            reason="contains '..'",
            raw="../../etc",
            audit_log=log,
        )

    assert "Rejecting toolset='../../etc'" in caplog.text
    assert log.read()[0]["code"] == "INVALID_NAME"


def test_get_logger_installs_null_handler_once() -> None:
    logger = get_logger("confroot.tests.null")
    get_logger("confroot.tests.null")

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.NullHandler)
