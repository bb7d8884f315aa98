"""Structured JSONL audit trail for security rejections."""

from __future__ import annotations

import json
import threading
from collections import deque
from collections.abc import Iterator
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

MAX_RAW_VALUE_CHARS = 256


@dataclass(slots=True, frozen=True)
class SecurityEvent:
    """Sanitized representation of a single rejected input."""

    timestamp: str
    category: str
    source: str
    code: str
    reason: str
    raw_value: str
    raw_length: int


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_raw_value(raw: str) -> str:
    """Render an untrusted value inert for logs: escaped and bounded."""
    rendered = repr(raw)
    if len(rendered) <= MAX_RAW_VALUE_CHARS:
        return rendered
    return rendered[: MAX_RAW_VALUE_CHARS - 3] + "..."


def build_event(category: str, source: str, code: str, reason: str, raw: str) -> SecurityEvent:
    """Build an event stamped with the current time."""
    return SecurityEvent(
        timestamp=utc_timestamp(),
        category=category,
        source=source,
        code=code,
        reason=reason,
        raw_value=sanitize_raw_value(raw),
        raw_length=len(raw),
    )


class JsonlSecurityLog:
    """Append-only JSONL security log and bounded reader."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def append(self, event: SecurityEvent) -> None:
        """Append an event as one JSON object per line."""
        line = json.dumps(asdict(event), sort_keys=True)
        with self._write_lock, self._path.open("a", encoding="utf-8") as handle:
            handle.write(line)
            handle.write("\n")

    def read(self, since: str | None = None, limit: int = 50) -> list[dict[str, object]]:
        """Return the newest ``limit`` events stamped at or after ``since``."""
        if limit < 1:
            return []
        recent: deque[dict[str, object]] = deque(maxlen=limit)
        for event in self._events():
            stamp = event.get("timestamp")
            if since is None or (isinstance(stamp, str) and stamp >= since):
                recent.append(event)
        return list(recent)

    def _events(self) -> Iterator[dict[str, object]]:
        try:
            handle = self._path.open("r", encoding="utf-8")
        except FileNotFoundError:
            return
        with handle:
            for line in handle:
                if not line.strip():
                    continue
                try:
                    event = json.loads(line)
                except json.JSONDecodeError:
                    # Torn line from an interrupted append.
                    continue
                if isinstance(event, dict):
                    yield event
