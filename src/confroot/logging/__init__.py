"""Structured logging utilities."""

from .audit import (
    JsonlSecurityLog,
    SecurityEvent,
    build_event,
    sanitize_raw_value,
    utc_timestamp,
)
from .logger import get_logger, report_rejection, setup_logging

__all__ = [
    "JsonlSecurityLog",
    "SecurityEvent",
    "build_event",
    "get_logger",
    "report_rejection",
    "sanitize_raw_value",
    "setup_logging",
    "utc_timestamp",
]
