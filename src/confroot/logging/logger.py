"""Library logger helpers built on the standard ``logging`` module."""

from __future__ import annotations

import logging
import sys

from confroot.logging.audit import JsonlSecurityLog, build_event

PACKAGE_LOGGER = "confroot"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger that stays silent until the application configures one."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger


def setup_logging(level: int | str = logging.WARNING) -> None:
    """Attach a stderr handler to the package logger. Call once at startup."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.StreamHandler):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)


def report_rejection(
    logger: logging.Logger,
    *,
    category: str,
    source: str,
    code: str,
    reason: str,
    raw: str,
    audit_log: JsonlSecurityLog | None = None,
) -> None:
    """Log a security rejection at WARNING and mirror it to the audit log."""
    logger.warning("Rejecting %s=%r: %s", source, raw, reason)
    if audit_log is not None:
        audit_log.append(build_event(category, source, code, reason, raw))
