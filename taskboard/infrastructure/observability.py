"""Structured Logging — board-aware JSON and console formatters.

Invariants:
    - Every JSON line carries timestamp, level, logger, and message
    - Board context (task, container, user, error code) and batch counters
      (matched, modified) are emitted only when the record carries them
    - Ids are written as strings, counters and durations stay numeric
    - setup_logging replaces handlers it installed earlier instead of stacking them
"""

import logging
import json
from datetime import datetime, timezone

CONTEXT_FIELDS = ("task_id", "container_id", "user_id", "error_code", "path")
COUNTER_FIELDS = ("matched", "modified", "duration")


def board_context(record: logging.LogRecord) -> dict:
    """Collect the board fields attached to a record via `extra=`."""
    context = {}
    for key in CONTEXT_FIELDS:
        val = record.__dict__.get(key)
        if val is not None:
            context[key] = str(val)
    for key in COUNTER_FIELDS:
        val = record.__dict__.get(key)
        if isinstance(val, (int, float)):
            context[key] = val
    return context


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **board_context(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines with board context appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = board_context(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return line


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure root logging for the taskboard service."""
    for existing in list(logging.root.handlers):
        if getattr(existing, "_taskboard", False):
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler._taskboard = True
    handler.setFormatter(JSONFormatter() if fmt == "json" else ConsoleFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
