"""Structured logging — JSON formatter surfaces board context fields."""

import json
import logging
from datetime import datetime, timezone
from uuid import uuid4

from taskboard.infrastructure.observability import (
    ConsoleFormatter, JSONFormatter, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "taskboard.services.ordering", logging.INFO, __file__, 1,
        "Bulk sort update applied", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_context_fields():
    task_id = uuid4()
    line = JSONFormatter().format(_record(task_id=task_id, matched=3, modified=2))
    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["message"] == "Bulk sort update applied"
    assert payload["task_id"] == str(task_id)
    assert payload["matched"] == 3
    assert payload["modified"] == 2


def test_json_formatter_omits_absent_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert "task_id" not in payload
    assert "error_code" not in payload


def test_json_formatter_uses_record_time():
    record = _record()
    payload = json.loads(JSONFormatter().format(record))
    assert payload["timestamp"] == (
        datetime.fromtimestamp(record.created, timezone.utc).isoformat()
    )


def test_console_formatter_appends_board_context():
    container_id = uuid4()
    line = ConsoleFormatter().format(_record(container_id=container_id, modified=3))
    assert line.endswith(f"[container_id={container_id} modified=3]")
    assert "Bulk sort update applied" in line


def test_console_formatter_without_context_has_no_suffix():
    assert not ConsoleFormatter().format(_record()).endswith("]")


def test_setup_logging_does_not_stack_handlers():
    before = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("INFO", "console")
        installed = [h for h in logging.root.handlers if h not in before]
        assert len(installed) == 1
        assert isinstance(installed[0].formatter, ConsoleFormatter)
        assert logging.root.level == logging.INFO
    finally:
        for handler in list(logging.root.handlers):
            if handler not in before:
                logging.root.removeHandler(handler)
        logging.root.setLevel(level)
