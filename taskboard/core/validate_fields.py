"""Field Validation — pure checks for lengths, enums, and colors.

Invariants:
    - Titles are trimmed before length checks
    - Every failure is a FieldValidationError naming the offending field
"""

import re

from taskboard.core.domain_types import (
    Priority, CONTAINER_TITLE_MAX, TASK_TITLE_MAX, TASK_DESCRIPTION_MAX,
)
from taskboard.core.errors import FieldValidationError

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _require_title(value: str | None, field: str, max_len: int, label: str) -> str:
    title = (value or "").strip()
    if not title:
        raise FieldValidationError(f"Please add a {label}", field)
    if len(title) > max_len:
        raise FieldValidationError(
            f"{label.capitalize()} cannot be more than {max_len} characters", field,
        )
    return title


def normalize_container_title(value: str | None) -> str:
    return _require_title(value, "title", CONTAINER_TITLE_MAX, "section name")


def normalize_task_title(value: str | None) -> str:
    return _require_title(value, "title", TASK_TITLE_MAX, "task title")


def check_description(value: str | None) -> str | None:
    if value is not None and len(value) > TASK_DESCRIPTION_MAX:
        raise FieldValidationError(
            f"Description cannot be more than {TASK_DESCRIPTION_MAX} characters",
            "description",
        )
    return value


def check_color(value: str) -> str:
    if not _HEX_COLOR.match(value):
        raise FieldValidationError(f"Invalid color '{value}'", "color")
    return value.upper()


def parse_priority(value: str | Priority | None) -> Priority:
    if value is None:
        return Priority.NORMAL
    try:
        return Priority(value)
    except ValueError:
        allowed = ", ".join(p.value for p in Priority)
        raise FieldValidationError(
            f"Invalid priority '{value}'. Allowed: {allowed}", "priority",
        )
