"""Sort Order — pure placement arithmetic for sortIndex within a container.

Invariants:
    - Within a container, tasks are totally ordered by (sort_index, created_at)
    - Every sort_index is a finite number; NaN and infinities are rejected
    - index_between(a, b) returns a value strictly between a and b
    - spaced_indices(n, step) returns n increasing values step apart, starting at step
    - Gaps are expected; nothing here rewrites siblings except renormalization

Design Decisions:
    - Midpoint insertion halves the gap each time; gap_exhausted() reports when a
      container needs renormalization before float precision runs out
"""

import math
from datetime import datetime

from taskboard.core.domain_types import SortIndex
from taskboard.core.errors import FieldValidationError


def check_finite(value: float | None, field: str = "sort_index") -> SortIndex | None:
    """Reject NaN and +/-inf; None passes through as an open side."""
    if value is None:
        return None
    if not math.isfinite(value):
        raise FieldValidationError(f"{field} must be a finite number", field)
    return SortIndex(value)


def append_index(current_max: float | None, step: float) -> SortIndex:
    """Index that places a task after every existing one."""
    current_max = check_finite(current_max)
    if current_max is None:
        return SortIndex(step)
    return SortIndex(current_max + step)


def index_between(
    before: float | None, after: float | None, step: float,
) -> SortIndex:
    """Index strictly between two neighbours; either side may be open."""
    before, after = check_finite(before), check_finite(after)
    if before is None and after is None:
        return SortIndex(step)
    if before is None:
        return SortIndex(after - step)
    if after is None:
        return SortIndex(before + step)
    if not before < after:
        raise FieldValidationError(
            "Neighbour tasks are not in ascending order", "sort_index",
        )
    return SortIndex(before + (after - before) / 2)


def gap_exhausted(
    before: float | None, after: float | None, min_gap: float,
) -> bool:
    """True when the space between two neighbours is below min_gap."""
    before, after = check_finite(before), check_finite(after)
    if before is None or after is None:
        return False
    return (after - before) < min_gap


def spaced_indices(count: int, step: float) -> list[SortIndex]:
    return [SortIndex(step * (i + 1)) for i in range(count)]


def order_key(sort_index: SortIndex, created_at: datetime) -> tuple:
    return (sort_index, created_at)
