"""Dashboard — pure per-requester time and status aggregation.

Invariants:
    - Scoped to the requester's own sessions
    - Per-task total = closed durations + live duration of the active session
    - With no new events, totals grow by exactly the elapsed wall-clock seconds
      (at most one active session per user)
"""

from collections import Counter
from datetime import datetime
from typing import Sequence

from taskboard.core.domain_types import UserId
from taskboard.core.durations import (
    active_session, format_hms, user_total_seconds,
)
from taskboard.core.repository_protocols import TaskLike


def compute_dashboard(
    tasks: Sequence[TaskLike], user_id: UserId, now: datetime,
) -> dict:
    """Summarize visible tasks for user_id at instant now. Pure, no IO."""
    status_counts = Counter(t.status for t in tasks)
    rows = []
    for task in tasks:
        total = user_total_seconds(task.sessions, user_id, now)
        rows.append({
            "task_id": task.id,
            "title": task.title,
            "status": task.status,
            "total_seconds": total,
            "formatted_total": format_hms(total),
            "is_active": active_session(task.sessions, user_id) is not None,
        })
    total_seconds = sum(r["total_seconds"] for r in rows)

    return {
        "total_tasks": len(tasks),
        "status_counts": dict(status_counts),
        "tasks": rows,
        "total_seconds": total_seconds,
        "formatted_total": format_hms(total_seconds),
        "active_sessions": sum(1 for r in rows if r["is_active"]),
    }
