"""Board Projection — pure container-grouped, ordered, display-annotated board view.

Invariants:
    - Input containers are already visible to the requester and already ordered
    - Each column lists its tasks by (sort_index, created_at) ascending
    - Tasks whose container is not among the input containers appear in no column
    - Never mutates its inputs

Design Decisions:
    - Avatar color hashes the display name with the 31-multiplier string hash over
      UTF-16 code units, so names keep the buckets existing clients already show
"""

from datetime import datetime
from typing import Sequence

from taskboard.core.domain_types import ContainerId
from taskboard.core.durations import ensure_utc
from taskboard.core.repository_protocols import ContainerLike, TaskLike
from taskboard.core.sort_order import order_key

AVATAR_PALETTE = (
    "bg-blue-500",
    "bg-green-500",
    "bg-purple-500",
    "bg-pink-500",
    "bg-orange-500",
    "bg-indigo-500",
    "bg-red-500",
    "bg-yellow-500",
    "bg-teal-500",
    "bg-cyan-500",
)

NO_DUE_DATE = "No due date"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def name_hash(name: str) -> int:
    """hash = code + ((hash << 5) - hash) over UTF-16 code units."""
    h = 0
    data = name.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = int.from_bytes(data[i:i + 2], "little")
        h = unit + (_to_int32(_to_int32(h) << 5) - h)
    return h


def avatar_color(name: str) -> str:
    return AVATAR_PALETTE[abs(name_hash(name or "")) % len(AVATAR_PALETTE)]


def format_due_date(due: datetime) -> str:
    """Short US style, e.g. 'Oct 18, 26'."""
    due = ensure_utc(due)
    return f"{due:%b} {due.day}, {due:%y}"


def due_date_label(due: datetime | None, now: datetime) -> str:
    if due is None:
        return NO_DUE_DATE
    formatted = format_due_date(due)
    if ensure_utc(due) < ensure_utc(now):
        return f"Overdue: {formatted}"
    return formatted


def task_card(task: TaskLike, now: datetime) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": task.status,
        "priority": task.priority,
        "sort_index": task.sort_index,
        "due_date": task.due_date,
        "date_label": due_date_label(task.due_date, now),
        "assignees": [
            {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "avatar": avatar_color(user.name),
            }
            for user in task.assignees
        ],
        "time_tracked": task.time_tracked,
        "attachments": len(task.attachments or []),
        "created_at": task.created_at,
    }


def project_board(
    containers: Sequence[ContainerLike],
    tasks: Sequence[TaskLike],
    now: datetime,
) -> list[dict]:
    """Partition tasks by container and order each partition."""
    columns: dict[ContainerId, list[TaskLike]] = {c.id: [] for c in containers}
    for task in tasks:
        if task.container_id in columns:
            columns[task.container_id].append(task)

    board = []
    for container in containers:
        ordered = sorted(
            columns[container.id],
            key=lambda t: order_key(t.sort_index, ensure_utc(t.created_at)),
        )
        board.append({
            "id": container.id,
            "title": container.title,
            "color": container.color,
            "is_default": container.is_default,
            "tasks": [task_card(t, now) for t in ordered],
        })
    return board
