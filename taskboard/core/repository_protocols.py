"""Boundary Protocols — structural contracts between core and shell.

Invariants:
    - Core NEVER imports from services/, api/, models/ — dependency arrows point inward only
    - Pure functions in core/ accept anything shaped like these protocols
      (ORM rows in production, plain objects in tests)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
"""

from datetime import datetime
from typing import Protocol, Sequence

from taskboard.core.domain_types import (
    ContainerId, Seconds, SortIndex, TaskId, TrackedSessionId, UserId,
)


class UserLike(Protocol):
    id: UserId
    name: str
    email: str | None


class ContainerLike(Protocol):
    id: ContainerId
    title: str
    color: str
    is_default: bool
    owner_id: UserId | None
    created_at: datetime


class SessionLike(Protocol):
    """One tracked interval."""
    id: TrackedSessionId
    task_id: TaskId
    user_id: UserId
    start_time: datetime
    end_time: datetime | None
    duration: Seconds
    is_active: bool


class TaskLike(Protocol):
    id: TaskId
    title: str
    description: str | None
    status: str
    container_id: ContainerId
    priority: str
    due_date: datetime | None
    sort_index: SortIndex
    creator_id: UserId
    time_tracked: Seconds
    attachments: list
    created_at: datetime
    assignees: Sequence[UserLike]
    sessions: Sequence[SessionLike]

    @property
    def assignee_ids(self) -> set[UserId]: ...
