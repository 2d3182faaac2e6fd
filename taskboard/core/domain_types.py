"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TaskId, ContainerId, UserId, TrackedSessionId wrap UUIDs
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

TaskId = NewType("TaskId", UUID)
ContainerId = NewType("ContainerId", UUID)
UserId = NewType("UserId", UUID)
TrackedSessionId = NewType("TrackedSessionId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

SortIndex = NewType("SortIndex", float)
Seconds = NewType("Seconds", int)   # whole seconds, >= 0


# ─── Limits ──────────────────────────────────────────────────────

CONTAINER_TITLE_MAX = 50
TASK_TITLE_MAX = 100
TASK_DESCRIPTION_MAX = 500


# ─── Enums ───────────────────────────────────────────────────────

class Priority(str, Enum):
    """Task priority — maps to DB `priority` column."""
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"


class Capability(str, Enum):
    """What a requester wants to do with a task."""
    VIEW = "view"
    MOVE = "move"
    TRACK_TIME = "track_time"
    EDIT = "edit"
    DELETE = "delete"


class SessionState(str, Enum):
    """Per (task, user) time-tracking state."""
    NO_SESSION = "no_session"
    ACTIVE = "active"
    CLOSED = "closed"


# Capabilities granted to assignees; everything else is creator-only
ASSIGNEE_CAPABILITIES = frozenset(
    {Capability.VIEW, Capability.MOVE, Capability.TRACK_TIME},
)
