"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Task is the owner of its tracked sessions; containers are referenced by id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from taskboard.models.user import User  # noqa: F401
from taskboard.models.container import Container  # noqa: F401
from taskboard.models.task import Task, task_assignees  # noqa: F401
from taskboard.models.tracked_session import TrackedSession  # noqa: F401
