"""TrackedSession ORM — one contiguous interval of a user's time on a task.

Invariants:
    - Append-only per task: created on start, closed on stop, never deleted alone
    - At most one row with is_active per user_id across ALL tasks
      (partial unique index ux_tracked_sessions_one_active_per_user)
    - Closed rows: end_time >= start_time, duration = whole seconds between them

Design Decisions:
    - Own table instead of an array on the task: the active-session lookup is an
      indexed read on (user_id, is_active), and the partial unique index is the
      compare-and-set for the global single-active-session invariant
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Integer, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from taskboard.db.base import Base


class TrackedSession(Base):
    """Time-tracking session entity."""
    __tablename__ = "tracked_sessions"
    __table_args__ = (
        Index(
            "ux_tracked_sessions_one_active_per_user", "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
        Index("ix_tracked_sessions_task_user", "task_id", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    task_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )

    # Relationships
    task: Mapped["Task"] = relationship("Task", back_populates="sessions")
