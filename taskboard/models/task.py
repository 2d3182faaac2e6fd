"""Task ORM — a board card owned by its creator, shared with assignees.

Invariants:
    - container_id references a container visible to creator at assignment time
    - status mirrors the container title at assignment time (denormalized)
    - sort_index orders tasks within a container; gaps allowed
    - time_tracked only grows, and only when a session closes

Design Decisions:
    - Assignees through an association table: membership filters stay in SQL
    - labels/attachments as JSON: no query ever filters on their contents
    - sessions cascade with the task; they are never deleted on their own
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, Float, Integer, DateTime, JSON, ForeignKey, Table, Column, Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from taskboard.db.base import Base


task_assignees = Table(
    "task_assignees",
    Base.metadata,
    Column(
        "task_id", UUID(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "user_id", UUID(as_uuid=True),
        ForeignKey("users.id"), primary_key=True, index=True,
    ),
)


class Task(Base):
    """Task entity — a card on the board."""
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_container_sort", "container_id", "sort_index"),
        Index("ix_tasks_creator", "creator_id"),
        Index("ix_tasks_due_date", "due_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    container_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("containers.id"), nullable=False,
    )
    priority: Mapped[str] = mapped_column(
        String(10), nullable=False, default="Normal",
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    labels: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    sort_index: Mapped[float] = mapped_column(Float, nullable=False)
    creator_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    time_tracked: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    attachments: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    creator: Mapped["User"] = relationship("User", lazy="selectin")
    assignees: Mapped[list["User"]] = relationship(
        "User", secondary=task_assignees, lazy="selectin",
    )
    sessions: Mapped[list["TrackedSession"]] = relationship(
        "TrackedSession", back_populates="task",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="TrackedSession.start_time",
    )

    @property
    def assignee_ids(self) -> set[uuid.UUID]:
        return {u.id for u in self.assignees}
