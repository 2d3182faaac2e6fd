"""Container ORM — a named, colored board section that groups tasks.

Invariants:
    - Defaults have owner_id NULL and is_default True; they are never updated or deleted
    - Customs always carry owner_id
    - title is 1-50 chars (trimmed)

Design Decisions:
    - Defaults and customs share one table: list() is a single ordered query
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from taskboard.db.base import Base


class Container(Base):
    """Board container (status / section)."""
    __tablename__ = "containers"
    __table_args__ = (
        Index("ix_containers_owner_default", "owner_id", "is_default"),
        Index(
            "ux_containers_default_title", "title",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default = 1"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(
        String(7), nullable=False, default="#3B82F6",
    )
    is_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True,
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
