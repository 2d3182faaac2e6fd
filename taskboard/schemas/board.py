"""Board Schemas — column and card shapes for the Kanban board view."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class AssigneeBadge(BaseModel):
    id: UUID
    name: str
    email: str | None = None
    avatar: str


class BoardCard(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    status: str
    priority: str
    sort_index: float
    due_date: datetime | None = None
    date_label: str
    assignees: list[AssigneeBadge] = []
    time_tracked: int
    attachments: int
    created_at: datetime


class BoardColumn(BaseModel):
    id: UUID
    title: str
    color: str
    is_default: bool
    tasks: list[BoardCard] = []
