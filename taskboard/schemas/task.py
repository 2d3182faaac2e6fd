"""Task Schemas — CRUD payloads, move/reorder batches, and task responses.

Invariants:
    - TaskCreate.title: 1-100 chars, stripped; description <= 500 chars
    - priority is one of Low / Normal / High
    - Batch requests carry each task at most once (checked again in the service)
    - Every incoming sort_index is finite; NaN and Infinity are rejected
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, field_validator

from taskboard.core.domain_types import (
    Priority, TASK_DESCRIPTION_MAX, TASK_TITLE_MAX,
)


class Attachment(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    url: str = Field(min_length=1, max_length=2000)
    type: str | None = Field(None, max_length=100)
    uploaded_at: datetime | None = None


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=TASK_TITLE_MAX)
    description: str | None = Field(None, max_length=TASK_DESCRIPTION_MAX)
    container_id: UUID | None = None
    status: str | None = None
    priority: Priority = Priority.NORMAL
    due_date: datetime | None = None
    assignees: list[UUID] = []
    labels: list[str] = []
    attachments: list[Attachment] = []
    sort_index: FiniteFloat | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class TaskUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=TASK_TITLE_MAX)
    description: str | None = Field(None, max_length=TASK_DESCRIPTION_MAX)
    container_id: UUID | None = None
    status: str | None = None
    priority: Priority | None = None
    due_date: datetime | None = None
    assignees: list[UUID] | None = None
    labels: list[str] | None = None
    attachments: list[Attachment] | None = None
    sort_index: FiniteFloat | None = None


class TaskMove(BaseModel):
    """Single drag-and-drop move. Position: sort_index, else neighbours, else end."""
    container_id: UUID | None = None
    status: str | None = None
    sort_index: FiniteFloat | None = None
    prev_task_id: UUID | None = None
    next_task_id: UUID | None = None


class BulkSortItem(BaseModel):
    task_id: UUID
    sort_index: FiniteFloat
    container_id: UUID | None = None


class BulkSortRequest(BaseModel):
    tasks: list[BulkSortItem] = Field(min_length=1, max_length=500)


class ContainerReorderItem(BaseModel):
    task_id: UUID
    sort_index: FiniteFloat


class ContainerReorderRequest(BaseModel):
    tasks: list[ContainerReorderItem] = Field(min_length=1, max_length=500)


class BulkWriteResponse(BaseModel):
    requested: int
    modified: int
    failed: list[UUID] = []


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str | None = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    status: str
    container_id: UUID
    priority: str
    due_date: datetime | None = None
    labels: list[str] = []
    sort_index: float
    creator: UserSummary
    assignees: list[UserSummary] = []
    time_tracked: int
    attachments: list[dict] = []
    created_at: datetime
    updated_at: datetime


class TaskStatusChange(BaseModel):
    """Move by status title, as sent by older board clients."""
    status: str = Field(min_length=1)
