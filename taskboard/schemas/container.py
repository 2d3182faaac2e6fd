"""Container Schemas — section create/update payloads and responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.core.domain_types import CONTAINER_TITLE_MAX

_COLOR = r"^#[0-9A-Fa-f]{6}$"


class ContainerCreate(BaseModel):
    title: str = Field(min_length=1, max_length=CONTAINER_TITLE_MAX)
    color: str | None = Field(None, pattern=_COLOR)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class ContainerUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=CONTAINER_TITLE_MAX)
    color: str | None = Field(None, pattern=_COLOR)


class ContainerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    color: str
    is_default: bool
    owner_id: UUID | None = None
    created_at: datetime
