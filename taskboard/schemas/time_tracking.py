"""Time-Tracking Schemas — session views, status, history, dashboard."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from taskboard.core.domain_types import SessionState


class SessionView(BaseModel):
    id: UUID
    start_time: datetime
    end_time: datetime | None = None
    duration: int
    formatted_duration: str
    is_active: bool


class StopResponse(BaseModel):
    session: SessionView
    time_tracked: int


class TimeStatusResponse(BaseModel):
    task_id: UUID
    is_active: bool
    state: SessionState
    active_session: SessionView | None = None
    current_duration: int
    formatted_current_duration: str
    time_tracked: int
    formatted_time_tracked: str
    user_total: int
    formatted_user_total: str


class TimeHistoryResponse(BaseModel):
    task_id: UUID
    task_title: str
    sessions: list[SessionView]
    total_duration: int
    formatted_total_duration: str


class ActiveSessionView(SessionView):
    task_id: UUID
    task_title: str
    task_status: str


class DashboardTaskRow(BaseModel):
    task_id: UUID
    title: str
    status: str
    total_seconds: int
    formatted_total: str
    is_active: bool


class DashboardResponse(BaseModel):
    total_tasks: int
    status_counts: dict[str, int]
    tasks: list[DashboardTaskRow]
    total_seconds: int
    formatted_total: str
    active_sessions: int
