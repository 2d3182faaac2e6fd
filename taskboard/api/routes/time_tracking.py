"""Time-Tracking Routes — start/stop/status/history per task, active sessions, dashboard.

Invariants:
    - start returns 409 naming the task that already holds the requester's session
    - Durations in responses are live for active sessions (computed with get_clock)
"""

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.dependencies import get_clock, get_requester
from taskboard.infrastructure.database import get_db
from taskboard.infrastructure.identity import Requester
from taskboard.schemas.time_tracking import (
    ActiveSessionView, DashboardResponse, SessionView, StopResponse,
    TimeHistoryResponse, TimeStatusResponse,
)
from taskboard.services.time_tracking import SessionManager, session_view

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["time-tracking"])


@router.post(
    "/tasks/{task_id}/time/start",
    response_model=SessionView, status_code=status.HTTP_201_CREATED,
)
async def start_time_tracking(
    task_id: UUID,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = await SessionManager(db, clock).start(task_id, requester.id)
    return session_view(session, clock())


@router.post("/tasks/{task_id}/time/stop", response_model=StopResponse)
async def stop_time_tracking(
    task_id: UUID,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session, time_tracked = await SessionManager(db, clock).stop(task_id, requester.id)
    return {"session": session_view(session, clock()), "time_tracked": time_tracked}


@router.get("/tasks/{task_id}/time/status", response_model=TimeStatusResponse)
async def time_tracking_status(
    task_id: UUID,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    return await SessionManager(db, clock).status(task_id, requester.id)


@router.get("/tasks/{task_id}/time/history", response_model=TimeHistoryResponse)
async def time_tracking_history(
    task_id: UUID,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    return await SessionManager(db, clock).history(task_id, requester.id)


@router.get(
    "/time-tracking/active-sessions", response_model=list[ActiveSessionView],
)
async def active_sessions(
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    return await SessionManager(db, clock).list_active_across_tasks(requester.id)


@router.get("/time-tracking/dashboard", response_model=DashboardResponse)
async def dashboard(
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    return await SessionManager(db, clock).dashboard(requester.id)
