"""Time-Tracking Session Manager — start/stop sessions, live and historical durations.

Invariants:
    - Per (task, user): NoSession -> Active -> Closed
    - At most one active session per user across ALL tasks; the partial unique
      index on tracked_sessions(user_id) WHERE is_active is the authoritative
      compare-and-set, the pre-insert read only makes the error precise
    - stop() closes via UPDATE ... WHERE is_active, then increments
      tasks.time_tracked in SQL; a lost race yields NoActiveSessionError
    - Live durations (now - start_time) are computed on read, never persisted
    - now comes from the injected clock
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.dashboard import compute_dashboard
from taskboard.core.domain_types import Capability, Seconds, TaskId, UserId
from taskboard.core.durations import (
    active_session, closing_values, elapsed_seconds, ensure_utc, format_hms,
    session_seconds, session_state, user_sessions, user_total_seconds, utc_now,
)
from taskboard.core.enforce_access import authorize
from taskboard.core.errors import (
    ActiveSessionExistsError, ConflictError, NoActiveSessionError,
)
from taskboard.models.task import Task
from taskboard.models.tracked_session import TrackedSession
from taskboard.services.lookups import load_task, task_access_clause

logger = logging.getLogger(__name__)


class SessionManager:
    """Time-tracking sessions with the single-active-session-per-user rule."""

    def __init__(
        self, db: AsyncSession, clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.clock = clock

    async def start(self, task_id: TaskId, requester_id: UserId) -> TrackedSession:
        task = await load_task(self.db, task_id)
        authorize(task, requester_id, Capability.TRACK_TIME)

        holder = await self._active_holder(requester_id)
        if holder is not None:
            raise ActiveSessionExistsError(
                str(holder[0].task_id), holder[1],
                same_task=holder[0].task_id == task_id,
            )

        session = TrackedSession(
            task_id=task_id,
            user_id=requester_id,
            start_time=self.clock(),
            duration=0,
            is_active=True,
        )
        self.db.add(session)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            holder = await self._active_holder(requester_id)
            if holder is None:
                raise ConflictError(
                    "Time tracking could not be started", "ACTIVE_SESSION_RACE",
                )
            raise ActiveSessionExistsError(
                str(holder[0].task_id), holder[1],
                same_task=holder[0].task_id == task_id,
            )
        logger.info(
            "Time tracking started",
            extra={"task_id": task_id, "user_id": requester_id},
        )
        return session

    async def stop(self, task_id: TaskId, requester_id: UserId) -> tuple[TrackedSession, Seconds]:
        """Close the requester's active session. Returns (session, task time_tracked)."""
        await load_task(self.db, task_id)
        result = await self.db.execute(
            select(TrackedSession).where(
                TrackedSession.task_id == task_id,
                TrackedSession.user_id == requester_id,
                TrackedSession.is_active.is_(True),
            ),
        )
        session = result.scalar_one_or_none()
        if session is None:
            raise NoActiveSessionError(str(task_id))

        end_time, duration = closing_values(session.start_time, self.clock())
        closed = await self.db.execute(
            update(TrackedSession)
            .where(
                TrackedSession.id == session.id,
                TrackedSession.is_active.is_(True),
            )
            .values(is_active=False, end_time=end_time, duration=duration)
            .execution_options(synchronize_session=False),
        )
        if closed.rowcount == 0:
            await self.db.rollback()
            raise NoActiveSessionError(str(task_id))
        await self.db.execute(
            update(Task)
            .where(Task.id == task_id)
            .values(time_tracked=Task.time_tracked + duration)
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        await self.db.refresh(session)
        task = await load_task(self.db, task_id, refresh=True)
        logger.info(
            "Time tracking stopped",
            extra={"task_id": task_id, "user_id": requester_id, "duration": duration},
        )
        return session, task.time_tracked

    async def status(self, task_id: TaskId, requester_id: UserId) -> dict:
        task = await load_task(self.db, task_id)
        authorize(task, requester_id, Capability.VIEW)
        now = self.clock()
        active = active_session(task.sessions, requester_id)
        current = elapsed_seconds(active.start_time, now) if active else 0
        own_total = user_total_seconds(task.sessions, requester_id, now)
        return {
            "task_id": task.id,
            "is_active": active is not None,
            "state": session_state(task.sessions, requester_id),
            "active_session": session_view(active, now) if active else None,
            "current_duration": current,
            "formatted_current_duration": format_hms(current),
            "time_tracked": task.time_tracked,
            "formatted_time_tracked": format_hms(task.time_tracked),
            "user_total": own_total,
            "formatted_user_total": format_hms(own_total),
        }

    async def history(self, task_id: TaskId, requester_id: UserId) -> dict:
        task = await load_task(self.db, task_id)
        authorize(task, requester_id, Capability.VIEW)
        now = self.clock()
        entries = [
            session_view(s, now)
            for s in sorted(
                user_sessions(task.sessions, requester_id),
                key=lambda s: ensure_utc(s.start_time),
            )
        ]
        total = sum(e["duration"] for e in entries)
        return {
            "task_id": task.id,
            "task_title": task.title,
            "sessions": entries,
            "total_duration": total,
            "formatted_total_duration": format_hms(total),
        }

    async def list_active_across_tasks(self, requester_id: UserId) -> list[dict]:
        now = self.clock()
        result = await self.db.execute(
            select(TrackedSession, Task.title, Task.status)
            .join(Task, Task.id == TrackedSession.task_id)
            .where(
                TrackedSession.user_id == requester_id,
                TrackedSession.is_active.is_(True),
                task_access_clause(requester_id, Capability.VIEW),
            ),
        )
        return [
            {
                **session_view(session, now),
                "task_id": session.task_id,
                "task_title": title,
                "task_status": status,
            }
            for session, title, status in result.all()
        ]

    async def dashboard(self, requester_id: UserId) -> dict:
        result = await self.db.execute(
            select(Task)
            .where(task_access_clause(requester_id, Capability.VIEW))
            .order_by(Task.created_at.desc()),
        )
        return compute_dashboard(
            list(result.scalars().all()), requester_id, self.clock(),
        )

    async def _active_holder(
        self, user_id: UserId,
    ) -> tuple[TrackedSession, str] | None:
        """Indexed read of the user's active session, with its task title."""
        result = await self.db.execute(
            select(TrackedSession, Task.title)
            .join(Task, Task.id == TrackedSession.task_id)
            .where(
                TrackedSession.user_id == user_id,
                TrackedSession.is_active.is_(True),
            )
            .limit(1),
        )
        row = result.first()
        return (row[0], row[1]) if row else None


def session_view(session: TrackedSession, now: datetime) -> dict:
    duration = session_seconds(session, now)
    return {
        "id": session.id,
        "start_time": session.start_time,
        "end_time": session.end_time,
        "duration": duration,
        "formatted_duration": format_hms(duration),
        "is_active": session.is_active,
    }
