"""Task Store — create, read, update, delete, and list tasks.

Invariants:
    - Visible set = created by requester ∪ assigned to requester
    - get: NotFound, then Forbidden unless creator or assignee
    - update/delete: creator only; update is a conditional write on creator_id
    - container_id/status are re-resolved against the requester's visible
      containers whenever either changes; status always mirrors the container title
    - list filters intersect the visible set; newest first
"""

import logging
from datetime import datetime

from sqlalchemy import select, update, delete, insert, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.config import get_settings
from taskboard.core.domain_types import Capability, TaskId, UserId
from taskboard.core.durations import utc_now
from taskboard.core.enforce_access import authorize
from taskboard.core.errors import ResourceNotFoundError, ForbiddenError, ErrorContext
from taskboard.core.sort_order import append_index, check_finite
from taskboard.core.validate_fields import (
    normalize_task_title, check_description, parse_priority,
)
from taskboard.models.task import Task, task_assignees
from taskboard.services.lookups import (
    assigned_task_ids, load_task, load_users, max_sort_index,
    resolve_container, task_access_clause,
)

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = ("due_date",)


def _like_pattern(text: str) -> str:
    escaped = text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class TaskStore:
    """Task persistence guarded by creator/assignee access rules."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, fields: dict, requester_id: UserId) -> Task:
        container = await resolve_container(
            self.db, requester_id,
            container_id=fields.get("container_id"),
            status=fields.get("status"),
        )
        assignees = await load_users(self.db, fields.get("assignees") or [])
        sort_index = check_finite(fields.get("sort_index"))
        if sort_index is None:
            sort_index = append_index(
                await max_sort_index(self.db, container.id),
                get_settings().sort_index_step,
            )

        task = Task(
            title=normalize_task_title(fields.get("title")),
            description=check_description(fields.get("description")),
            status=container.title,
            container_id=container.id,
            priority=parse_priority(fields.get("priority")).value,
            due_date=fields.get("due_date"),
            labels=list(fields.get("labels") or []),
            attachments=_with_upload_time(fields.get("attachments") or []),
            sort_index=sort_index,
            creator_id=requester_id,
            time_tracked=0,
        )
        task.assignees = assignees
        self.db.add(task)
        await self.db.commit()
        logger.info(
            f"Task '{task.title}' created",
            extra={"task_id": task.id, "container_id": container.id, "user_id": requester_id},
        )
        return await load_task(self.db, task.id, refresh=True)

    async def get(self, task_id: TaskId, requester_id: UserId) -> Task:
        task = await load_task(self.db, task_id)
        authorize(task, requester_id, Capability.VIEW)
        return task

    async def update(self, task_id: TaskId, patch: dict, requester_id: UserId) -> Task:
        task = await load_task(self.db, task_id)
        authorize(task, requester_id, Capability.EDIT)

        values: dict = {}
        if "title" in patch:
            values["title"] = normalize_task_title(patch["title"])
        if "description" in patch:
            values["description"] = check_description(patch["description"])
        if patch.get("priority") is not None:
            values["priority"] = parse_priority(patch["priority"]).value
        for name in _SCALAR_FIELDS:
            if name in patch:
                values[name] = patch[name]
        if "attachments" in patch:
            values["attachments"] = _with_upload_time(patch["attachments"] or [])
        if "labels" in patch:
            values["labels"] = list(patch["labels"] or [])

        container_changed = (
            patch.get("container_id") is not None or patch.get("status") is not None
        )
        if container_changed:
            container = await resolve_container(
                self.db, requester_id,
                container_id=patch.get("container_id"),
                status=patch.get("status"),
            )
            values["container_id"] = container.id
            values["status"] = container.title
            if container.id != task.container_id and patch.get("sort_index") is None:
                values["sort_index"] = append_index(
                    await max_sort_index(self.db, container.id, exclude_task_id=task.id),
                    get_settings().sort_index_step,
                )
        if patch.get("sort_index") is not None:
            values["sort_index"] = check_finite(patch["sort_index"])

        new_assignees = None
        if "assignees" in patch:
            new_assignees = await load_users(self.db, patch["assignees"] or [])

        values["updated_at"] = utc_now()
        result = await self.db.execute(
            update(Task)
            .where(Task.id == task_id, Task.creator_id == requester_id)
            .values(**values)
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            await self._classify_miss(task_id, requester_id)

        if new_assignees is not None:
            await self.db.execute(
                delete(task_assignees).where(task_assignees.c.task_id == task_id),
            )
            if new_assignees:
                await self.db.execute(
                    insert(task_assignees),
                    [{"task_id": task_id, "user_id": u.id} for u in new_assignees],
                )
        await self.db.commit()
        return await load_task(self.db, task_id, refresh=True)

    async def delete(self, task_id: TaskId, requester_id: UserId) -> None:
        task = await load_task(self.db, task_id)
        authorize(task, requester_id, Capability.DELETE)
        await self.db.delete(task)
        await self.db.commit()
        logger.info("Task deleted", extra={"task_id": task_id, "user_id": requester_id})

    async def list_visible(
        self,
        requester_id: UserId,
        status: str | None = None,
        priority: str | None = None,
        assignee_id: UserId | None = None,
        search: str | None = None,
    ) -> list[Task]:
        query = select(Task).where(task_access_clause(requester_id, Capability.VIEW))
        if status and status != "All":
            query = query.where(Task.status == status)
        if priority and priority != "All":
            query = query.where(Task.priority == parse_priority(priority).value)
        if assignee_id is not None:
            query = query.where(Task.id.in_(assigned_task_ids(assignee_id)))
        if search:
            pattern = _like_pattern(search)
            query = query.where(or_(
                func.lower(Task.title).like(pattern, escape="\\"),
                func.lower(func.coalesce(Task.description, "")).like(pattern, escape="\\"),
            ))
        result = await self.db.execute(query.order_by(Task.created_at.desc()))
        return list(result.scalars().all())

    async def _classify_miss(self, task_id: TaskId, requester_id: UserId) -> None:
        result = await self.db.execute(
            select(Task.creator_id).where(Task.id == task_id),
        )
        creator_id = result.scalar_one_or_none()
        if creator_id is None:
            raise ResourceNotFoundError("Task", str(task_id))
        raise ForbiddenError(
            "Only the task creator can modify this task",
            ErrorContext(task_id=str(task_id), user_id=str(requester_id)),
        )


def _with_upload_time(attachments: list[dict]) -> list[dict]:
    stamped = []
    for item in attachments:
        entry = {
            key: value.isoformat() if isinstance(value, datetime) else value
            for key, value in dict(item).items() if value is not None
        }
        entry.setdefault("uploaded_at", utc_now().isoformat())
        stamped.append(entry)
    return stamped
