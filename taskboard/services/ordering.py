"""Ordering Engine — single move, bulk reorder, in-container reorder, renormalization.

Invariants:
    - Validation of every item (existence, MOVE capability, destination visibility,
      container membership) completes before the first write
    - Writes are independent per-task conditional UPDATEs, each committed on its own;
      the batch as a whole is NOT atomic
    - BulkWriteResult.modified counts rows actually changed; items whose values were
      already in place are not counted; store failures land in `failed`
    - container_id, status, and sort_index always change together
    - A move whose midpoint gap falls below sort_index_min_gap renormalizes the
      destination container first
    - Renormalization respaces every task in the container, never a subset
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy import select, update, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.config import get_settings
from taskboard.core.domain_types import (
    Capability, ContainerId, SortIndex, TaskId, UserId,
)
from taskboard.core.enforce_access import authorize
from taskboard.core.errors import (
    ConflictError, ErrorContext, FieldValidationError, ForbiddenError,
    ResourceNotFoundError,
)
from taskboard.core.sort_order import (
    append_index, check_finite, gap_exhausted, index_between, spaced_indices,
)
from taskboard.models.container import Container
from taskboard.models.task import Task
from taskboard.services.lookups import (
    load_task, max_sort_index, resolve_container, task_access_clause,
)

logger = logging.getLogger(__name__)


@dataclass
class BulkWriteResult:
    """Outcome of a non-atomic batch of per-task conditional writes."""
    requested: int = 0
    modified: int = 0
    failed: list[TaskId] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "requested": self.requested,
            "modified": self.modified,
            "failed": [str(task_id) for task_id in self.failed],
        }


@dataclass
class _PlannedWrite:
    task_id: TaskId
    sort_index: SortIndex
    container_id: ContainerId
    status: str


class OrderingEngine:
    """Sort-order maintenance within and across containers."""

    def __init__(self, db: AsyncSession):
        self.db = db
        settings = get_settings()
        self.step = settings.sort_index_step
        self.min_gap = settings.sort_index_min_gap

    # ─── Single move ─────────────────────────────────────────────

    async def move(
        self,
        task_id: TaskId,
        requester_id: UserId,
        container_id: ContainerId | None = None,
        status: str | None = None,
        sort_index: float | None = None,
        prev_task_id: TaskId | None = None,
        next_task_id: TaskId | None = None,
    ) -> Task:
        """Move a task to a container position.

        The destination is container_id, else the visible container titled
        status, else the current container. Position is sort_index when given,
        otherwise the midpoint between the neighbours prev_task_id/next_task_id,
        otherwise the end of the container.
        """
        sort_index = check_finite(sort_index)
        task = await load_task(self.db, task_id)
        authorize(task, requester_id, Capability.MOVE)
        if container_id is None and status is None:
            container_id = task.container_id
        container = await resolve_container(
            self.db, requester_id, container_id=container_id, status=status,
        )

        unplaced = prev_task_id is None and next_task_id is None
        if sort_index is None and unplaced and container.id == task.container_id:
            sort_index = task.sort_index
        elif sort_index is None:
            sort_index = await self._place(
                task_id, container.id, requester_id, prev_task_id, next_task_id,
            )

        result = await self.db.execute(
            update(Task)
            .where(Task.id == task_id, task_access_clause(requester_id, Capability.MOVE))
            .values(
                container_id=container.id, status=container.title, sort_index=sort_index,
            )
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ForbiddenError(
                "Not authorized to move this task",
                ErrorContext(task_id=str(task_id), user_id=str(requester_id)),
            )
        await self.db.commit()
        logger.info(
            "Task moved",
            extra={"task_id": task_id, "container_id": container.id, "user_id": requester_id},
        )
        return await load_task(self.db, task_id, refresh=True)

    async def _place(
        self,
        task_id: TaskId,
        container_id: ContainerId,
        requester_id: UserId,
        prev_task_id: TaskId | None,
        next_task_id: TaskId | None,
    ) -> float:
        if prev_task_id is None and next_task_id is None:
            return append_index(
                await max_sort_index(self.db, container_id, exclude_task_id=task_id),
                self.step,
            )
        before, after = await self._neighbour_indices(
            container_id, prev_task_id, next_task_id,
        )
        if gap_exhausted(before, after, self.min_gap):
            await self.renormalize(container_id, requester_id)
            before, after = await self._neighbour_indices(
                container_id, prev_task_id, next_task_id, refresh=True,
            )
        return index_between(before, after, self.step)

    async def _neighbour_indices(
        self,
        container_id: ContainerId,
        prev_task_id: TaskId | None,
        next_task_id: TaskId | None,
        refresh: bool = False,
    ) -> tuple[float | None, float | None]:
        indices = []
        for neighbour_id in (prev_task_id, next_task_id):
            if neighbour_id is None:
                indices.append(None)
                continue
            neighbour = await load_task(self.db, neighbour_id, refresh=refresh)
            if neighbour.container_id != container_id:
                raise ConflictError(
                    "Neighbour task is not in the destination container",
                    "NEIGHBOUR_NOT_IN_CONTAINER",
                    ErrorContext(task_id=str(neighbour_id), container_id=str(container_id)),
                )
            indices.append(neighbour.sort_index)
        return indices[0], indices[1]

    # ─── Batches ─────────────────────────────────────────────────

    async def bulk_reorder(
        self, items: list[dict], requester_id: UserId,
    ) -> BulkWriteResult:
        """Apply {task_id, sort_index, container_id?} items, possibly across containers."""
        tasks = await self._load_for_batch(items, requester_id)

        containers: dict[ContainerId, Container] = {}
        for item in items:
            target = item.get("container_id")
            if target is not None and target not in containers:
                containers[target] = await resolve_container(
                    self.db, requester_id, container_id=target,
                )

        plan = []
        for item in items:
            task = tasks[item["task_id"]]
            target = item.get("container_id")
            if target is None:
                plan.append(_PlannedWrite(
                    task.id, check_finite(item["sort_index"]), task.container_id, task.status,
                ))
            else:
                container = containers[target]
                plan.append(_PlannedWrite(
                    task.id, check_finite(item["sort_index"]), container.id, container.title,
                ))
        return await self._apply(plan, requester_id)

    async def reorder_in_container(
        self, container_id: ContainerId, items: list[dict], requester_id: UserId,
    ) -> BulkWriteResult:
        """Apply {task_id, sort_index} items to tasks already in container_id."""
        container = await resolve_container(
            self.db, requester_id, container_id=container_id,
        )
        tasks = await self._load_for_batch(items, requester_id)
        for item in items:
            task = tasks[item["task_id"]]
            if task.container_id != container.id:
                raise ConflictError(
                    f"Task '{task.id}' does not belong to container '{container.id}'",
                    "TASK_NOT_IN_CONTAINER",
                    ErrorContext(task_id=str(task.id), container_id=str(container.id)),
                )
        plan = [
            _PlannedWrite(
                item["task_id"], check_finite(item["sort_index"]),
                container.id, container.title,
            )
            for item in items
        ]
        return await self._apply(plan, requester_id, expected_container=container.id)

    async def renormalize(self, container_id: ContainerId, requester_id: UserId) -> int:
        """Respace every task in a container as step, 2*step, ...

        The whole column is respaced so the relative order seen by every member
        is preserved, including tasks the requester cannot move. Each row is
        rewritten only if its index is still the one read here.
        """
        container = await resolve_container(
            self.db, requester_id, container_id=container_id,
        )
        result = await self.db.execute(
            select(Task.id, Task.sort_index)
            .where(Task.container_id == container.id)
            .order_by(Task.sort_index.asc(), Task.created_at.asc()),
        )
        rows = result.all()
        modified = 0
        for (task_id, old_index), new_index in zip(
            rows, spaced_indices(len(rows), self.step),
        ):
            if old_index == new_index:
                continue
            outcome = await self.db.execute(
                update(Task)
                .where(
                    Task.id == task_id,
                    Task.container_id == container.id,
                    Task.sort_index == old_index,
                )
                .values(sort_index=new_index)
                .execution_options(synchronize_session=False),
            )
            modified += outcome.rowcount
        await self.db.commit()
        logger.info(
            f"Renormalized {modified} task(s)",
            extra={"container_id": container.id, "modified": modified},
        )
        return modified

    async def _load_for_batch(
        self, items: list[dict], requester_id: UserId,
    ) -> dict[TaskId, Task]:
        """Authoritative validation phase: every task exists and is movable."""
        ids = [item["task_id"] for item in items]
        if len(set(ids)) != len(ids):
            raise FieldValidationError("Each task may appear only once", "items")
        if not ids:
            return {}
        result = await self.db.execute(select(Task).where(Task.id.in_(ids)))
        tasks = {t.id: t for t in result.scalars().all()}
        for task_id in ids:
            if task_id not in tasks:
                raise ResourceNotFoundError("Task", str(task_id))
            authorize(tasks[task_id], requester_id, Capability.MOVE)
        return tasks

    async def _apply(
        self,
        plan: list[_PlannedWrite],
        requester_id: UserId,
        expected_container: ContainerId | None = None,
    ) -> BulkWriteResult:
        outcome = BulkWriteResult(requested=len(plan))
        for write in plan:
            conditions = [
                Task.id == write.task_id,
                task_access_clause(requester_id, Capability.MOVE),
                or_(
                    Task.sort_index != write.sort_index,
                    Task.container_id != write.container_id,
                ),
            ]
            if expected_container is not None:
                conditions.append(Task.container_id == expected_container)
            try:
                result = await self.db.execute(
                    update(Task)
                    .where(*conditions)
                    .values(
                        sort_index=write.sort_index,
                        container_id=write.container_id,
                        status=write.status,
                    )
                    .execution_options(synchronize_session=False),
                )
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                outcome.failed.append(write.task_id)
                logger.error(
                    f"Sort update failed: {e}",
                    extra={"task_id": write.task_id, "user_id": requester_id},
                )
                continue
            outcome.modified += result.rowcount
        logger.info(
            "Bulk sort update applied",
            extra={"matched": outcome.requested, "modified": outcome.modified},
        )
        return outcome
