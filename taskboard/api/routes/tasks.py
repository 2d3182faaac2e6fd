"""Task Routes — CRUD, single move, bulk sort update, in-container reorder.

Invariants:
    - Static paths (/bulk-sort-update, /container/...) registered before /{task_id}
    - Bulk endpoints always report how many tasks were actually modified
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.dependencies import get_requester
from taskboard.infrastructure.database import get_db
from taskboard.infrastructure.identity import Requester
from taskboard.schemas.task import (
    BulkSortRequest, BulkWriteResponse, ContainerReorderRequest, TaskCreate,
    TaskMove, TaskResponse, TaskStatusChange, TaskUpdate,
)
from taskboard.services.ordering import OrderingEngine
from taskboard.services.task_store import TaskStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    status_filter: str | None = Query(None, alias="status"),
    priority: str | None = Query(None),
    assignee: UUID | None = Query(None),
    search: str | None = Query(None, max_length=200),
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """Tasks created by or assigned to the requester, newest first."""
    return await TaskStore(db).list_visible(
        requester.id, status=status_filter, priority=priority,
        assignee_id=assignee, search=search,
    )


@router.post(
    "", response_model=TaskResponse, status_code=status.HTTP_201_CREATED,
)
async def create_task(
    body: TaskCreate,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    return await TaskStore(db).create(body.model_dump(), requester.id)


@router.patch("/bulk-sort-update", response_model=BulkWriteResponse)
async def bulk_sort_update(
    body: BulkSortRequest,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """Reorder tasks across containers. Not atomic: check `modified`."""
    result = await OrderingEngine(db).bulk_reorder(
        [item.model_dump() for item in body.tasks], requester.id,
    )
    return result.to_dict()


@router.patch(
    "/container/{container_id}/reorder", response_model=BulkWriteResponse,
)
async def reorder_in_container(
    container_id: UUID,
    body: ContainerReorderRequest,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    result = await OrderingEngine(db).reorder_in_container(
        container_id, [item.model_dump() for item in body.tasks], requester.id,
    )
    return result.to_dict()


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: UUID,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    return await TaskStore(db).get(task_id, requester.id)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    body: TaskUpdate,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    return await TaskStore(db).update(
        task_id, body.model_dump(exclude_unset=True), requester.id,
    )


@router.delete("/{task_id}")
async def delete_task(
    task_id: UUID,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    await TaskStore(db).delete(task_id, requester.id)
    return {"message": "Task removed"}


@router.patch("/{task_id}/move", response_model=TaskResponse)
async def move_task(
    task_id: UUID,
    body: TaskMove,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    return await OrderingEngine(db).move(
        task_id, requester.id, **body.model_dump(),
    )


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def change_task_status(
    task_id: UUID,
    body: TaskStatusChange,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """Move to the visible container titled `status`, keeping position rules of move."""
    return await OrderingEngine(db).move(task_id, requester.id, status=body.status)
