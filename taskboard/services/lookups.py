"""Store Lookups — shared reads and SQL access predicates for the service layer.

Invariants:
    - task_access_clause mirrors core.enforce_access.can() as a SQL predicate,
      so conditional writes re-check authorization at write time
    - resolve_container never reveals whether an invisible container exists
    - Loaders raise ResourceNotFoundError, never return None
"""

from sqlalchemy import select, or_, func
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.domain_types import (
    Capability, ContainerId, TaskId, UserId, ASSIGNEE_CAPABILITIES,
)
from taskboard.core.errors import (
    ResourceNotFoundError, InvalidContainerError, FieldValidationError,
)
from taskboard.models.container import Container
from taskboard.models.task import Task, task_assignees
from taskboard.models.user import User

DEFAULT_STATUS = "Open"


def assigned_task_ids(user_id: UserId):
    return select(task_assignees.c.task_id).where(
        task_assignees.c.user_id == user_id,
    )


def task_access_clause(user_id: UserId, capability: Capability):
    """SQL counterpart of enforce_access.can()."""
    if capability in ASSIGNEE_CAPABILITIES:
        return or_(
            Task.creator_id == user_id,
            Task.id.in_(assigned_task_ids(user_id)),
        )
    return Task.creator_id == user_id


def container_visible_clause(user_id: UserId):
    return or_(Container.is_default.is_(True), Container.owner_id == user_id)


async def load_task(db: AsyncSession, task_id: TaskId, refresh: bool = False) -> Task:
    query = select(Task).where(Task.id == task_id)
    if refresh:
        query = query.execution_options(populate_existing=True)
    task = (await db.execute(query)).scalar_one_or_none()
    if not task:
        raise ResourceNotFoundError("Task", str(task_id))
    return task


async def load_container(
    db: AsyncSession, container_id: ContainerId, refresh: bool = False,
) -> Container:
    query = select(Container).where(Container.id == container_id)
    if refresh:
        query = query.execution_options(populate_existing=True)
    container = (await db.execute(query)).scalar_one_or_none()
    if not container:
        raise ResourceNotFoundError("Container", str(container_id))
    return container


async def resolve_container(
    db: AsyncSession,
    user_id: UserId,
    container_id: ContainerId | None = None,
    status: str | None = None,
) -> Container:
    """Find a container visible to user_id by id, else by title, else 'Open'."""
    query = select(Container).where(container_visible_clause(user_id))
    if container_id is not None:
        reference = str(container_id)
        query = query.where(Container.id == container_id)
    else:
        reference = status or DEFAULT_STATUS
        # own custom container wins over a default with the same title
        query = query.where(Container.title == reference).order_by(
            Container.is_default.asc(), Container.created_at.asc(),
        )
    container = (await db.execute(query.limit(1))).scalar_one_or_none()
    if not container:
        raise InvalidContainerError(reference)
    return container


async def load_users(db: AsyncSession, user_ids: list[UserId]) -> list[User]:
    """Resolve assignee ids, rejecting unknown users."""
    wanted = list(dict.fromkeys(user_ids))
    if not wanted:
        return []
    result = await db.execute(select(User).where(User.id.in_(wanted)))
    users = {u.id: u for u in result.scalars().all()}
    missing = [str(uid) for uid in wanted if uid not in users]
    if missing:
        raise FieldValidationError(
            f"Unknown assignee(s): {', '.join(missing)}", "assignees",
        )
    return [users[uid] for uid in wanted]


async def max_sort_index(
    db: AsyncSession, container_id: ContainerId, exclude_task_id: TaskId | None = None,
) -> float | None:
    query = select(func.max(Task.sort_index)).where(
        Task.container_id == container_id,
    )
    if exclude_task_id is not None:
        query = query.where(Task.id != exclude_task_id)
    return (await db.execute(query)).scalar_one_or_none()
