"""Board Projection — read-only, container-grouped, ordered view for board rendering.

Invariants:
    - Issues only SELECTs; never commits
    - Containers: visible to requester, defaults first then creation order
    - Tasks: visible to requester, grouped by container_id, ordered by sort_index
"""

from datetime import datetime
from typing import Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.board_projection import project_board
from taskboard.core.domain_types import Capability, UserId
from taskboard.core.durations import utc_now
from taskboard.models.task import Task
from taskboard.services.container_registry import ContainerRegistry
from taskboard.services.lookups import task_access_clause


class BoardProjection:
    """Builds the Kanban board for one requester."""

    def __init__(
        self, db: AsyncSession, clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.clock = clock

    async def build(self, requester_id: UserId) -> list[dict]:
        containers = await ContainerRegistry(self.db).list_visible(requester_id)
        result = await self.db.execute(
            select(Task).where(task_access_clause(requester_id, Capability.VIEW)),
        )
        return project_board(containers, list(result.scalars().all()), self.clock())
