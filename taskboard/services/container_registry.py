"""Container Registry — default (shared, immutable) and custom (owner-scoped) containers.

Invariants:
    - list_visible: all defaults first, then the requester's customs, each by created_at
    - update/delete: NotFound -> Conflict (default) -> Forbidden (not owner)
    - update/delete are single conditional statements guarded by
      owner_id = requester AND NOT is_default; zero rows means re-read and classify
    - delete refuses containers still referenced by tasks
    - a rename rewrites the status of every task in the container in the same commit
    - seed_defaults is idempotent (partial unique index on default titles)
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.config import get_settings
from taskboard.core.domain_types import ContainerId, UserId
from taskboard.core.enforce_access import check_container_mutable
from taskboard.core.errors import ConflictError, ErrorContext
from taskboard.core.validate_fields import normalize_container_title, check_color
from taskboard.models.container import Container
from taskboard.models.task import Task
from taskboard.services.lookups import container_visible_clause, load_container

logger = logging.getLogger(__name__)

DEFAULT_CONTAINERS = (
    ("Open", "#3B82F6"),
    ("In Progress", "#F59E0B"),
    ("Completed", "#10B981"),
    ("Blocked", "#EF4444"),
    ("On Hold", "#6B7280"),
)


class ContainerRegistry:
    """Container CRUD with immutability and ownership guards."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_visible(self, user_id: UserId) -> list[Container]:
        result = await self.db.execute(
            select(Container)
            .where(container_visible_clause(user_id))
            .order_by(Container.is_default.desc(), Container.created_at.asc()),
        )
        return list(result.scalars().all())

    async def create(
        self, title: str, color: str | None, owner_id: UserId,
    ) -> Container:
        container = Container(
            title=normalize_container_title(title),
            color=check_color(color or get_settings().default_container_color),
            is_default=False,
            owner_id=owner_id,
        )
        self.db.add(container)
        await self.db.commit()
        await self.db.refresh(container)
        logger.info(
            f"Container '{container.title}' created",
            extra={"container_id": container.id, "user_id": owner_id},
        )
        return container

    async def update(
        self, container_id: ContainerId, patch: dict, requester_id: UserId,
    ) -> Container:
        container = await load_container(self.db, container_id)
        check_container_mutable(container, requester_id)

        values = {}
        if patch.get("title") is not None:
            values["title"] = normalize_container_title(patch["title"])
        if patch.get("color") is not None:
            values["color"] = check_color(patch["color"])
        if not values:
            return container

        result = await self.db.execute(
            update(Container)
            .where(
                Container.id == container_id,
                Container.owner_id == requester_id,
                Container.is_default.is_(False),
            )
            .values(**values)
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            await self._classify_miss(container_id, requester_id)
        if "title" in values:
            # status mirrors the container title
            await self.db.execute(
                update(Task)
                .where(Task.container_id == container_id)
                .values(status=values["title"])
                .execution_options(synchronize_session=False),
            )
        await self.db.commit()
        return await load_container(self.db, container_id, refresh=True)

    async def delete(self, container_id: ContainerId, requester_id: UserId) -> None:
        container = await load_container(self.db, container_id)
        check_container_mutable(container, requester_id)

        in_use = select(Task.id).where(Task.container_id == container_id).exists()
        result = await self.db.execute(
            delete(Container)
            .where(
                Container.id == container_id,
                Container.owner_id == requester_id,
                Container.is_default.is_(False),
                ~in_use,
            )
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            await self._classify_miss(container_id, requester_id)
            raise ConflictError(
                "Container still holds tasks. Move them before deleting it.",
                "CONTAINER_IN_USE",
                ErrorContext(container_id=str(container_id)),
            )
        await self.db.commit()
        self.db.expunge(container)
        logger.info(
            "Container deleted",
            extra={"container_id": container_id, "user_id": requester_id},
        )

    async def _classify_miss(self, container_id: ContainerId, requester_id: UserId) -> None:
        """Raise the error explaining why a conditional write matched nothing."""
        container = await load_container(self.db, container_id, refresh=True)
        check_container_mutable(container, requester_id)

    async def missing_defaults(self) -> list[str]:
        """Titles of default containers not present in the store."""
        result = await self.db.execute(
            select(Container.title).where(Container.is_default.is_(True)),
        )
        existing = set(result.scalars().all())
        return [title for title, _ in DEFAULT_CONTAINERS if title not in existing]

    async def seed_defaults(self) -> int:
        """Insert any missing default containers. Returns how many were added."""
        result = await self.db.execute(
            select(Container.title).where(Container.is_default.is_(True)),
        )
        existing = set(result.scalars().all())
        base = datetime.now(timezone.utc)
        added = 0
        for position, (title, color) in enumerate(DEFAULT_CONTAINERS):
            if title in existing:
                continue
            self.db.add(Container(
                title=title, color=color, is_default=True, owner_id=None,
                created_at=base + timedelta(milliseconds=position),
            ))
            added += 1
        if not added:
            return 0
        try:
            await self.db.commit()
        except IntegrityError:
            # another process seeded concurrently
            await self.db.rollback()
            logger.info("Default containers already seeded")
            return 0
        logger.info(f"Seeded {added} default container(s)")
        return added
