"""Container Routes — list/create/update/delete sections, renormalize ordering.

Invariants:
    - Default containers reject update/delete with 409 for every requester
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.dependencies import get_requester
from taskboard.infrastructure.database import get_db
from taskboard.infrastructure.identity import Requester
from taskboard.schemas.container import (
    ContainerCreate, ContainerResponse, ContainerUpdate,
)
from taskboard.services.container_registry import ContainerRegistry
from taskboard.services.ordering import OrderingEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/containers", tags=["containers"])


@router.get("", response_model=list[ContainerResponse])
async def list_containers(
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """Defaults first, then the requester's own containers."""
    return await ContainerRegistry(db).list_visible(requester.id)


@router.post(
    "", response_model=ContainerResponse, status_code=status.HTTP_201_CREATED,
)
async def create_container(
    body: ContainerCreate,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    return await ContainerRegistry(db).create(body.title, body.color, requester.id)


@router.put("/{container_id}", response_model=ContainerResponse)
async def update_container(
    container_id: UUID,
    body: ContainerUpdate,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    return await ContainerRegistry(db).update(
        container_id, body.model_dump(exclude_unset=True), requester.id,
    )


@router.delete("/{container_id}")
async def delete_container(
    container_id: UUID,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    await ContainerRegistry(db).delete(container_id, requester.id)
    return {"message": "Container removed"}


@router.post("/{container_id}/renormalize")
async def renormalize_container(
    container_id: UUID,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """Respace sort indices of the requester's tasks in this container."""
    modified = await OrderingEngine(db).renormalize(container_id, requester.id)
    return {"modified": modified}
