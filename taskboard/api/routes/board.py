"""Board Route — the container-grouped Kanban view. Read-only."""

from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.dependencies import get_clock, get_requester
from taskboard.infrastructure.database import get_db
from taskboard.infrastructure.identity import Requester
from taskboard.schemas.board import BoardColumn
from taskboard.services.board import BoardProjection

router = APIRouter(prefix="/api/v1/board", tags=["board"])


@router.get("", response_model=list[BoardColumn])
async def get_board(
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    return await BoardProjection(db, clock).build(requester.id)
