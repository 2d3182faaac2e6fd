"""Request Dependencies — requester identity and clock for route handlers.

Invariants:
    - Every /api/v1 route except health resolves a Requester first
    - get_clock is the only source of "now" for services; tests override it
"""

from datetime import datetime
from typing import Callable

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.durations import utc_now
from taskboard.infrastructure.database import get_db
from taskboard.infrastructure.identity import (
    Requester, remember_user, requester_from_headers,
)


async def get_requester(
    x_user_id: str | None = Header(None),
    x_user_name: str | None = Header(None),
    x_user_email: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> Requester:
    requester = requester_from_headers(x_user_id, x_user_name, x_user_email)
    await remember_user(db, requester)
    return requester


def get_clock() -> Callable[[], datetime]:
    return utc_now
