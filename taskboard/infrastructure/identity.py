"""Identity Resolution — turns gateway headers into a Requester and records it.

Invariants:
    - The upstream gateway has authenticated the caller; headers are trusted
    - Missing or malformed X-User-Id -> UnauthenticatedError (401)
    - The users table mirrors the latest name/email seen for each id
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import UnauthenticatedError
from taskboard.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Requester:
    """Authenticated caller."""
    id: UUID
    name: str
    email: str | None = None


def requester_from_headers(
    user_id: str | None, name: str | None, email: str | None,
) -> Requester:
    if not user_id:
        raise UnauthenticatedError()
    try:
        parsed = UUID(user_id)
    except ValueError:
        raise UnauthenticatedError("Invalid user identity")
    return Requester(id=parsed, name=(name or "").strip(), email=email or None)


async def remember_user(db: AsyncSession, requester: Requester) -> User:
    """Insert or refresh the directory entry for requester."""
    user = await db.get(User, requester.id)
    if user is None:
        user = User(id=requester.id, name=requester.name, email=requester.email)
        db.add(user)
    elif requester.name and (user.name, user.email) != (requester.name, requester.email):
        user.name = requester.name
        user.email = requester.email
    else:
        return user
    try:
        await db.commit()
    except IntegrityError:
        # first request of this user raced with another one
        await db.rollback()
        logger.debug("User already registered", extra={"user_id": requester.id})
        user = await db.get(User, requester.id)
    return user
