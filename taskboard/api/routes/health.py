"""Health & Readiness — liveness plus a readiness check of the board store.

Invariants:
    - GET /health/ always returns 200 if the process is up
    - GET /health/ready returns 503 if the database is unreachable
    - GET /health/ready returns 503 while any default container is missing,
      since tasks created without a container land in the default "Open"
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from taskboard.infrastructure import database
from taskboard.services.container_registry import ContainerRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


def _not_ready(reason: str, **details) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason, **details},
    )


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {
        "status": "healthy",
        "service": "taskboard-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Ready once the store answers and the default columns exist."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return _not_ready("database_unavailable")

    async with manager.session() as db:
        missing = await ContainerRegistry(db).missing_defaults()
    if missing:
        logger.warning(f"Readiness: default containers missing: {missing}")
        return _not_ready("default_containers_missing", missing=missing)
    return {
        "status": "ready",
        "checks": {"database": "healthy", "default_containers": "seeded"},
    }
