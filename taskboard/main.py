"""Task Board API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TaskBoardError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized and default containers seeded on startup via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard.api.error_handlers import register_error_handlers
from taskboard.api.routes import board, containers, health, tasks, time_tracking
from taskboard.config import get_settings
from taskboard.infrastructure.database import init_db
from taskboard.infrastructure.observability import setup_logging
from taskboard.services.container_registry import ContainerRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.seed_default_containers:
        async with manager.session() as db:
            await ContainerRegistry(db).seed_defaults()
    logger.info("Task Board API started")
    yield
    await manager.dispose()
    logger.info("Task Board API shutting down")


app = FastAPI(
    title="Task Board API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(containers.router)
app.include_router(tasks.router)
app.include_router(time_tracking.router)
app.include_router(board.router)

register_error_handlers(app)
