"""TaskTrack API — FastAPI application entry point.

Invariants:
    - Startup order: logging, database, notification dispatcher
    - Shutdown drains in-flight assignment notices before the database is disposed
    - Routers are registered explicitly; every error leaves through api/error_handlers.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasktrack import __version__
from tasktrack.api.dependencies import init_notifications
from tasktrack.api.error_handlers import register_error_handlers
from tasktrack.api.routes import health, tasks, time_journal
from tasktrack.config import Settings, get_settings
from tasktrack.infrastructure.database import close_db, init_db
from tasktrack.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    notifications = init_notifications()
    logger.info(f"TaskTrack API {__version__} started")
    try:
        yield
    finally:
        await notifications.drain()
        await close_db()
        logger.info("TaskTrack API stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    application = FastAPI(
        title="TaskTrack API", version=__version__, lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )
    for module in (health, tasks, time_journal):
        application.include_router(module.router)
    register_error_handlers(application)
    return application


app = create_app()
