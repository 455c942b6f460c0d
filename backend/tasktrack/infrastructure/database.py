"""Database — async engine/session lifecycle and SQLAlchemy error translation.

Invariants:
    - A session that exits with an exception is rolled back before it is closed
    - SQLAlchemy exceptions never leave this layer untranslated:
      IntegrityError -> TaskValidationError (naming the violated constraint's field),
      StaleDataError -> ConcurrencyError, anything else -> RepositoryError
    - db_manager is None until init_db() runs in the lifespan; close_db() disposes it

Design Decisions:
    - expire_on_commit=False: services render tasks after commit without reloading
    - Pool sizing only for server databases; SQLite (tests, local) uses the default pool
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.orm.exc import StaleDataError

from tasktrack.core.errors import (
    ConcurrencyError, RepositoryError, TaskTrackError, TaskValidationError,
)

logger = logging.getLogger(__name__)

# Named CHECK constraints (models/) -> the task field they guard.
_CONSTRAINT_FIELDS = {
    "ck_tasks_title_not_blank": "title",
    "ck_tasks_time_spent_non_negative": "timeSpent",
    "ck_journal_time_spent_positive": "timeSpentDelta",
}


def map_persistence_error(exc: Exception, operation: str) -> TaskTrackError:
    if isinstance(exc, StaleDataError):
        return ConcurrencyError(
            "Task was modified concurrently; reload and retry",
        )
    if isinstance(exc, IntegrityError):
        detail = str(exc.orig)
        for constraint, field in _CONSTRAINT_FIELDS.items():
            if constraint in detail:
                return TaskValidationError(
                    f"Task violates constraint {constraint}", field=field,
                )
        return TaskValidationError("Task violates schema constraints")
    return RepositoryError(operation)


class DatabaseSessionManager:
    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        options: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            options |= {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_recycle": 3600,
            }
        self.engine = create_async_engine(database_url, **options)
        self.sessions = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.sessions() as session:
            try:
                yield session
            except TaskTrackError:
                await session.rollback()
                raise
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    f"Unhandled database error: {e}",
                    extra={"operation": "session"},
                )
                raise map_persistence_error(e, "session") from e

    async def health_check(self) -> bool:
        """True when the database answers SELECT 1."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database health check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.dispose()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
