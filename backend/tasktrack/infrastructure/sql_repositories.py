"""SQL Repositories — SQLAlchemy implementations of the core boundary protocols.

Invariants:
    - All repositories of one SqlUnitOfWork share a single AsyncSession (one transaction)
    - add()/append() only stage rows; nothing reaches the database before commit()
    - commit() maps SQLAlchemy failures through map_persistence_error and rolls back
    - Journal reads select projected columns only — no entity identities leave the query
    - Journal order is (date, id): deterministic for a fixed data set

Design Decisions:
    - selectinload for author/assigned: async sessions cannot lazy-load
    - Journal rows of a task deleted with an explicit DELETE before the task, so
      the cascade does not depend on SQLite's foreign_keys pragma
"""

import logging
from datetime import datetime

from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tasktrack.core.domain_types import TaskId, ProjectId, UserId
from tasktrack.infrastructure.database import map_persistence_error
from tasktrack.models.project import ProjectMember, Project
from tasktrack.models.task import Task
from tasktrack.models.time_journal_entry import TimeJournalEntry
from tasktrack.models.user import User

logger = logging.getLogger(__name__)


class SqlTaskRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(
        self, task_id: TaskId, *, with_people: bool = False,
    ) -> Task | None:
        query = select(Task).where(Task.id == task_id)
        if with_people:
            query = query.options(
                selectinload(Task.author), selectinload(Task.assigned),
            ).execution_options(populate_existing=True)
        result = await self._db.execute(query)
        return result.scalar_one_or_none()

    def add(self, task_data: dict) -> Task:
        task = Task(**task_data)
        self._db.add(task)
        return task

    async def delete(self, task: Task) -> None:
        await self._db.execute(
            delete(TimeJournalEntry).where(TimeJournalEntry.task_id == task.id),
        )
        await self._db.delete(task)


class SqlProjectRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def exists(self, project_id: ProjectId) -> bool:
        result = await self._db.execute(
            select(Project.id).where(Project.id == project_id),
        )
        return result.scalar_one_or_none() is not None

    async def get_members(
        self, project_id: ProjectId,
    ) -> list[ProjectMember] | None:
        """Members in stored order, users loaded. None if the project is missing."""
        if not await self.exists(project_id):
            return None
        result = await self._db.execute(
            select(ProjectMember)
            .where(ProjectMember.project_id == project_id)
            .options(selectinload(ProjectMember.user))
            .order_by(ProjectMember.position, ProjectMember.user_id),
        )
        return list(result.scalars().all())

    async def get_member_role(
        self, project_id: ProjectId, user_id: UserId,
    ) -> str | None:
        result = await self._db.execute(
            select(ProjectMember.role)
            .where(ProjectMember.project_id == project_id)
            .where(ProjectMember.user_id == user_id),
        )
        return result.scalar_one_or_none()


class SqlUserRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, user_id: UserId) -> User | None:
        result = await self._db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> User | None:
        """Exact match on the trimmed email; fails closed (None) when absent."""
        result = await self._db.execute(
            select(User).where(User.email == email.strip()),
        )
        return result.scalar_one_or_none()


class SqlTimeJournalRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    def append(
        self, task_id: TaskId, user_id: UserId, minutes: int, date: datetime,
    ) -> None:
        self._db.add(TimeJournalEntry(
            task_id=task_id, user_id=user_id, time_spent=minutes, date=date,
        ))

    async def list_for_project(self, project_id: ProjectId) -> list[dict]:
        """Flat projected ledger rows for every task of the project."""
        task_ids = select(Task.id).where(Task.parent_id == project_id)
        result = await self._db.execute(
            select(
                Task.title.label("task_title"),
                Task.is_completed.label("task_is_completed"),
                Task.time_spent.label("task_time_spent"),
                User.name.label("user_name"),
                User.email.label("user_email"),
                TimeJournalEntry.time_spent,
                TimeJournalEntry.date,
            )
            .select_from(TimeJournalEntry)
            .join(Task, TimeJournalEntry.task_id == Task.id)
            .join(User, TimeJournalEntry.user_id == User.id)
            .where(TimeJournalEntry.task_id.in_(task_ids))
            .order_by(TimeJournalEntry.date, TimeJournalEntry.id),
        )
        return [dict(row) for row in result.mappings().all()]

    async def total_for_task(self, task_id: TaskId) -> int:
        result = await self._db.execute(
            select(func.coalesce(func.sum(TimeJournalEntry.time_spent), 0))
            .where(TimeJournalEntry.task_id == task_id),
        )
        return int(result.scalar_one())


class SqlUnitOfWork:
    """One AsyncSession, one transaction, all repositories."""

    def __init__(self, db: AsyncSession):
        self._db = db
        self.tasks = SqlTaskRepository(db)
        self.projects = SqlProjectRepository(db)
        self.users = SqlUserRepository(db)
        self.journal = SqlTimeJournalRepository(db)

    async def commit(self) -> None:
        try:
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(f"Commit failed: {e}", extra={"operation": "commit"})
            raise map_persistence_error(e, "commit") from e

    async def rollback(self) -> None:
        await self._db.rollback()
