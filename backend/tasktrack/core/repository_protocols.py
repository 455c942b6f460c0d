"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - Staging methods (add, append) are sync; nothing is written until UnitOfWork.commit()

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - One repository per entity kind instead of a kind-parameterized store:
      find-by-id is get(), find-by-filter is find_by_email()/list_for_project(),
      populate is the with_people flag and the projected journal query
    - UnitOfWork groups the task write and its journal entry in one transaction,
      so the running total and the ledger cannot diverge
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from tasktrack.core.boundary_types import ActorRef, RightsDecision
from tasktrack.core.domain_types import (
    TaskId, ProjectId, UserId, TaskAction, TaskField,
)


class UserLike(Protocol):
    """Structural contract for User objects."""
    id: UUID
    name: str
    email: str


class MemberLike(Protocol):
    """Structural contract for a project membership row."""
    user: UserLike
    role: str
    position: int


class TaskLike(Protocol):
    """Structural contract for Task objects passed to services and core helpers.

    author/assigned are only guaranteed loaded when fetched with with_people=True.
    """
    id: UUID
    title: str
    description: str | None
    priority: int | None
    is_completed: bool
    time_spent: int
    author_id: UUID
    assigned_id: UUID | None
    parent_id: UUID
    attachments: list
    version: int
    author: UserLike
    assigned: UserLike | None


class TaskRepository(Protocol):
    """Contract for task persistence — implemented by shell."""
    async def get(
        self, task_id: TaskId, *, with_people: bool = False,
    ) -> TaskLike | None: ...
    def add(self, task_data: dict) -> TaskLike: ...
    async def delete(self, task: TaskLike) -> None: ...


class ProjectRepository(Protocol):
    """Contract for project lookups — implemented by shell."""
    async def exists(self, project_id: ProjectId) -> bool: ...
    async def get_members(
        self, project_id: ProjectId,
    ) -> list[MemberLike] | None: ...
    async def get_member_role(
        self, project_id: ProjectId, user_id: UserId,
    ) -> str | None: ...


class UserRepository(Protocol):
    """Contract for user lookups — implemented by shell."""
    async def get(self, user_id: UserId) -> UserLike | None: ...
    async def find_by_email(self, email: str) -> UserLike | None: ...


class TimeJournalRepository(Protocol):
    """Contract for the append-only time ledger — implemented by shell."""
    def append(
        self, task_id: TaskId, user_id: UserId, minutes: int, date: datetime,
    ) -> None: ...
    async def list_for_project(self, project_id: ProjectId) -> list[dict]: ...
    async def total_for_task(self, task_id: TaskId) -> int: ...


class UnitOfWork(Protocol):
    """Transactional boundary over all repositories of one request."""
    tasks: TaskRepository
    projects: ProjectRepository
    users: UserRepository
    journal: TimeJournalRepository

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...


class RightsOracle(Protocol):
    """External policy decision point."""
    async def check(
        self, project_id: ProjectId, actor_id: UserId,
        action: TaskAction, fields: frozenset[TaskField],
    ) -> RightsDecision: ...


class Notifier(Protocol):
    """Fire-and-forget side channel for assignment events."""
    async def notify_assigned(
        self, recipient_email: str, task_id: TaskId, actor: ActorRef,
    ) -> None: ...
