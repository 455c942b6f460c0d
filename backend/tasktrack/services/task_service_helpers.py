"""Task Service Helpers — shared IO steps of the task services.

Invariants:
    - bounded() turns a timeout into RepositoryError (never a bare TimeoutError)
    - load_task_in_project() raises ResourceNotFoundError both when the task is
      missing and when it belongs to another project
    - authorize() consults the oracle exactly once per call
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

from tasktrack.core.domain_types import (
    ProjectId, TaskAction, TaskField, TaskId, UserId,
)
from tasktrack.core.enforce_rights import check_rights
from tasktrack.core.errors import (
    ErrorContext, RepositoryError, ResourceNotFoundError,
)
from tasktrack.core.repository_protocols import (
    RightsOracle, TaskLike, UnitOfWork,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def bounded(
    awaitable: Awaitable[T], timeout_seconds: float, operation: str,
    context: ErrorContext | None = None,
) -> T:
    """Await a collaborator call with a deadline."""
    try:
        return await asyncio.wait_for(awaitable, timeout_seconds)
    except asyncio.TimeoutError:
        logger.error(
            f"{operation} timed out after {timeout_seconds}s",
            extra={"operation": operation},
        )
        raise RepositoryError(operation, context)


async def load_task_in_project(
    uow: UnitOfWork, project_id: ProjectId, task_id: TaskId,
    timeout_seconds: float, context: ErrorContext, *,
    with_people: bool = False,
) -> TaskLike:
    task = await bounded(
        uow.tasks.get(task_id, with_people=with_people),
        timeout_seconds, "load_task", context,
    )
    if task is None or task.parent_id != project_id:
        raise ResourceNotFoundError("Task", str(task_id), context)
    return task


async def authorize(
    oracle: RightsOracle, project_id: ProjectId, actor_id: UserId,
    action: TaskAction, fields: frozenset[TaskField],
    timeout_seconds: float, context: ErrorContext,
) -> None:
    """Raise ForbiddenError (with the oracle's reason) on deny."""
    decision = await bounded(
        oracle.check(project_id, actor_id, action, fields),
        timeout_seconds, "authorize", context,
    )
    error = check_rights(decision, context)
    if error:
        logger.info(
            f"{action.value} denied: {error.reason}",
            extra={
                "project_id": project_id, "actor_id": actor_id,
                "error_code": error.code,
            },
        )
        raise error
