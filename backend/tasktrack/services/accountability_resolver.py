"""Accountability Resolver — "who is accountable, and who else could be" for a task.

Invariants:
    - Task must be loaded with people (author/assigned)
    - Missing parent project is an error (ProjectNotFoundError), never "no members"
    - Member order is the project's stored order
"""

import logging

from tasktrack.core.accountability import build_accountability_view
from tasktrack.core.errors import ErrorContext, ProjectNotFoundError
from tasktrack.core.repository_protocols import TaskLike, UnitOfWork
from tasktrack.services.task_service_helpers import bounded

logger = logging.getLogger(__name__)


class AccountabilityResolver:
    def __init__(self, uow: UnitOfWork, timeout_seconds: float = 10.0):
        self._uow = uow
        self._timeout = timeout_seconds

    async def resolve_accountability(self, task: TaskLike) -> dict:
        context = ErrorContext(
            project_id=str(task.parent_id), task_id=str(task.id),
        )
        members = await bounded(
            self._uow.projects.get_members(task.parent_id),
            self._timeout, "load_members", context,
        )
        if members is None:
            logger.error(
                "Parent project not found while resolving accountability",
                extra={"project_id": task.parent_id, "task_id": task.id},
            )
            raise ProjectNotFoundError(str(task.parent_id), context)
        return build_accountability_view(task, members)
