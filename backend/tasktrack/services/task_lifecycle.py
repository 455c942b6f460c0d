"""Task Lifecycle — create, read and delete tasks within a project.

Invariants:
    - Every operation consults the rights oracle before touching data
    - A blank title is rejected with EMPTY_TITLE before authorization
    - Creating a task is a single insert: its parent_id IS its project membership
    - Reads go through the explicit readable-field table; "assigned" resolves to the
      accountability view
    - Deleting a task removes its journal entries in the same transaction
"""

import logging

from tasktrack.core.domain_types import ProjectId, TaskAction, TaskId, UserId
from tasktrack.core.errors import (
    ErrorContext, ProjectNotFoundError, TaskTrackError, TaskValidationError,
)
from tasktrack.core.repository_protocols import RightsOracle, UnitOfWork
from tasktrack.core.task_patch import parse_priority
from tasktrack.core.task_views import (
    ASSIGNED_FIELD, check_readable_field, read_field, whole_task_view,
)
from tasktrack.services.accountability_resolver import AccountabilityResolver
from tasktrack.services.task_service_helpers import (
    authorize, bounded, load_task_in_project,
)

logger = logging.getLogger(__name__)


class TaskLifecycleService:
    def __init__(
        self, uow: UnitOfWork, oracle: RightsOracle,
        accountability: AccountabilityResolver,
        repository_timeout_seconds: float = 10.0,
    ):
        self._uow = uow
        self._oracle = oracle
        self._accountability = accountability
        self._timeout = repository_timeout_seconds

    async def create_task(
        self, project_id: ProjectId, actor_id: UserId, title: str | None,
        description: str | None = None, priority: int | str | None = None,
    ) -> TaskId:
        context = ErrorContext(
            project_id=str(project_id), actor_id=str(actor_id),
        )
        if not title or not title.strip():
            raise TaskValidationError(
                "Task title cannot be empty", field="title",
                code="EMPTY_TITLE", context=context,
            )
        await authorize(
            self._oracle, project_id, actor_id, TaskAction.CREATE,
            frozenset(), self._timeout, context,
        )
        if not await bounded(
            self._uow.projects.exists(project_id),
            self._timeout, "load_project", context,
        ):
            raise ProjectNotFoundError(str(project_id), context)

        task_data = {
            "title": title.strip(),
            "author_id": actor_id,
            "parent_id": project_id,
        }
        if description and description.strip():
            task_data["description"] = description.strip()
        if priority is not None and str(priority).strip():
            try:
                task_data["priority"] = parse_priority(priority)
            except ValueError:
                raise TaskValidationError(
                    f"priority must be an integer, got {priority!r}",
                    field="priority", context=context,
                )

        task = self._uow.tasks.add(task_data)
        await self._commit(context)
        logger.info(
            "Task created",
            extra={"project_id": project_id, "task_id": task.id, "actor_id": actor_id},
        )
        return TaskId(task.id)

    async def get_task(
        self, project_id: ProjectId, task_id: TaskId, actor_id: UserId,
        field: str | None = None,
    ) -> dict:
        """Whole task, the accountability view, or {field: value}."""
        context = ErrorContext(
            project_id=str(project_id), task_id=str(task_id),
            actor_id=str(actor_id),
        )
        if field:
            error = check_readable_field(field)
            if error:
                error.context = context
                raise error
        await authorize(
            self._oracle, project_id, actor_id, TaskAction.READ, frozenset(),
            self._timeout, context,
        )
        task = await load_task_in_project(
            self._uow, project_id, task_id, self._timeout, context,
            with_people=True,
        )
        if field and field != ASSIGNED_FIELD:
            return read_field(task, field)
        accountability = await self._accountability.resolve_accountability(task)
        if field == ASSIGNED_FIELD:
            return accountability
        return whole_task_view(task, accountability)

    async def delete_task(
        self, project_id: ProjectId, task_id: TaskId, actor_id: UserId,
    ) -> None:
        context = ErrorContext(
            project_id=str(project_id), task_id=str(task_id),
            actor_id=str(actor_id),
        )
        await authorize(
            self._oracle, project_id, actor_id, TaskAction.DELETE, frozenset(),
            self._timeout, context,
        )
        task = await load_task_in_project(
            self._uow, project_id, task_id, self._timeout, context,
        )
        await bounded(
            self._uow.tasks.delete(task), self._timeout, "delete_task", context,
        )
        await self._commit(context)
        logger.info(
            "Task deleted",
            extra={"project_id": project_id, "task_id": task_id, "actor_id": actor_id},
        )

    async def _commit(self, context: ErrorContext) -> None:
        try:
            await bounded(self._uow.commit(), self._timeout, "commit", context)
        except TaskTrackError:
            await self._uow.rollback()
            raise
