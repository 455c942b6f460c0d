"""Task Mutation — applies a partial update under field-level authorization.

Invariants:
    - Authorization is evaluated ONCE for the whole touched-field set, before any mutation
    - Every check (rights, patch rules, assignee lookup) runs before the task is touched;
      the first failing stage aborts the update with nothing written
    - time_spent grows by exactly timeSpentDelta and exactly one journal entry
      (task, actor, now, delta) is staged with it; both commit in one unit of work
    - Exactly one assignment notice per successful reassignment, dispatched after
      commit, fire-and-forget
    - Response timeSpent is rendered as a duration string

Design Decisions:
    - Stages return errors and the first one wins (same shape as the pure checks in
      core/task_patch.py), instead of nested callbacks
    - Optimistic versioning on the task: a concurrent writer gets ConcurrencyError (409)
      instead of silently losing the other writer's increment
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from tasktrack.core.boundary_types import ActorRef
from tasktrack.core.domain_types import ProjectId, TaskAction, TaskId, UserId
from tasktrack.core.errors import (
    AssigneeNotFoundError, ErrorContext, TaskTrackError,
)
from tasktrack.core.repository_protocols import (
    RightsOracle, UnitOfWork, UserLike,
)
from tasktrack.core.task_patch import (
    TaskPatch, apply_simple_fields, apply_time_delta, touched_fields,
    validate_patch,
)
from tasktrack.core.task_views import task_to_json
from tasktrack.services.notification_dispatch import (
    AssignmentNotificationDispatcher,
)
from tasktrack.services.task_service_helpers import (
    authorize, bounded, load_task_in_project,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskMutationService:
    """Orchestrates update_task: load -> authorize -> validate -> resolve -> apply -> commit -> notify."""

    def __init__(
        self,
        uow: UnitOfWork,
        oracle: RightsOracle,
        notifications: AssignmentNotificationDispatcher,
        repository_timeout_seconds: float = 10.0,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._uow = uow
        self._oracle = oracle
        self._notifications = notifications
        self._timeout = repository_timeout_seconds
        self._clock = clock

    async def update_task(
        self, project_id: ProjectId, task_id: TaskId, actor_id: UserId,
        patch: TaskPatch,
    ) -> dict:
        context = ErrorContext(
            project_id=str(project_id), task_id=str(task_id),
            actor_id=str(actor_id),
        )
        task = await load_task_in_project(
            self._uow, project_id, task_id, self._timeout, context,
        )
        touched = touched_fields(patch)
        await authorize(
            self._oracle, project_id, actor_id, TaskAction.UPDATE, touched,
            self._timeout, context,
        )
        error = validate_patch(patch)
        if error:
            error.context = context
            raise error
        assignee = await self._resolve_assignee(patch, context)
        actor = await self._actor_ref(actor_id, context) if assignee else None

        try:
            apply_simple_fields(task, patch)
            if patch.time_spent_delta is not None:
                apply_time_delta(task, patch.time_spent_delta)
                self._uow.journal.append(
                    task.id, actor_id, patch.time_spent_delta, self._clock(),
                )
            if assignee is not None:
                task.assigned_id = assignee.id
            await bounded(self._uow.commit(), self._timeout, "commit", context)
        except TaskTrackError as e:
            await self._uow.rollback()
            logger.warning(
                f"Task update rejected: {e.message}",
                extra={
                    "project_id": project_id, "task_id": task_id,
                    "actor_id": actor_id, "error_code": e.code,
                },
            )
            e.context = context
            raise

        logger.info(
            f"Task updated: fields={sorted(f.value for f in touched)}",
            extra={
                "project_id": project_id, "task_id": task_id,
                "actor_id": actor_id,
            },
        )
        if assignee is not None:
            self._notifications.dispatch(assignee.email, task.id, actor)
        return task_to_json(task, render_duration=True)

    async def _resolve_assignee(
        self, patch: TaskPatch, context: ErrorContext,
    ) -> UserLike | None:
        """Email -> user. Fails closed: no match aborts the whole update."""
        if not patch.has_assignee:
            return None
        email = patch.assigned_by_email.strip()
        user = await bounded(
            self._uow.users.find_by_email(email),
            self._timeout, "find_assignee", context,
        )
        if user is None:
            raise AssigneeNotFoundError(email, context)
        return user

    async def _actor_ref(
        self, actor_id: UserId, context: ErrorContext,
    ) -> ActorRef:
        actor = await bounded(
            self._uow.users.get(actor_id), self._timeout, "load_actor", context,
        )
        if actor is None:
            return ActorRef(actor_id)
        return ActorRef(actor_id, actor.name, actor.email)
