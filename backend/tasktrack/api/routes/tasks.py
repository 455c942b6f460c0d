"""Task Routes — get, create, update, delete tasks of a project.

Invariants:
    - Routes only translate HTTP <-> service calls; all rules live in services/core
    - Success is always 200; failures come from TaskTrackError handlers
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from tasktrack.api.dependencies import (
    get_actor_id, get_task_lifecycle_service, get_task_mutation_service,
)
from tasktrack.core.domain_types import ProjectId, TaskId, UserId
from tasktrack.schemas.task import TaskCreate, TaskPatchBody
from tasktrack.services.task_lifecycle import TaskLifecycleService
from tasktrack.services.task_mutation import TaskMutationService

router = APIRouter(prefix="/api/v1/projects/{project_id}/tasks", tags=["tasks"])


@router.get("/{task_id}")
async def get_task(
    project_id: UUID,
    task_id: UUID,
    field: str | None = Query(None, max_length=50),
    actor_id: UserId = Depends(get_actor_id),
    service: TaskLifecycleService = Depends(get_task_lifecycle_service),
):
    """Whole task, or one field when ?field= is given."""
    return await service.get_task(
        ProjectId(project_id), TaskId(task_id), actor_id, field,
    )


@router.post("")
async def create_task(
    project_id: UUID,
    body: TaskCreate,
    actor_id: UserId = Depends(get_actor_id),
    service: TaskLifecycleService = Depends(get_task_lifecycle_service),
):
    """Create a task in the project."""
    task_id = await service.create_task(
        ProjectId(project_id), actor_id, body.title,
        body.description, body.priority,
    )
    return {"id": str(task_id)}


@router.put("/{task_id}")
async def update_task(
    project_id: UUID,
    task_id: UUID,
    body: TaskPatchBody,
    actor_id: UserId = Depends(get_actor_id),
    service: TaskMutationService = Depends(get_task_mutation_service),
):
    """Apply a partial update; returns the task with timeSpent as a duration."""
    return await service.update_task(
        ProjectId(project_id), TaskId(task_id), actor_id, body.to_patch(),
    )


@router.delete("/{task_id}")
async def delete_task(
    project_id: UUID,
    task_id: UUID,
    actor_id: UserId = Depends(get_actor_id),
    service: TaskLifecycleService = Depends(get_task_lifecycle_service),
):
    """Delete the task and its journal entries."""
    await service.delete_task(ProjectId(project_id), TaskId(task_id), actor_id)
    return {"status": "deleted"}
