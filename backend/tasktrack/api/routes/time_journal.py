"""Time Journal Routes — project-wide time ledger for visualization."""

from uuid import UUID

from fastapi import APIRouter, Depends

from tasktrack.api.dependencies import get_actor_id, get_time_journal_service
from tasktrack.core.domain_types import ProjectId, UserId
from tasktrack.services.time_journal import TimeJournalService

router = APIRouter(prefix="/api/v1/projects/{project_id}", tags=["journal"])


@router.get("/journal")
async def get_project_journal(
    project_id: UUID,
    actor_id: UserId = Depends(get_actor_id),
    service: TimeJournalService = Depends(get_time_journal_service),
):
    """Ordered ledger entries of every task in the project."""
    return await service.get_project_journal(ProjectId(project_id), actor_id)
