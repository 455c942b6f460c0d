"""Time Journal — project-wide view of the time ledger for visualization.

Invariants:
    - Reading the journal requires the oracle's READ grant on the project
    - Output records never contain an identity field
    - Same data set -> same sequence (ordering is (date, entry id))
    - task_ledger_total() is computed from the ledger alone, never from Task.time_spent
"""

import logging

from tasktrack.core.domain_types import ProjectId, TaskAction, TaskId, UserId
from tasktrack.core.errors import ErrorContext
from tasktrack.core.journal_projection import project_journal
from tasktrack.core.repository_protocols import RightsOracle, UnitOfWork
from tasktrack.services.task_service_helpers import authorize, bounded

logger = logging.getLogger(__name__)


class TimeJournalService:
    def __init__(
        self, uow: UnitOfWork, oracle: RightsOracle,
        repository_timeout_seconds: float = 10.0,
    ):
        self._uow = uow
        self._oracle = oracle
        self._timeout = repository_timeout_seconds

    async def get_project_journal(
        self, project_id: ProjectId, actor_id: UserId,
    ) -> list[dict]:
        context = ErrorContext(
            project_id=str(project_id), actor_id=str(actor_id),
        )
        await authorize(
            self._oracle, project_id, actor_id, TaskAction.READ, frozenset(),
            self._timeout, context,
        )
        rows = await bounded(
            self._uow.journal.list_for_project(project_id),
            self._timeout, "load_journal", context,
        )
        return project_journal(rows)

    async def task_ledger_total(self, task_id: TaskId) -> int:
        """Running total recomputed from the ledger."""
        return await bounded(
            self._uow.journal.total_for_task(task_id),
            self._timeout, "ledger_total",
            ErrorContext(task_id=str(task_id)),
        )
