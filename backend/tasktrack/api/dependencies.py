"""API Dependencies — per-request wiring of unit of work, oracle, and services.

Invariants:
    - One SqlUnitOfWork (one AsyncSession) per request, shared by every service of that request
    - The actor comes from the configured header; missing or malformed -> 401
    - The notification dispatcher is process-wide (deliveries outlive requests)

Design Decisions:
    - FastAPI Depends chain over a container: every collaborator can be swapped in tests
      through app.dependency_overrides
"""

from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrack.config import get_settings
from tasktrack.core.domain_types import UserId
from tasktrack.core.errors import AuthenticationRequiredError
from tasktrack.core.repository_protocols import RightsOracle
from tasktrack.infrastructure.database import get_db
from tasktrack.infrastructure.notifier import build_notifier
from tasktrack.infrastructure.rights_oracle import MembershipRightsOracle
from tasktrack.infrastructure.sql_repositories import SqlUnitOfWork
from tasktrack.services.accountability_resolver import AccountabilityResolver
from tasktrack.services.notification_dispatch import (
    AssignmentNotificationDispatcher,
)
from tasktrack.services.task_lifecycle import TaskLifecycleService
from tasktrack.services.task_mutation import TaskMutationService
from tasktrack.services.time_journal import TimeJournalService

_dispatcher: AssignmentNotificationDispatcher | None = None


def init_notifications() -> AssignmentNotificationDispatcher:
    global _dispatcher
    settings = get_settings()
    _dispatcher = AssignmentNotificationDispatcher(
        build_notifier(settings), settings.notifier_timeout_seconds,
    )
    return _dispatcher


def get_notification_dispatcher() -> AssignmentNotificationDispatcher:
    return _dispatcher or init_notifications()


def get_actor_id(request: Request) -> UserId:
    raw = request.headers.get(get_settings().actor_header)
    if not raw:
        raise AuthenticationRequiredError()
    try:
        return UserId(UUID(raw))
    except ValueError:
        raise AuthenticationRequiredError()


def get_uow(db: AsyncSession = Depends(get_db)) -> SqlUnitOfWork:
    return SqlUnitOfWork(db)


def get_rights_oracle(uow: SqlUnitOfWork = Depends(get_uow)) -> RightsOracle:
    return MembershipRightsOracle(uow.projects)


def get_task_lifecycle_service(
    uow: SqlUnitOfWork = Depends(get_uow),
    oracle: RightsOracle = Depends(get_rights_oracle),
) -> TaskLifecycleService:
    timeout = get_settings().repository_timeout_seconds
    return TaskLifecycleService(
        uow, oracle, AccountabilityResolver(uow, timeout), timeout,
    )


def get_task_mutation_service(
    uow: SqlUnitOfWork = Depends(get_uow),
    oracle: RightsOracle = Depends(get_rights_oracle),
    notifications: AssignmentNotificationDispatcher = Depends(
        get_notification_dispatcher,
    ),
) -> TaskMutationService:
    return TaskMutationService(
        uow, oracle, notifications,
        get_settings().repository_timeout_seconds,
    )


def get_time_journal_service(
    uow: SqlUnitOfWork = Depends(get_uow),
    oracle: RightsOracle = Depends(get_rights_oracle),
) -> TimeJournalService:
    return TimeJournalService(
        uow, oracle, get_settings().repository_timeout_seconds,
    )
