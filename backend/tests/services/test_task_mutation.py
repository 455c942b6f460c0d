"""Task Mutation — update_task against the SQL unit of work with fake oracle/notifier.

Invariants under test:
    - blank title never changes the stored title
    - a denied field rejects the whole patch and mutates nothing
    - timeSpentDelta adds to the total and writes exactly one journal entry
    - reassignment notifies the new assignee exactly once, never failing the update
    - unknown assignee aborts the update with nothing written and no notice
    - stale task versions surface as ConcurrencyError
"""

from uuid import uuid4

import pytest
from sqlalchemy import select, update

from tasktrack.core.domain_types import TaskAction, TaskField
from tasktrack.core.errors import (
    AssigneeNotFoundError,
    ConcurrencyError,
    ForbiddenError,
    ResourceNotFoundError,
    TaskValidationError,
)
from tasktrack.core.task_patch import TaskPatch
from tasktrack.models.task import Task
from tasktrack.models.time_journal_entry import TimeJournalEntry
from tasktrack.services.task_mutation import TaskMutationService


@pytest.fixture
def service(uow, oracle, dispatcher, clock):
    return TaskMutationService(uow, oracle, dispatcher, clock=clock)


@pytest.fixture
async def journal_rows(test_session_factory):
    async def _rows(task_id):
        async with test_session_factory() as session:
            result = await session.execute(
                select(TimeJournalEntry).where(TimeJournalEntry.task_id == task_id),
            )
            return list(result.scalars().all())
    return _rows


async def test_simple_fields_are_applied_and_persisted(service, seed, load_task):
    result = await service.update_task(
        seed.project_id, seed.task_id, seed.bob_id,
        TaskPatch(title=" Ship notes ", description="", priority="5", is_completed=True),
    )
    assert result["title"] == "Ship notes"
    stored = await load_task(seed.task_id)
    assert stored.title == "Ship notes"
    assert stored.description is None
    assert stored.priority == 5
    assert stored.is_completed is True


async def test_blank_title_leaves_title_unchanged(service, seed, load_task, oracle):
    await service.update_task(
        seed.project_id, seed.task_id, seed.bob_id, TaskPatch(title="", priority=9),
    )
    stored = await load_task(seed.task_id)
    assert stored.title == "Write launch notes"
    assert stored.priority == 9
    assert oracle.calls[0][3] == frozenset({TaskField.PRIORITY})


async def test_authorization_asked_once_for_whole_field_set(service, seed, oracle):
    await service.update_task(
        seed.project_id, seed.task_id, seed.bob_id,
        TaskPatch(title="New", time_spent_delta=10),
    )
    assert len(oracle.calls) == 1
    project_id, actor_id, action, fields = oracle.calls[0]
    assert (project_id, actor_id, action) == (seed.project_id, seed.bob_id, TaskAction.UPDATE)
    assert fields == {TaskField.TITLE, TaskField.TIME_SPENT}


async def test_one_denied_field_rejects_entire_patch(
    service, seed, oracle, load_task, journal_rows,
):
    oracle.denied_fields = frozenset({TaskField.PRIORITY})
    with pytest.raises(ForbiddenError) as exc_info:
        await service.update_task(
            seed.project_id, seed.task_id, seed.dave_id,
            TaskPatch(title="Hijacked", description="gone", priority=1, time_spent_delta=60),
        )
    assert exc_info.value.reason == "Field not editable"
    stored = await load_task(seed.task_id)
    assert stored.title == "Write launch notes"
    assert stored.description == "Draft"
    assert stored.priority == 2
    assert stored.time_spent == 0
    assert await journal_rows(seed.task_id) == []


async def test_time_delta_increments_total_and_appends_one_entry(
    service, seed, load_task, journal_rows,
):
    result = await service.update_task(
        seed.project_id, seed.task_id, seed.bob_id, TaskPatch(time_spent_delta=30),
    )
    assert result["timeSpent"] == "30m"
    assert (await load_task(seed.task_id)).time_spent == 30
    [entry] = await journal_rows(seed.task_id)
    assert entry.time_spent == 30
    assert entry.user_id == seed.bob_id


async def test_running_total_matches_ledger(service, seed, uow, load_task):
    await service.update_task(
        seed.project_id, seed.task_id, seed.bob_id, TaskPatch(time_spent_delta=30),
    )
    await service.update_task(
        seed.project_id, seed.task_id, seed.alice_id, TaskPatch(time_spent_delta=95),
    )
    stored = await load_task(seed.task_id)
    assert stored.time_spent == 125
    assert await uow.journal.total_for_task(seed.task_id) == 125


async def test_non_positive_delta_is_validation_error(service, seed, load_task):
    with pytest.raises(TaskValidationError):
        await service.update_task(
            seed.project_id, seed.task_id, seed.bob_id,
            TaskPatch(title="Renamed", time_spent_delta=0),
        )
    assert (await load_task(seed.task_id)).title == "Write launch notes"


async def test_reassignment_notifies_new_assignee_once(
    service, seed, dispatcher, notifier, load_task,
):
    result = await service.update_task(
        seed.project_id, seed.task_id, seed.alice_id,
        TaskPatch(assigned_by_email="bob@example.com"),
    )
    await dispatcher.drain()
    assert result["assigned"] == str(seed.bob_id)
    assert (await load_task(seed.task_id)).assigned_id == seed.bob_id
    assert len(notifier.calls) == 1
    recipient, task_id, actor = notifier.calls[0]
    assert recipient == "bob@example.com"
    assert task_id == seed.task_id
    assert actor.id == seed.alice_id
    assert actor.email == "alice@example.com"


async def test_failing_notifier_does_not_fail_update(
    service, seed, dispatcher, notifier, load_task,
):
    notifier.fail = True
    await service.update_task(
        seed.project_id, seed.task_id, seed.alice_id,
        TaskPatch(assigned_by_email="carol@example.com"),
    )
    await dispatcher.drain()
    assert len(notifier.calls) == 1
    assert (await load_task(seed.task_id)).assigned_id == seed.carol_id


async def test_no_notification_without_reassignment(service, seed, dispatcher, notifier):
    await service.update_task(
        seed.project_id, seed.task_id, seed.bob_id, TaskPatch(title="Quiet"),
    )
    await dispatcher.drain()
    assert notifier.calls == []


async def test_unknown_assignee_aborts_whole_update(
    service, seed, dispatcher, notifier, load_task, journal_rows,
):
    with pytest.raises(AssigneeNotFoundError) as exc_info:
        await service.update_task(
            seed.project_id, seed.task_id, seed.bob_id,
            TaskPatch(
                title="Should not stick", time_spent_delta=20,
                assigned_by_email="nobody@example.com",
            ),
        )
    await dispatcher.drain()
    assert exc_info.value.http_status == 404
    stored = await load_task(seed.task_id)
    assert stored.title == "Write launch notes"
    assert stored.time_spent == 0
    assert stored.assigned_id is None
    assert await journal_rows(seed.task_id) == []
    assert notifier.calls == []


async def test_missing_task_is_not_found(service, seed):
    with pytest.raises(ResourceNotFoundError):
        await service.update_task(
            seed.project_id, uuid4(), seed.bob_id, TaskPatch(title="x"),
        )


async def test_task_of_other_project_is_not_found(service, seed):
    with pytest.raises(ResourceNotFoundError):
        await service.update_task(
            seed.other_project_id, seed.task_id, seed.dave_id, TaskPatch(title="x"),
        )


async def test_stale_version_is_concurrency_error(
    service, seed, uow, test_db, journal_rows,
):
    await uow.tasks.get(seed.task_id)
    # Another writer commits a newer version behind this session's back
    await test_db.execute(
        update(Task.__table__)
        .where(Task.__table__.c.id == seed.task_id)
        .values(version=Task.__table__.c.version + 1),
    )
    with pytest.raises(ConcurrencyError) as exc_info:
        await service.update_task(
            seed.project_id, seed.task_id, seed.bob_id, TaskPatch(time_spent_delta=10),
        )
    assert exc_info.value.http_status == 409
    assert await journal_rows(seed.task_id) == []
