"""Task and journal routes — HTTP status mapping and end-to-end flows."""

from uuid import uuid4

from tasktrack.infrastructure import database


def _tasks_url(project_id, task_id=None):
    url = f"/api/v1/projects/{project_id}/tasks"
    return f"{url}/{task_id}" if task_id else url


async def test_missing_actor_header_is_401(client, seed):
    response = await client.get(_tasks_url(seed.project_id, seed.task_id))
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


async def test_malformed_actor_header_is_401(client, seed):
    response = await client.get(
        _tasks_url(seed.project_id, seed.task_id), headers={"X-User-Id": "alice"},
    )
    assert response.status_code == 401


async def test_create_log_time_then_reassign_to_unknown_user(
    client, seed, as_user, dispatcher, notifier,
):
    headers = as_user(seed.alice_id)
    created = await client.post(
        _tasks_url(seed.project_id), json={"title": "Fix bug"}, headers=headers,
    )
    assert created.status_code == 200
    task_id = created.json()["id"]

    logged = await client.put(
        _tasks_url(seed.project_id, task_id), json={"timeSpentDelta": 30}, headers=headers,
    )
    assert logged.status_code == 200
    assert logged.json()["timeSpent"] == "30m"

    journal = await client.get(f"/api/v1/projects/{seed.project_id}/journal", headers=headers)
    assert journal.status_code == 200
    fix_bug_entries = [e for e in journal.json() if e["task"]["title"] == "Fix bug"]
    assert len(fix_bug_entries) == 1
    assert fix_bug_entries[0]["timeSpent"] == 30
    assert fix_bug_entries[0]["user"] == {"name": "Alice", "email": "alice@example.com"}

    rejected = await client.put(
        _tasks_url(seed.project_id, task_id),
        json={"assignedByEmail": "nobody@example.com", "title": "Renamed"},
        headers=headers,
    )
    assert rejected.status_code == 404
    assert rejected.json()["error"]["code"] == "ASSIGNEE_NOT_FOUND"

    task = await client.get(_tasks_url(seed.project_id, task_id), headers=headers)
    body = task.json()
    assert body["title"] == "Fix bug"
    assert body["timeSpent"] == 30
    assert body["assigned"]["assigned"] == "Alice (alice@example.com)"

    await dispatcher.drain()
    assert notifier.calls == []


async def test_outsider_cannot_change_priority(client, seed, as_user):
    response = await client.put(
        _tasks_url(seed.project_id, seed.task_id),
        json={"priority": 5}, headers=as_user(seed.dave_id),
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"

    priority = await client.get(
        _tasks_url(seed.project_id, seed.task_id),
        params={"field": "priority"}, headers=as_user(seed.alice_id),
    )
    assert priority.json() == {"priority": 2}


async def test_reassignment_over_http_notifies_assignee(
    client, seed, as_user, dispatcher, notifier,
):
    response = await client.put(
        _tasks_url(seed.project_id, seed.task_id),
        json={"assignedByEmail": "bob@example.com"}, headers=as_user(seed.alice_id),
    )
    assert response.status_code == 200
    assert response.json()["assigned"] == str(seed.bob_id)

    await dispatcher.drain()
    assert [call[0] for call in notifier.calls] == ["bob@example.com"]


async def test_non_positive_delta_is_400(client, seed, as_user):
    response = await client.put(
        _tasks_url(seed.project_id, seed.task_id),
        json={"timeSpentDelta": 0}, headers=as_user(seed.alice_id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_create_with_blank_title_is_400(client, seed, as_user):
    response = await client.post(
        _tasks_url(seed.project_id), json={"title": "  "}, headers=as_user(seed.alice_id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EMPTY_TITLE"


async def test_unknown_task_is_404(client, seed, as_user):
    response = await client.get(
        _tasks_url(seed.project_id, uuid4()), headers=as_user(seed.alice_id),
    )
    assert response.status_code == 404


async def test_delete_then_get_is_404(client, seed, as_user):
    headers = as_user(seed.alice_id)
    deleted = await client.delete(_tasks_url(seed.project_id, seed.task_id), headers=headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"status": "deleted"}

    response = await client.get(_tasks_url(seed.project_id, seed.task_id), headers=headers)
    assert response.status_code == 404


async def test_health(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200


async def test_readiness_without_database_manager(client, monkeypatch):
    monkeypatch.setattr(database, "db_manager", None)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["database"] == "not_initialized"
