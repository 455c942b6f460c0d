"""Task Views — JSON shapes of a task for API responses.

Invariants:
    - Only fields listed in READABLE_FIELDS can be read one-by-one; anything else is rejected
    - "assigned" is never read through READABLE_FIELDS (it resolves to the accountability view)
    - Identities are rendered as strings; author in read views is {name, email}
    - task_to_json(render_duration=True) renders timeSpent via format_duration

Design Decisions:
    - Explicit accessor table over getattr(task, field): unlisted attributes
      (version, foreign keys) can never leak through the field query
"""

from typing import Any, Callable

from tasktrack.core.duration import format_duration
from tasktrack.core.errors import TaskValidationError
from tasktrack.core.repository_protocols import TaskLike

ASSIGNED_FIELD = "assigned"


def _person(user) -> dict:
    return {"name": user.name, "email": user.email}


READABLE_FIELDS: dict[str, Callable[[TaskLike], Any]] = {
    "title": lambda t: t.title,
    "description": lambda t: t.description,
    "priority": lambda t: t.priority,
    "isCompleted": lambda t: t.is_completed,
    "timeSpent": lambda t: t.time_spent,
    "author": lambda t: _person(t.author),
    "parent": lambda t: str(t.parent_id),
    "attachments": lambda t: list(t.attachments or []),
}


def check_readable_field(field: str) -> TaskValidationError | None:
    if field == ASSIGNED_FIELD or field in READABLE_FIELDS:
        return None
    return TaskValidationError(
        f"Field '{field}' cannot be read", field=field, code="UNKNOWN_FIELD",
    )


def read_field(task: TaskLike, field: str) -> dict:
    """{field: value} for one readable field."""
    return {field: READABLE_FIELDS[field](task)}


def task_to_json(task: TaskLike, *, render_duration: bool = False) -> dict:
    """Flat task JSON with references as ids (update response shape)."""
    return {
        "id": str(task.id),
        "title": task.title,
        "description": task.description,
        "priority": task.priority,
        "isCompleted": task.is_completed,
        "timeSpent": (
            format_duration(task.time_spent) if render_duration
            else task.time_spent
        ),
        "author": str(task.author_id),
        "assigned": str(task.assigned_id) if task.assigned_id else None,
        "parent": str(task.parent_id),
        "attachments": list(task.attachments or []),
    }


def whole_task_view(task: TaskLike, accountability: dict) -> dict:
    """Task JSON for reads: author expanded, assigned replaced by the accountability view."""
    view = task_to_json(task)
    view["author"] = _person(task.author)
    view[ASSIGNED_FIELD] = accountability
    return view
