"""Task Patch — pure rules for partial task updates.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - touched_fields() is the exact field set sent to the rights oracle
    - A blank title is never touched; an empty description IS touched (it clears)
    - check_* functions return an error on violation, None on success
    - validate_patch chains all checks — first error wins
    - apply_* functions are only called after every check has passed

Design Decisions:
    - TaskPatch is a core dataclass, not the Pydantic schema: core stays free of
      API-layer imports and non-HTTP callers get the same rules
    - Errors returned (not raised) so the orchestrator can run its stages as a
      short-circuiting chain before touching the task
"""

from dataclasses import dataclass

from tasktrack.core.domain_types import TaskField
from tasktrack.core.errors import TaskValidationError
from tasktrack.core.repository_protocols import TaskLike


@dataclass(frozen=True)
class TaskPatch:
    """Partial update. None means 'not sent'."""
    title: str | None = None
    description: str | None = None
    priority: int | str | None = None
    is_completed: bool | None = None
    time_spent_delta: int | None = None
    assigned_by_email: str | None = None

    @property
    def has_title(self) -> bool:
        return self.title is not None and bool(self.title.strip())

    @property
    def has_priority(self) -> bool:
        if self.priority is None:
            return False
        return not (isinstance(self.priority, str) and not self.priority.strip())

    @property
    def has_assignee(self) -> bool:
        return (
            self.assigned_by_email is not None
            and bool(self.assigned_by_email.strip())
        )


def touched_fields(patch: TaskPatch) -> frozenset[TaskField]:
    """Fields the patch actually changes, for authorization."""
    touched = set()
    if patch.has_title:
        touched.add(TaskField.TITLE)
    if patch.description is not None:
        touched.add(TaskField.DESCRIPTION)
    if patch.has_priority:
        touched.add(TaskField.PRIORITY)
    if patch.is_completed is not None:
        touched.add(TaskField.IS_COMPLETED)
    if patch.time_spent_delta is not None:
        touched.add(TaskField.TIME_SPENT)
    if patch.has_assignee:
        touched.add(TaskField.ASSIGNED)
    return frozenset(touched)


def parse_priority(value: int | str) -> int:
    """Priority as integer. Raises ValueError for anything else."""
    if isinstance(value, bool):
        raise ValueError("priority must be an integer")
    if isinstance(value, int):
        return value
    return int(value.strip(), 10)


def check_priority(patch: TaskPatch) -> TaskValidationError | None:
    if not patch.has_priority:
        return None
    try:
        parse_priority(patch.priority)
    except ValueError:
        return TaskValidationError(
            f"priority must be an integer, got {patch.priority!r}",
            field=TaskField.PRIORITY.value,
        )
    return None


def check_time_delta(patch: TaskPatch) -> TaskValidationError | None:
    """Time is only ever added, in whole positive minutes."""
    delta = patch.time_spent_delta
    if delta is None:
        return None
    if isinstance(delta, bool) or not isinstance(delta, int) or delta < 1:
        return TaskValidationError(
            f"timeSpentDelta must be a positive integer, got {delta!r}",
            field=TaskField.TIME_SPENT.value,
        )
    return None


def validate_patch(patch: TaskPatch) -> TaskValidationError | None:
    """Chain all patch checks. Returns first error or None."""
    return check_priority(patch) or check_time_delta(patch)


def apply_simple_fields(task: TaskLike, patch: TaskPatch) -> None:
    """Copy title/description/priority/is_completed onto the task."""
    if patch.has_title:
        task.title = patch.title.strip()
    if patch.description is not None:
        task.description = patch.description.strip() or None
    if patch.has_priority:
        task.priority = parse_priority(patch.priority)
    if patch.is_completed is not None:
        task.is_completed = patch.is_completed


def apply_time_delta(task: TaskLike, delta: int) -> None:
    task.time_spent = (task.time_spent or 0) + delta
