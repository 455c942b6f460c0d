"""Task Patch — tests for touched-field detection, patch checks and field application.

Tests cover:
    - blank titles are never touched; empty descriptions are
    - validate_patch rejects non-integer priority and non-positive deltas
    - apply_simple_fields trims, clears, parses
"""

from types import SimpleNamespace

from tasktrack.core.domain_types import TaskField
from tasktrack.core.task_patch import (
    TaskPatch,
    apply_simple_fields,
    apply_time_delta,
    check_priority,
    check_time_delta,
    touched_fields,
    validate_patch,
)


def _task(**overrides) -> SimpleNamespace:
    fields = {
        "title": "Original", "description": "Keep me", "priority": 1,
        "is_completed": False, "time_spent": 10,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


# ─── touched_fields ──────────────────────────────────────────────

def test_empty_patch_touches_nothing():
    assert touched_fields(TaskPatch()) == frozenset()


def test_blank_title_is_not_touched():
    assert TaskField.TITLE not in touched_fields(TaskPatch(title=""))
    assert TaskField.TITLE not in touched_fields(TaskPatch(title="   "))


def test_empty_description_is_touched():
    assert touched_fields(TaskPatch(description="")) == {TaskField.DESCRIPTION}


def test_is_completed_false_is_touched():
    assert touched_fields(TaskPatch(is_completed=False)) == {TaskField.IS_COMPLETED}


def test_every_field_touched():
    patch = TaskPatch(
        title="New", description="d", priority=3, is_completed=True,
        time_spent_delta=5, assigned_by_email="bob@example.com",
    )
    assert touched_fields(patch) == frozenset(TaskField)


def test_blank_priority_and_email_are_not_touched():
    patch = TaskPatch(priority=" ", assigned_by_email="")
    assert touched_fields(patch) == frozenset()


# ─── checks ──────────────────────────────────────────────────────

def test_priority_string_of_digits_is_valid():
    assert check_priority(TaskPatch(priority="7")) is None


def test_priority_non_integer_rejected():
    error = check_priority(TaskPatch(priority="high"))
    assert error is not None
    assert error.code == "VALIDATION_ERROR"
    assert error.field == "priority"
    assert error.http_status == 400


def test_zero_delta_rejected():
    error = check_time_delta(TaskPatch(time_spent_delta=0))
    assert error is not None
    assert error.field == "timeSpent"


def test_negative_delta_rejected():
    assert check_time_delta(TaskPatch(time_spent_delta=-30)) is not None


def test_boolean_delta_rejected():
    assert check_time_delta(TaskPatch(time_spent_delta=True)) is not None


def test_validate_patch_returns_first_error():
    error = validate_patch(TaskPatch(priority="x", time_spent_delta=-1))
    assert error.field == "priority"


def test_validate_patch_passes_clean_patch():
    assert validate_patch(TaskPatch(priority=2, time_spent_delta=30)) is None


# ─── apply ───────────────────────────────────────────────────────

def test_apply_trims_title_and_description():
    task = _task()
    apply_simple_fields(task, TaskPatch(title="  New title ", description=" notes "))
    assert task.title == "New title"
    assert task.description == "notes"


def test_apply_empty_description_clears_it():
    task = _task()
    apply_simple_fields(task, TaskPatch(description=""))
    assert task.description is None


def test_apply_blank_title_leaves_title_unchanged():
    task = _task()
    apply_simple_fields(task, TaskPatch(title="   "))
    assert task.title == "Original"


def test_apply_parses_priority_and_sets_completion():
    task = _task()
    apply_simple_fields(task, TaskPatch(priority="4", is_completed=True))
    assert task.priority == 4
    assert task.is_completed is True


def test_apply_time_delta_accumulates():
    task = _task(time_spent=10)
    apply_time_delta(task, 30)
    apply_time_delta(task, 5)
    assert task.time_spent == 45
