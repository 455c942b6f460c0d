"""Accountability View — pure rendering of "who is responsible" for a task.

Invariants:
    - Accountable party is task.assigned when set, otherwise task.author
    - Every person renders as "<name> (<email>)"
    - Member order is the project's stored membership order, never re-sorted
"""

from tasktrack.core.repository_protocols import MemberLike, TaskLike, UserLike


def display_string(user: UserLike) -> str:
    return f"{user.name} ({user.email})"


def accountable_party(task: TaskLike) -> UserLike:
    """Assignee if set, else author. Requires people loaded on the task."""
    return task.assigned if task.assigned is not None else task.author


def build_accountability_view(
    task: TaskLike, members: list[MemberLike],
) -> dict:
    """{"assigned": str, "members": [str]} for display."""
    return {
        "assigned": display_string(accountable_party(task)),
        "members": [display_string(m.user) for m in members],
    }
