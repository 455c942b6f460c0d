"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TaskId, ProjectId, UserId, JournalEntryId wrap UUIDs — never use bare UUID in domain logic
    - Minutes is a non-negative count of minutes
    - All valid actions, roles and task fields encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

TaskId = NewType("TaskId", UUID)
ProjectId = NewType("ProjectId", UUID)
UserId = NewType("UserId", UUID)
JournalEntryId = NewType("JournalEntryId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

Minutes = NewType("Minutes", int)   # >= 0


# ─── Enums ───────────────────────────────────────────────────────

class TaskAction(str, Enum):
    """Actions the rights oracle is asked about."""
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class MemberRole(str, Enum):
    """Project membership roles — maps to DB `project_members.role`."""
    OWNER = "owner"
    MEMBER = "member"
    OBSERVER = "observer"


class TaskField(str, Enum):
    """Mutable task fields — the unit of field-level authorization."""
    TITLE = "title"
    DESCRIPTION = "description"
    PRIORITY = "priority"
    IS_COMPLETED = "isCompleted"
    TIME_SPENT = "timeSpent"
    ASSIGNED = "assigned"
