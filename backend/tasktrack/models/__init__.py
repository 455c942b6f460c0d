"""ORM models. Importing this package registers every table on Base.metadata.

A project owns its tasks (tasks.parent_id) and a task owns its journal entries.
"""

from tasktrack.models.user import User  # noqa: F401
from tasktrack.models.project import Project, ProjectMember  # noqa: F401
from tasktrack.models.task import Task  # noqa: F401
from tasktrack.models.time_journal_entry import TimeJournalEntry  # noqa: F401
