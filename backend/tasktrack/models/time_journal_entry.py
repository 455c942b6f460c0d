"""TimeJournalEntry ORM — immutable record of time logged against a task.

Invariants:
    - Append-only: rows are inserted, never updated
    - time_spent > 0 (CHECK constraint)
    - sum(time_spent) over a task equals Task.time_spent
    - Rows of a task are removed only together with the task
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tasktrack.db.base import Base


class TimeJournalEntry(Base):
    """Ledger row — who logged how many minutes on which task, and when."""
    __tablename__ = "time_journal_entries"
    __table_args__ = (
        CheckConstraint("time_spent > 0", name="ck_journal_time_spent_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    task_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    time_spent: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    task: Mapped["Task"] = relationship("Task")
    user: Mapped["User"] = relationship("User")
