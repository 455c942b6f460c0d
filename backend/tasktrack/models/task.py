"""Task ORM — unit of work belonging to a project.

Invariants:
    - title is non-empty after trim (CHECK constraint)
    - time_spent >= 0 and only grows through the time journal
    - author_id and parent_id are set at creation and never changed
    - version increments on every UPDATE; a stale version raises StaleDataError on flush

Design Decisions:
    - version_id_col for optimistic concurrency: two concurrent updates of the same
      task cannot silently overwrite each other's time_spent
    - attachments stored as an opaque JSON list (storage lives elsewhere)
    - author/assigned relationships are loaded explicitly by the repository
      (selectinload) — lazy loads are not available in async sessions
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, Integer, Boolean, DateTime, JSON, ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tasktrack.db.base import Base


class Task(Base):
    """Task entity — mutated only through the task mutation service."""
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint("length(trim(title)) > 0", name="ck_tasks_title_not_blank"),
        CheckConstraint("time_spent >= 0", name="ck_tasks_time_spent_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    parent_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    assigned_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    time_spent: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    attachments: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    author: Mapped["User"] = relationship("User", foreign_keys=[author_id])
    assigned: Mapped["User"] = relationship(
        "User", foreign_keys=[assigned_id],
    )
