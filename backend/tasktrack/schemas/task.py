"""Task Schemas — Pydantic models for task request bodies.

Invariants:
    - Both camelCase (wire) and snake_case names are accepted
    - Blank strings for numeric/boolean/email fields mean "not sent"
    - description keeps "" (it means "clear the description")
    - TaskCreate.title is optional here: a blank title is reported by the service
      as EMPTY_TITLE rather than as a generic schema error

Design Decisions:
    - Schemas convert to the core TaskPatch dataclass: the service never sees Pydantic
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tasktrack.core.task_patch import TaskPatch


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class TaskCreate(BaseModel):
    """Task creation body."""
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(
        None, max_length=500,
        validation_alias=AliasChoices("title", "taskTitle"),
    )
    description: str | None = Field(
        None, max_length=10_000,
        validation_alias=AliasChoices("description", "taskDescription"),
    )
    priority: int | None = Field(
        None, validation_alias=AliasChoices("priority", "taskPriority"),
    )

    @field_validator("priority", mode="before")
    @classmethod
    def blank_priority(cls, v):
        return _blank_to_none(v)


class TaskPatchBody(BaseModel):
    """Partial task update body. Omitted fields are left untouched."""
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(None, max_length=500)
    description: str | None = Field(None, max_length=10_000)
    priority: int | None = None
    is_completed: bool | None = Field(
        None, validation_alias=AliasChoices("isCompleted", "is_completed"),
    )
    time_spent_delta: int | None = Field(
        None, gt=0,
        validation_alias=AliasChoices("timeSpentDelta", "time_spent_delta"),
    )
    assigned_by_email: str | None = Field(
        None, max_length=320,
        validation_alias=AliasChoices("assignedByEmail", "assigned_by_email"),
    )

    @field_validator(
        "priority", "is_completed", "time_spent_delta", "assigned_by_email",
        mode="before",
    )
    @classmethod
    def blank_is_absent(cls, v):
        return _blank_to_none(v)

    def to_patch(self) -> TaskPatch:
        return TaskPatch(
            title=self.title,
            description=self.description,
            priority=self.priority,
            is_completed=self.is_completed,
            time_spent_delta=self.time_spent_delta,
            assigned_by_email=self.assigned_by_email,
        )
