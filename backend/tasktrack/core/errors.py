"""Error Hierarchy — every TaskTrack failure mode as one typed exception.

Invariants:
    - Each error carries code, category, severity and the HTTP status it maps to
    - 4xx errors describe the caller's mistake; 5xx errors are opaque (RepositoryError)
    - to_response() is the only REST error envelope; subclasses add keys via _details()
    - ErrorContext identities are strings so they serialize into logs and responses as-is

Design Decisions:
    - One TaskTrackError base: a single FastAPI handler renders every domain failure
    - Core functions return these errors, services raise them (first error wins)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Which request the error belongs to."""
    project_id: str | None = None
    task_id: str | None = None
    actor_id: str | None = None
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class TaskTrackError(Exception):
    """Base exception for all TaskTrack errors."""

    def __init__(
        self, message: str, code: str, category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None, http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def _details(self) -> dict:
        return {}

    def to_response(self) -> dict:
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "project_id": self.context.project_id,
                "task_id": self.context.task_id,
            },
        }
        body.update(self._details())
        return {"error": body}


# ─── Caller Errors (400-level) ──────────────────────────────────

class TaskValidationError(TaskTrackError):
    """Patch, query or persisted task violates the task schema."""
    def __init__(
        self, message: str, field: str | None = None,
        code: str = "VALIDATION_ERROR", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field

    def _details(self) -> dict:
        return {"field": self.field} if self.field else {}


class AuthenticationRequiredError(TaskTrackError):
    """Request carries no usable actor identity."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Actor identity missing or malformed",
            "AUTHENTICATION_REQUIRED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(TaskTrackError):
    """Rights oracle denied the action. The reason is surfaced to the caller."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            reason, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.reason = reason


class ResourceNotFoundError(TaskTrackError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str,
        context: ErrorContext | None = None, code: str = "RESOURCE_NOT_FOUND",
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ProjectNotFoundError(ResourceNotFoundError):
    """Parent project of a task could not be loaded."""
    def __init__(self, project_id: str, context: ErrorContext | None = None):
        super().__init__("Project", project_id, context, "PROJECT_NOT_FOUND")


class AssigneeNotFoundError(TaskTrackError):
    """Assignment email does not resolve to a user."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            f"No user found with email '{email}'",
            "ASSIGNEE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.email = email


class ConcurrencyError(TaskTrackError):
    """Concurrent modification detected (stale task version)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class RepositoryError(TaskTrackError):
    """Opaque persistence failure. Detail stays in server logs."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            "An unexpected error occurred",
            "REPOSITORY_FAILURE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
