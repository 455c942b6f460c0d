"""Error Handlers — exception-to-response mapping for the TaskTrack API.

Invariants:
    - TaskTrackError -> its own http_status with to_response() as body
    - RequestValidationError -> 400 VALIDATION_ERROR with one detail per failing field
    - Anything else -> 500 INTERNAL_ERROR, message never includes the exception text
    - 5xx logged at error level with traceback; 4xx at warning without one
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tasktrack.core.errors import ErrorCategory, ErrorSeverity, TaskTrackError

logger = logging.getLogger(__name__)


def _error_body(code: str, message: str, category: str, severity: ErrorSeverity, **more) -> dict:
    return {
        "error": {
            "code": code, "message": message,
            "category": category, "severity": severity.value, **more,
        },
    }


async def handle_tasktrack_error(request: Request, exc: TaskTrackError) -> JSONResponse:
    extra = {
        "error_code": exc.code,
        "path": request.url.path,
        "project_id": exc.context.project_id,
        "task_id": exc.context.task_id,
        "actor_id": exc.context.actor_id,
    }
    if exc.http_status >= 500:
        logger.error(
            f"{exc.code}: {exc.message}", extra=extra,
            exc_info=exc.__cause__ is not None,
        )
    else:
        logger.warning(f"{exc.code}: {exc.message}", extra=extra)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected request body: {len(details)} invalid field(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=400,
        content=_error_body(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION.value, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__}", extra={"path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content=_error_body(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL.value, ErrorSeverity.CRITICAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskTrackError, handle_tasktrack_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
