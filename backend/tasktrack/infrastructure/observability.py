"""Structured Logging — one JSON object per log line, with request identities attached.

Invariants:
    - Every line carries ts (from the record, not the formatter), level, logger, msg
    - Identity extras (project_id, task_id, actor_id) and error_code/path/operation
      are copied only when the caller passed them
    - setup_logging replaces its own handler on re-entry; it never stacks handlers

Design Decisions:
    - stdlib logging + a small formatter: every module logs through logging.getLogger
      and passes identities via extra=
    - Chatty third-party loggers (sqlalchemy.engine, httpx) pinned to WARNING
"""

import json
import logging
from datetime import datetime, timezone

SERVICE_NAME = "tasktrack-api"

CONTEXT_FIELDS = (
    "project_id", "task_id", "actor_id", "error_code", "path", "operation",
)

_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore")
_HANDLER_NAME = "tasktrack"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = str(value)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the process log handler. fmt is "json" or "text"."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        ),
    )
    root.addHandler(handler)
    root.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
