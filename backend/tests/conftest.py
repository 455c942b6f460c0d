"""Process-wide test environment: SQLite instead of Postgres, notices logged only."""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.pop("NOTIFIER_WEBHOOK_URL", None)
os.environ.setdefault("LOG_FORMAT", "text")
