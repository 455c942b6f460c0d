"""Journal Projection — minimal-disclosure shape of time ledger rows.

Invariants:
    - Output records carry no identity field at any nesting level
    - Only the listed task/user attributes are exposed
    - Input order is preserved (ordering is the repository's job)
"""

from datetime import datetime


def project_journal_row(row: dict) -> dict:
    """Shape one flat ledger row into the public record.

    Expected keys: task_title, task_is_completed, task_time_spent,
    user_name, user_email, time_spent, date.
    """
    date = row["date"]
    return {
        "task": {
            "title": row["task_title"],
            "isCompleted": row["task_is_completed"],
            "timeSpent": row["task_time_spent"],
        },
        "user": {"name": row["user_name"], "email": row["user_email"]},
        "timeSpent": row["time_spent"],
        "date": date.isoformat() if isinstance(date, datetime) else date,
    }


def project_journal(rows: list[dict]) -> list[dict]:
    return [project_journal_row(r) for r in rows]
