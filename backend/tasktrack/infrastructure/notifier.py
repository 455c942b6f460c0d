"""Assignment Notifiers — deliver "you were assigned" notices.

Invariants:
    - notify_assigned raises on delivery failure; callers decide whether that matters
      (the task mutation service logs and drops it)
    - No task content beyond ids, the recipient and the assigning actor is sent

Design Decisions:
    - Webhook over direct mail: mail transport belongs to whatever sits behind the URL
    - LoggingNotifier when no webhook is configured: local and test runs need no receiver
"""

import logging

import httpx

from tasktrack.config import Settings
from tasktrack.core.boundary_types import ActorRef
from tasktrack.core.domain_types import TaskId

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Writes the notice to the application log only."""

    async def notify_assigned(
        self, recipient_email: str, task_id: TaskId, actor: ActorRef,
    ) -> None:
        logger.info(
            f"Task assigned to {recipient_email} by {actor.email or actor.id}",
            extra={"task_id": task_id, "actor_id": actor.id},
        )


class WebhookNotifier:
    """POSTs the notice as JSON to a configured URL."""

    def __init__(self, url: str, timeout_seconds: float = 5.0):
        self.url = url
        self.timeout_seconds = timeout_seconds

    async def notify_assigned(
        self, recipient_email: str, task_id: TaskId, actor: ActorRef,
    ) -> None:
        payload = {
            "event": "task_assigned",
            "recipient": recipient_email,
            "task_id": str(task_id),
            "assigned_by": {
                "id": str(actor.id), "name": actor.name, "email": actor.email,
            },
        }
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            response = await client.post(self.url, json=payload)
            response.raise_for_status()


def build_notifier(settings: Settings) -> LoggingNotifier | WebhookNotifier:
    if settings.notifier_webhook_url:
        return WebhookNotifier(
            settings.notifier_webhook_url, settings.notifier_timeout_seconds,
        )
    return LoggingNotifier()
