"""Notification Dispatch — fire-and-forget delivery of assignment notices.

Invariants:
    - dispatch() never blocks the caller and never raises
    - Delivery failures and timeouts are logged, never propagated
    - Every in-flight delivery is tracked until it finishes; drain() awaits them all

Design Decisions:
    - Process-wide dispatcher (created in the lifespan) rather than per request:
      deliveries outlive the request that scheduled them
    - Strong references in _pending: asyncio only keeps weak references to tasks
"""

import asyncio
import logging

from tasktrack.core.boundary_types import ActorRef
from tasktrack.core.domain_types import TaskId
from tasktrack.core.repository_protocols import Notifier

logger = logging.getLogger(__name__)


class AssignmentNotificationDispatcher:
    """Schedules Notifier.notify_assigned calls in the background."""

    def __init__(self, notifier: Notifier, timeout_seconds: float = 5.0):
        self.notifier = notifier
        self.timeout_seconds = timeout_seconds
        self._pending: set[asyncio.Task] = set()

    def dispatch(
        self, recipient_email: str, task_id: TaskId, actor: ActorRef,
    ) -> None:
        job = asyncio.create_task(
            self._deliver(recipient_email, task_id, actor),
        )
        self._pending.add(job)
        job.add_done_callback(self._pending.discard)

    async def _deliver(
        self, recipient_email: str, task_id: TaskId, actor: ActorRef,
    ) -> None:
        try:
            await asyncio.wait_for(
                self.notifier.notify_assigned(recipient_email, task_id, actor),
                self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Assignment notice to {recipient_email} timed out",
                extra={"task_id": task_id, "actor_id": actor.id},
            )
        except Exception as e:
            logger.error(
                f"Assignment notice to {recipient_email} failed: {e}",
                extra={"task_id": task_id, "actor_id": actor.id},
                exc_info=True,
            )

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every in-flight delivery (shutdown, tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
