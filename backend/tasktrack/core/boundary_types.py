"""Boundary Types — value objects exchanged with the rights oracle and notifier.

Invariants:
    - RightsDecision.allowed=False always carries a non-empty reason
    - ActorRef is immutable and safe to hand to fire-and-forget tasks

Design Decisions:
    - Frozen dataclasses: safe to share across await points
"""

from dataclasses import dataclass

from tasktrack.core.domain_types import UserId


@dataclass(frozen=True)
class RightsDecision:
    """Answer of the rights oracle for one (project, actor, action, fields) query."""
    allowed: bool
    reason: str = ""

    @classmethod
    def allow(cls) -> "RightsDecision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "RightsDecision":
        if not reason:
            raise ValueError("deny requires a reason")
        return cls(False, reason)


@dataclass(frozen=True)
class ActorRef:
    """The user who performed an action, as shown to notification recipients."""
    id: UserId
    name: str | None = None
    email: str | None = None
