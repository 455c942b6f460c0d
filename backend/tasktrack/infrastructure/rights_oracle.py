"""Membership Rights Oracle — default policy decision point based on project roles.

Invariants:
    - Non-members are denied every action
    - Observers may only read; members and owners may read, create, update, delete
    - Every deny carries a human-readable reason (surfaced to the caller as 403)

Design Decisions:
    - Role -> actions table instead of per-field rules: the field set is accepted
      so richer policies can be dropped in behind the same RightsOracle protocol
"""

import logging

from tasktrack.core.boundary_types import RightsDecision
from tasktrack.core.domain_types import (
    MemberRole, ProjectId, TaskAction, TaskField, UserId,
)
from tasktrack.core.repository_protocols import ProjectRepository

logger = logging.getLogger(__name__)

ROLE_ACTIONS: dict[MemberRole, frozenset[TaskAction]] = {
    MemberRole.OWNER: frozenset(TaskAction),
    MemberRole.MEMBER: frozenset(TaskAction),
    MemberRole.OBSERVER: frozenset({TaskAction.READ}),
}


class MembershipRightsOracle:
    """Allows an action when the actor's project role grants it."""

    def __init__(self, projects: ProjectRepository):
        self._projects = projects

    async def check(
        self, project_id: ProjectId, actor_id: UserId,
        action: TaskAction, fields: frozenset[TaskField],
    ) -> RightsDecision:
        role = await self._projects.get_member_role(project_id, actor_id)
        if role is None:
            return RightsDecision.deny("Actor is not a member of this project")
        try:
            allowed = ROLE_ACTIONS[MemberRole(role)]
        except ValueError:
            logger.warning(
                f"Unknown project role {role!r}",
                extra={"project_id": project_id, "actor_id": actor_id},
            )
            return RightsDecision.deny(f"Role '{role}' grants no rights")
        if action not in allowed:
            return RightsDecision.deny(
                f"Role '{role}' may not {action.value} tasks",
            )
        return RightsDecision.allow()
