"""Rights Enforcement — turns an oracle decision into a pipeline stage result.

Invariants:
    - PURE: the oracle is consulted by the caller, this only interprets the answer
    - Returns ForbiddenError on deny (carrying the oracle's reason), None on allow
"""

from tasktrack.core.boundary_types import RightsDecision
from tasktrack.core.errors import ErrorContext, ForbiddenError


def check_rights(
    decision: RightsDecision, context: ErrorContext | None = None,
) -> ForbiddenError | None:
    if decision.allowed:
        return None
    return ForbiddenError(decision.reason or "Action not permitted", context)
