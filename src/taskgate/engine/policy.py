"""Access policy - pure allow/deny decisions for task operations.

Two layers live here and they treat role rank differently:

- `AccessPolicyEngine` decides per task. Owners pass every single-task check.
- `role_permitted` is the endpoint gate. It is an explicit allow-list, so an
  Owner is refused by a gate that lists only Admin.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from taskgate.models import Actor, AuditAction, Role, Task

DENY_ADMIN_CROSS_ORG = "cross-organization access by Admin"
DENY_VIEWER_NOT_ASSIGNED = "Viewer accessing task not assigned to them"
DENY_VIEWER_MUTATION = "Viewers cannot mutate tasks"
DENY_VIEWER_CREATE = "Viewers cannot create tasks"
DENY_INSUFFICIENT = "insufficient permissions"


@dataclass(frozen=True)
class PolicyDecision:
    """Outcome of a policy check. `reason` is set only on deny."""

    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "PolicyDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "PolicyDecision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


class AccessPolicyEngine:
    """Stateless decision table for task access.

    Rules are evaluated top to bottom and the first matching role wins. The
    engine never raises for a well-formed actor/task pair; callers turn a
    deny into `PermissionDenied(decision.reason)`.
    """

    def authorize(self, actor: Actor, task: Task, action: AuditAction) -> PolicyDecision:
        """Decide whether `actor` may perform `action` on `task`."""
        if actor.role == Role.OWNER:
            # Owner listings are already scoped to the org subtree; single-task
            # checks are not re-validated against the hierarchy.
            return PolicyDecision.allow()

        if actor.role == Role.ADMIN:
            if task.organization_id == actor.organization_id:
                return PolicyDecision.allow()
            return PolicyDecision.deny(DENY_ADMIN_CROSS_ORG)

        if actor.role == Role.VIEWER:
            if action.is_mutation():
                return PolicyDecision.deny(DENY_VIEWER_MUTATION)
            if task.owner_user_id == actor.id:
                return PolicyDecision.allow()
            return PolicyDecision.deny(DENY_VIEWER_NOT_ASSIGNED)

        return PolicyDecision.deny(DENY_INSUFFICIENT)

    def authorize_create(self, actor: Actor) -> PolicyDecision:
        """Decide whether `actor` may create tasks at all."""
        if actor.role in (Role.OWNER, Role.ADMIN):
            return PolicyDecision.allow()
        if actor.role == Role.VIEWER:
            return PolicyDecision.deny(DENY_VIEWER_CREATE)
        return PolicyDecision.deny(DENY_INSUFFICIENT)


def role_permitted(role: Role, allowed_roles: Optional[Iterable[Role]]) -> bool:
    """Endpoint gate: exact membership in `allowed_roles`.

    An empty or missing allow-list admits every authenticated role. There is
    no rank comparison, so Owner does not satisfy an Admin-only gate.
    """
    if not allowed_roles:
        return True
    return role in set(allowed_roles)
