"""TaskGate engine - access policy, hierarchy scoping and audit trail."""

from taskgate.engine.audit import AuditRecorder
from taskgate.engine.errors import (
    AuditWriteFailure,
    PermissionDenied,
    TaskGateError,
    TaskNotFound,
    UnauthorizedError,
)
from taskgate.engine.hierarchy import (
    HierarchyResolution,
    HierarchyTraversalAnomaly,
    OrganizationHierarchyResolver,
)
from taskgate.engine.policy import AccessPolicyEngine, PolicyDecision, role_permitted
from taskgate.engine.visibility import TaskVisibilityFilter

__all__ = [
    "AccessPolicyEngine",
    "AuditRecorder",
    "AuditWriteFailure",
    "HierarchyResolution",
    "HierarchyTraversalAnomaly",
    "OrganizationHierarchyResolver",
    "PermissionDenied",
    "PolicyDecision",
    "TaskGateError",
    "TaskNotFound",
    "TaskVisibilityFilter",
    "UnauthorizedError",
    "role_permitted",
]
