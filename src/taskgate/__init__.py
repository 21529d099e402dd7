"""TaskGate - role-scoped access control and audit trail for a multi-tenant task tracker."""

__version__ = "0.1.0"
