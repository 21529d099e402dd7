"""TaskGate data models."""

from taskgate.models.enums import AuditAction, Role, TaskCategory, TaskStatus
from taskgate.models.actor import Actor
from taskgate.models.organization import Organization
from taskgate.models.task import Task, TaskDraft, TaskPatch
from taskgate.models.audit import AuditEntry

__all__ = [
    "Actor",
    "AuditAction",
    "AuditEntry",
    "Organization",
    "Role",
    "Task",
    "TaskCategory",
    "TaskDraft",
    "TaskPatch",
    "TaskStatus",
]
