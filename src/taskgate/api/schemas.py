"""API request/response schemas.

Loosely typed status/category strings from clients are normalized here, so
the engine only ever sees the strict enums.
"""

import re
from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from taskgate.models import AuditEntry, Task, TaskCategory, TaskDraft, TaskPatch, TaskStatus

_STATUS_ALIASES = {
    "todo": TaskStatus.TODO,
    "to_do": TaskStatus.TODO,
    "in_progress": TaskStatus.IN_PROGRESS,
    "inprogress": TaskStatus.IN_PROGRESS,
    "done": TaskStatus.DONE,
}


def normalize_status(value: Any) -> Any:
    """Map case and spacing variants ("In Progress", "IN-PROGRESS") to TaskStatus."""
    if value is None or isinstance(value, TaskStatus):
        return value
    if isinstance(value, str):
        key = re.sub(r"[\s\-]+", "_", value.strip().lower())
        if key in _STATUS_ALIASES:
            return _STATUS_ALIASES[key]
    # Unknown values fall through to enum validation and are rejected there
    return value


def normalize_category(value: Any) -> Any:
    """Map "work" / "WORK" / " Work " to TaskCategory.WORK, likewise Personal."""
    if value is None or isinstance(value, TaskCategory):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        for category in TaskCategory:
            if category.value.lower() == key:
                return category
    return value


StatusField = Annotated[TaskStatus, BeforeValidator(normalize_status)]
CategoryField = Annotated[TaskCategory, BeforeValidator(normalize_category)]


# ============================================================================
# Shared schemas
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


# ============================================================================
# Task schemas
# ============================================================================


class CreateTaskRequest(BaseModel):
    """Create task request."""

    title: str = Field(..., min_length=1, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    category: CategoryField = Field(..., description="Task category (Work or Personal)")
    status: StatusField = Field(TaskStatus.TODO, description="Task status")
    user_id: Optional[str] = Field(
        None, description="User to assign the task to (defaults to the caller)"
    )
    organization_id: Optional[str] = Field(
        None, description="Ignored: tasks are always created in the caller's organization"
    )

    def to_draft(self) -> TaskDraft:
        return TaskDraft(
            title=self.title,
            description=self.description,
            status=self.status,
            category=self.category,
            owner_user_id=self.user_id,
            organization_id=self.organization_id,
        )


class UpdateTaskRequest(BaseModel):
    """Update task request. Only fields that are sent are changed."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[CategoryField] = None
    status: Optional[StatusField] = None
    user_id: Optional[str] = Field(None, description="User to reassign the task to")

    @field_validator("title", "category", "status", "user_id")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null; omit it to keep the current value")
        return v

    def to_patch(self) -> TaskPatch:
        changes = self.model_dump(exclude_unset=True)
        if "user_id" in changes:
            changes["owner_user_id"] = changes.pop("user_id")
        return TaskPatch(**changes)


class TaskResponse(BaseModel):
    """Task response."""

    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    category: TaskCategory
    user_id: str
    organization_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            category=task.category,
            user_id=task.owner_user_id,
            organization_id=task.organization_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class ListTasksResponse(BaseModel):
    """List tasks response."""

    tasks: list[TaskResponse]


class DeleteTaskResponse(BaseModel):
    """Delete task response."""

    id: str
    deleted: bool = True


# ============================================================================
# Audit schemas
# ============================================================================


class AuditEntryResponse(BaseModel):
    """Audit entry response."""

    user_id: str
    user_email: str
    action: str
    resource: str
    resource_id: str
    timestamp: datetime
    details: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: AuditEntry) -> "AuditEntryResponse":
        return cls(
            user_id=entry.actor_id,
            user_email=entry.actor_email,
            action=entry.action.value,
            resource=entry.resource_kind,
            resource_id=entry.resource_id,
            timestamp=entry.timestamp,
            details=entry.details,
        )


class ListAuditEntriesResponse(BaseModel):
    """Audit log response."""

    entries: list[AuditEntryResponse]
