"""Task model - the unit of work guarded by the policy engine."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from taskgate.models.enums import TaskCategory, TaskStatus


class Task(BaseModel):
    """A task owned by exactly one organization and assigned to one user."""

    # Identity
    id: str

    # Content
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    category: TaskCategory

    # Ownership
    owner_user_id: str
    organization_id: str

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TaskDraft(BaseModel):
    """Proposed task from a create request.

    organization_id is accepted so callers can pass a raw payload through, but
    the engine always replaces it with the acting user's organization.
    """

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    category: TaskCategory
    owner_user_id: Optional[str] = None
    organization_id: Optional[str] = None


class TaskPatch(BaseModel):
    """Partial update of a task's content. Organization is not patchable."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    category: Optional[TaskCategory] = None
    owner_user_id: Optional[str] = None

    @field_validator("title", "status", "category", "owner_user_id")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Omit a field to leave it unchanged; only description may be cleared.
        if v is None:
            raise ValueError("field cannot be null")
        return v

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller actually set."""
        return self.model_dump(exclude_unset=True)

    def apply_to(self, task: Task) -> Task:
        """Return `task` with the changes applied, validated as a whole Task."""
        return Task.model_validate({**task.model_dump(), **self.changes()})
