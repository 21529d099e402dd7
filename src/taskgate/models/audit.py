"""Audit entry model - immutable record of one access or mutation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from taskgate.models.enums import AuditAction


class AuditEntry(BaseModel):
    """Audit trail entry. Frozen once recorded."""

    model_config = ConfigDict(frozen=True)

    actor_id: str
    actor_email: str
    action: AuditAction
    resource_kind: str
    resource_id: str
    timestamp: datetime
    details: Optional[str] = None

    def describe(self) -> str:
        """Single-line human readable form used by the audit logger."""
        line = (
            f"[AUDIT] {self.action.value} - User: {self.actor_email} ({self.actor_id}) "
            f"- Resource: {self.resource_kind} ({self.resource_id})"
        )
        if self.details:
            line += f" - Details: {self.details}"
        return f"{line} - Time: {self.timestamp.isoformat()}"
