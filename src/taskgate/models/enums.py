"""TaskGate enumerations."""

from enum import Enum


class Role(str, Enum):
    """Role of an actor inside its organization."""

    OWNER = "owner"
    ADMIN = "admin"
    VIEWER = "viewer"


class TaskStatus(str, Enum):
    """Task progress status."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskCategory(str, Enum):
    """Task category."""

    WORK = "Work"
    PERSONAL = "Personal"


class AuditAction(str, Enum):
    """Actions that are checked by the policy engine and recorded in the audit trail."""

    VIEW = "VIEW"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def mutations(cls) -> set["AuditAction"]:
        """Return the actions that change task state."""
        return {cls.CREATE, cls.UPDATE, cls.DELETE}

    def is_mutation(self) -> bool:
        return self in self.mutations()
