"""TaskGate database layer."""

from taskgate.db.base import Base, get_session, init_db
from taskgate.db.memory import InMemoryTaskStore
from taskgate.db.repositories import SqlTaskStore
from taskgate.db.store import TaskStore
from taskgate.db.tables import OrganizationTable, TaskTable, UserTable

__all__ = [
    "Base",
    "get_session",
    "init_db",
    "InMemoryTaskStore",
    "OrganizationTable",
    "SqlTaskStore",
    "TaskStore",
    "TaskTable",
    "UserTable",
]
