"""Task store interface consumed by the access-control engine."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from taskgate.models import Actor, Organization, Task


class TaskStore(ABC):
    """Abstract persistence collaborator.

    The engine only reads through this interface to make decisions and writes
    through it after a decision has been made. Implementations own Task,
    Organization and user records; they never see audit entries.
    """

    @abstractmethod
    async def find_organization_by_id(self, organization_id: str) -> Optional[Organization]:
        """Return the organization or None."""

    @abstractmethod
    async def find_child_organizations(self, organization_id: str) -> list[Organization]:
        """Return the direct children of an organization (empty if none)."""

    @abstractmethod
    async def find_task_by_id(self, task_id: str) -> Optional[Task]:
        """Return the task or None."""

    @abstractmethod
    async def find_tasks_by_organization_ids(self, organization_ids: Iterable[str]) -> list[Task]:
        """Return every task whose organization is in `organization_ids`."""

    @abstractmethod
    async def find_tasks_by_owner(self, user_id: str) -> list[Task]:
        """Return every task assigned to `user_id`."""

    @abstractmethod
    async def persist_task_create(self, task: Task) -> Task:
        """Store a new task and return it as persisted (id and timestamps set)."""

    @abstractmethod
    async def persist_task_update(self, task: Task) -> Task:
        """Overwrite an existing task's fields and return the stored version."""

    @abstractmethod
    async def persist_task_delete(self, task_id: str) -> None:
        """Remove a task."""

    @abstractmethod
    async def find_actor_by_id(self, user_id: str) -> Optional[Actor]:
        """Return the user as an Actor, or None if unknown."""
