"""In-memory task store.

Good for development and tests. Not suitable for multi-instance deployments
(no shared state, nothing survives a restart).
"""

import asyncio
from typing import Iterable, Optional
from uuid import uuid4

from taskgate.db.store import TaskStore
from taskgate.models import Actor, Organization, Task
from taskgate.utils.time import utc_now


class InMemoryTaskStore(TaskStore):
    """Dict-backed store. Iteration order is insertion order."""

    def __init__(self):
        self._organizations: dict[str, Organization] = {}
        self._actors: dict[str, Actor] = {}
        self._tasks: dict[str, Task] = {}
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def add_organization(self, organization: Organization) -> Organization:
        self._organizations[organization.id] = organization
        return organization

    def add_actor(self, actor: Actor) -> Actor:
        self._actors[actor.id] = actor
        return actor

    def add_task(self, task: Task) -> Task:
        self._tasks[task.id] = task
        return task

    # ------------------------------------------------------------------
    # TaskStore
    # ------------------------------------------------------------------

    async def find_organization_by_id(self, organization_id: str) -> Optional[Organization]:
        return self._organizations.get(organization_id)

    async def find_child_organizations(self, organization_id: str) -> list[Organization]:
        return [
            org for org in self._organizations.values()
            if org.parent_id == organization_id
        ]

    async def find_task_by_id(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    async def find_tasks_by_organization_ids(self, organization_ids: Iterable[str]) -> list[Task]:
        wanted = set(organization_ids)
        return [task for task in self._tasks.values() if task.organization_id in wanted]

    async def find_tasks_by_owner(self, user_id: str) -> list[Task]:
        return [task for task in self._tasks.values() if task.owner_user_id == user_id]

    async def persist_task_create(self, task: Task) -> Task:
        async with self._lock:
            now = utc_now()
            stored = task.model_copy(
                update={
                    "id": task.id or str(uuid4()),
                    "created_at": now,
                    "updated_at": now,
                }
            )
            self._tasks[stored.id] = stored
            return stored

    async def persist_task_update(self, task: Task) -> Task:
        async with self._lock:
            if task.id not in self._tasks:
                raise KeyError(f"Task {task.id} does not exist")
            stored = task.model_copy(update={"updated_at": utc_now()})
            self._tasks[stored.id] = stored
            return stored

    async def persist_task_delete(self, task_id: str) -> None:
        async with self._lock:
            self._tasks.pop(task_id, None)

    async def find_actor_by_id(self, user_id: str) -> Optional[Actor]:
        return self._actors.get(user_id)
