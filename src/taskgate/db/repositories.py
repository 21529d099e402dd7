"""Database repositories for TaskGate entities."""

from typing import Iterable, Optional
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskgate.db.store import TaskStore
from taskgate.db.tables import OrganizationTable, TaskTable, UserTable
from taskgate.models import Actor, Organization, Task
from taskgate.utils.time import utc_now


class SqlTaskStore(TaskStore):
    """TaskStore backed by a SQLAlchemy async session.

    Writes are flushed, not committed; the session owner (request dependency
    or test fixture) decides when the transaction ends.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # =========================================================================
    # Organizations
    # =========================================================================

    async def create_organization(self, organization: Organization) -> Organization:
        row = OrganizationTable(
            id=organization.id or str(uuid4()),
            name=organization.name,
            parent_id=organization.parent_id,
            created_at=utc_now(),
        )
        self.session.add(row)
        await self.session.flush()
        return self._org_to_model(row)

    async def find_organization_by_id(self, organization_id: str) -> Optional[Organization]:
        result = await self.session.execute(
            select(OrganizationTable).where(OrganizationTable.id == organization_id)
        )
        row = result.scalar_one_or_none()
        return self._org_to_model(row) if row else None

    async def find_child_organizations(self, organization_id: str) -> list[Organization]:
        result = await self.session.execute(
            select(OrganizationTable)
            .where(OrganizationTable.parent_id == organization_id)
            .order_by(OrganizationTable.created_at)
        )
        return [self._org_to_model(row) for row in result.scalars().all()]

    # =========================================================================
    # Users
    # =========================================================================

    async def create_actor(self, actor: Actor) -> Actor:
        row = UserTable(
            id=actor.id or str(uuid4()),
            email=actor.email,
            role=actor.role,
            organization_id=actor.organization_id,
            created_at=utc_now(),
        )
        self.session.add(row)
        await self.session.flush()
        return self._user_to_actor(row)

    async def find_actor_by_id(self, user_id: str) -> Optional[Actor]:
        result = await self.session.execute(select(UserTable).where(UserTable.id == user_id))
        row = result.scalar_one_or_none()
        return self._user_to_actor(row) if row else None

    # =========================================================================
    # Tasks
    # =========================================================================

    async def find_task_by_id(self, task_id: str) -> Optional[Task]:
        row = await self._get_task_row(task_id)
        return self._task_to_model(row) if row else None

    async def find_tasks_by_organization_ids(self, organization_ids: Iterable[str]) -> list[Task]:
        ids = list(organization_ids)
        if not ids:
            return []
        result = await self.session.execute(
            select(TaskTable)
            .where(TaskTable.organization_id.in_(ids))
            .order_by(TaskTable.created_at)
        )
        return [self._task_to_model(row) for row in result.scalars().all()]

    async def find_tasks_by_owner(self, user_id: str) -> list[Task]:
        result = await self.session.execute(
            select(TaskTable)
            .where(TaskTable.owner_user_id == user_id)
            .order_by(TaskTable.created_at)
        )
        return [self._task_to_model(row) for row in result.scalars().all()]

    async def persist_task_create(self, task: Task) -> Task:
        now = utc_now()
        row = TaskTable(
            id=task.id or str(uuid4()),
            title=task.title,
            description=task.description,
            status=task.status,
            category=task.category,
            owner_user_id=task.owner_user_id,
            organization_id=task.organization_id,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        await self.session.flush()
        return self._task_to_model(row)

    async def persist_task_update(self, task: Task) -> Task:
        row = await self._get_task_row(task.id)
        if row is None:
            raise LookupError(f"Task {task.id} does not exist")

        row.title = task.title
        row.description = task.description
        row.status = task.status
        row.category = task.category
        row.owner_user_id = task.owner_user_id
        row.updated_at = utc_now()

        await self.session.flush()
        return self._task_to_model(row)

    async def persist_task_delete(self, task_id: str) -> None:
        await self.session.execute(delete(TaskTable).where(TaskTable.id == task_id))
        await self.session.flush()

    async def _get_task_row(self, task_id: str) -> Optional[TaskTable]:
        result = await self.session.execute(select(TaskTable).where(TaskTable.id == task_id))
        return result.scalar_one_or_none()

    # =========================================================================
    # Row mapping
    # =========================================================================

    def _org_to_model(self, row: OrganizationTable) -> Organization:
        return Organization(id=row.id, name=row.name, parent_id=row.parent_id)

    def _user_to_actor(self, row: UserTable) -> Actor:
        return Actor(
            id=row.id,
            email=row.email,
            role=row.role,
            organization_id=row.organization_id,
        )

    def _task_to_model(self, row: TaskTable) -> Task:
        return Task(
            id=row.id,
            title=row.title,
            description=row.description,
            status=row.status,
            category=row.category,
            owner_user_id=row.owner_user_id,
            organization_id=row.organization_id,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
