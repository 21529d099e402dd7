"""Task visibility filter - role-scoped listing and single-task authorization."""

import logging
from typing import Optional
from uuid import uuid4

from taskgate.db.store import TaskStore
from taskgate.engine.audit import AuditRecorder
from taskgate.engine.errors import PermissionDenied, TaskNotFound
from taskgate.engine.hierarchy import OrganizationHierarchyResolver
from taskgate.engine.policy import (
    DENY_INSUFFICIENT,
    DENY_VIEWER_MUTATION,
    AccessPolicyEngine,
)
from taskgate.models import (
    Actor,
    AuditAction,
    Role,
    Task,
    TaskDraft,
    TaskPatch,
)

logger = logging.getLogger(__name__)

TASK_RESOURCE = "Task"

_MUTATION_VERBS = {
    AuditAction.UPDATE: "Updated",
    AuditAction.DELETE: "Deleted",
}


class TaskVisibilityFilter:
    """Canonical task operations, scoped by the acting user's role.

    Every operation fetches first (so a missing task is reported as
    TaskNotFound before any policy check), decides, and only then writes to
    the audit trail. A denied call leaves the trail untouched.
    """

    def __init__(
        self,
        store: TaskStore,
        audit: AuditRecorder,
        policy: Optional[AccessPolicyEngine] = None,
        hierarchy: Optional[OrganizationHierarchyResolver] = None,
    ):
        self.store = store
        self.audit = audit
        self.policy = policy or AccessPolicyEngine()
        self.hierarchy = hierarchy or OrganizationHierarchyResolver(store)

    # =========================================================================
    # Reads
    # =========================================================================

    async def list_visible(self, actor: Actor) -> list[Task]:
        """
        Return every task the actor's role lets them enumerate.

        - Owner: tasks in the actor's organization and all descendants
        - Admin: tasks in the actor's organization only
        - Viewer: tasks assigned to the actor

        Order is whatever the store yields. One VIEW entry is recorded per
        returned task, in that order.
        """
        if actor.role == Role.OWNER:
            org_ids = await self.hierarchy.descendant_ids(actor.organization_id)
            tasks = await self.store.find_tasks_by_organization_ids(org_ids)
        elif actor.role == Role.ADMIN:
            tasks = await self.store.find_tasks_by_organization_ids({actor.organization_id})
        elif actor.role == Role.VIEWER:
            tasks = await self.store.find_tasks_by_owner(actor.id)
        else:
            raise PermissionDenied(DENY_INSUFFICIENT)

        for task in tasks:
            self.audit.record(actor, AuditAction.VIEW, TASK_RESOURCE, task.id)

        return tasks

    async def get_one(self, actor: Actor, task_id: str) -> Task:
        """Fetch a single task the actor may view."""
        task = await self._get_or_raise(task_id)

        decision = self.policy.authorize(actor, task, AuditAction.VIEW)
        if not decision.allowed:
            raise PermissionDenied(decision.reason)

        self.audit.record(actor, AuditAction.VIEW, TASK_RESOURCE, task.id)
        return task

    # =========================================================================
    # Create
    # =========================================================================

    def authorize_create(self, actor: Actor, draft: TaskDraft) -> Task:
        """
        Check the actor may create tasks and build the task to persist.

        The organization always comes from the actor, whatever the draft
        claims. The assignee defaults to the actor.
        """
        decision = self.policy.authorize_create(actor)
        if not decision.allowed:
            raise PermissionDenied(decision.reason)

        if draft.organization_id and draft.organization_id != actor.organization_id:
            logger.info(
                f"Ignoring organization {draft.organization_id} in create payload from "
                f"{actor.id}; using {actor.organization_id}"
            )

        return Task(
            id=str(uuid4()),
            title=draft.title,
            description=draft.description,
            status=draft.status,
            category=draft.category,
            owner_user_id=draft.owner_user_id or actor.id,
            organization_id=actor.organization_id,
        )

    async def create_task(self, actor: Actor, draft: TaskDraft) -> Task:
        """Authorize, persist and audit a new task."""
        task = self.authorize_create(actor, draft)
        created = await self.store.persist_task_create(task)

        self.audit.record(
            actor,
            AuditAction.CREATE,
            TASK_RESOURCE,
            created.id,
            f"Created task: {created.title}",
        )
        return created

    # =========================================================================
    # Update / Delete
    # =========================================================================

    async def authorize_mutate(self, actor: Actor, task_id: str, action: AuditAction) -> Task:
        """
        Authorize an UPDATE or DELETE and record it.

        Returns the task as it is before the mutation; the caller applies the
        change through the store.
        """
        task = await self._authorize_mutation(actor, task_id, action)
        self._record_mutation(actor, task, action)
        return task

    async def update_task(self, actor: Actor, task_id: str, patch: TaskPatch) -> Task:
        """Authorize and apply a partial update."""
        task = await self._authorize_mutation(actor, task_id, AuditAction.UPDATE)
        updated = await self.store.persist_task_update(patch.apply_to(task))
        self._record_mutation(actor, updated, AuditAction.UPDATE)
        return updated

    async def delete_task(self, actor: Actor, task_id: str) -> Task:
        """Authorize and remove a task. Returns the removed task."""
        task = await self._authorize_mutation(actor, task_id, AuditAction.DELETE)
        await self.store.persist_task_delete(task.id)
        self._record_mutation(actor, task, AuditAction.DELETE)
        return task

    async def _authorize_mutation(self, actor: Actor, task_id: str, action: AuditAction) -> Task:
        if action not in _MUTATION_VERBS:
            raise ValueError(f"Not a task mutation: {action}")

        task = await self._get_or_raise(task_id)

        if actor.role == Role.VIEWER:
            raise PermissionDenied(DENY_VIEWER_MUTATION)

        decision = self.policy.authorize(actor, task, action)
        if not decision.allowed:
            raise PermissionDenied(decision.reason)

        return task

    def _record_mutation(self, actor: Actor, task: Task, action: AuditAction) -> None:
        self.audit.record(
            actor,
            action,
            TASK_RESOURCE,
            task.id,
            f"{_MUTATION_VERBS[action]} task: {task.title}",
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_or_raise(self, task_id: str) -> Task:
        task = await self.store.find_task_by_id(task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task
