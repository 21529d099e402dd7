"""REST API router."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from taskgate import __version__
from taskgate.api.deps import (
    get_actor,
    get_audit_recorder,
    get_visibility_filter,
    require_roles,
)
from taskgate.api.schemas import (
    AuditEntryResponse,
    CreateTaskRequest,
    DeleteTaskResponse,
    HealthResponse,
    ListAuditEntriesResponse,
    ListTasksResponse,
    TaskResponse,
    UpdateTaskRequest,
)
from taskgate.engine import (
    AuditRecorder,
    PermissionDenied,
    TaskNotFound,
    TaskVisibilityFilter,
)
from taskgate.models import Actor, Role

router = APIRouter(prefix="/v1")


# ============================================================================
# Health
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


# ============================================================================
# Tasks
# ============================================================================


@router.get("/tasks", response_model=ListTasksResponse)
async def list_tasks(
    actor: Actor = Depends(get_actor),
    engine: TaskVisibilityFilter = Depends(get_visibility_filter),
):
    """List the tasks visible to the caller's role."""
    try:
        tasks = await engine.list_visible(actor)
    except PermissionDenied as e:
        raise HTTPException(status_code=403, detail=e.reason)
    return ListTasksResponse(tasks=[TaskResponse.from_task(t) for t in tasks])


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    actor: Actor = Depends(get_actor),
    engine: TaskVisibilityFilter = Depends(get_visibility_filter),
):
    """Get a task by ID."""
    try:
        task = await engine.get_one(actor, task_id)
    except TaskNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PermissionDenied as e:
        raise HTTPException(status_code=403, detail=e.reason)
    return TaskResponse.from_task(task)


@router.post("/tasks", response_model=TaskResponse, status_code=201)
async def create_task(
    request: CreateTaskRequest,
    actor: Actor = Depends(get_actor),
    engine: TaskVisibilityFilter = Depends(get_visibility_filter),
):
    """Create a task in the caller's organization."""
    try:
        task = await engine.create_task(actor, request.to_draft())
    except PermissionDenied as e:
        raise HTTPException(status_code=403, detail=e.reason)
    return TaskResponse.from_task(task)


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    request: UpdateTaskRequest,
    actor: Actor = Depends(get_actor),
    engine: TaskVisibilityFilter = Depends(get_visibility_filter),
):
    """Update a task."""
    try:
        task = await engine.update_task(actor, task_id, request.to_patch())
    except TaskNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PermissionDenied as e:
        raise HTTPException(status_code=403, detail=e.reason)
    return TaskResponse.from_task(task)


@router.delete("/tasks/{task_id}", response_model=DeleteTaskResponse)
async def delete_task(
    task_id: str,
    actor: Actor = Depends(get_actor),
    engine: TaskVisibilityFilter = Depends(get_visibility_filter),
):
    """Delete a task."""
    try:
        task = await engine.delete_task(actor, task_id)
    except TaskNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PermissionDenied as e:
        raise HTTPException(status_code=403, detail=e.reason)
    return DeleteTaskResponse(id=task.id)


# ============================================================================
# Audit log (Owner and Admin only)
# ============================================================================


@router.get("/audit-log", response_model=ListAuditEntriesResponse)
async def get_audit_log(
    actor_id: Optional[str] = Query(None, description="Only entries recorded for this user"),
    resource_id: Optional[str] = Query(None, description="Only entries for this resource"),
    actor: Actor = Depends(require_roles(Role.OWNER, Role.ADMIN)),
    audit: AuditRecorder = Depends(get_audit_recorder),
):
    """
    Return the audit trail.

    Entries are not filtered by the caller's organization.
    """
    if actor_id:
        entries = audit.by_actor(actor_id)
        if resource_id:
            entries = [e for e in entries if e.resource_id == resource_id]
    elif resource_id:
        entries = audit.by_resource(resource_id)
    else:
        entries = audit.all()

    return ListAuditEntriesResponse(
        entries=[AuditEntryResponse.from_entry(e) for e in entries]
    )
