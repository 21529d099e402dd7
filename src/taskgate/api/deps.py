"""API dependencies."""

import logging
from typing import AsyncGenerator, Callable

from fastapi import Depends, Header, HTTPException, Request

from taskgate.auth.context import AuthContext
from taskgate.auth.token import verify_bearer_token
from taskgate.config import Environment, StoreBackend, settings
from taskgate.db.base import get_session
from taskgate.db.memory import InMemoryTaskStore
from taskgate.db.repositories import SqlTaskStore
from taskgate.db.store import TaskStore
from taskgate.engine import AuditRecorder, TaskVisibilityFilter, UnauthorizedError, role_permitted
from taskgate.models import Actor, Role

logger = logging.getLogger("taskgate.api")


async def get_task_store(request: Request) -> AsyncGenerator[TaskStore, None]:
    """
    Select the task store for this request.

    The memory backend is shared by the whole app (held on app.state); the
    database backend gets a fresh session per request, committed on success.
    """
    if settings.store_backend == StoreBackend.MEMORY:
        store = getattr(request.app.state, "memory_store", None)
        if store is None:
            store = InMemoryTaskStore()
            request.app.state.memory_store = store
        yield store
        return

    async with get_session() as session:
        yield SqlTaskStore(session)


def get_audit_recorder(request: Request) -> AuditRecorder:
    """Return the app-owned audit recorder."""
    recorder = getattr(request.app.state, "audit_recorder", None)
    if recorder is None:
        recorder = AuditRecorder()
        request.app.state.audit_recorder = recorder
    return recorder


async def get_auth_context(
    authorization: str | None = Header(None),
    x_actor_id: str | None = Header(None, alias="X-Actor-ID"),
    x_actor_email: str | None = Header(None, alias="X-Actor-Email"),
    x_actor_role: str | None = Header(None, alias="X-Actor-Role"),
    x_actor_org: str | None = Header(None, alias="X-Actor-Org"),
    store: TaskStore = Depends(get_task_store),
) -> AuthContext:
    """
    Authenticate the caller.

    Bearer tokens are verified and mapped to the stored user. In insecure
    dev mode (development only) the X-Actor-* headers are trusted instead.
    """
    if settings.allow_insecure_dev and settings.env == Environment.DEVELOPMENT:
        if x_actor_id and x_actor_role and x_actor_org:
            try:
                role = Role(x_actor_role.lower())
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Unknown role: {x_actor_role}")
            actor = Actor(
                id=x_actor_id,
                email=x_actor_email or f"{x_actor_id}@localhost",
                role=role,
                organization_id=x_actor_org,
            )
            return AuthContext(actor=actor, auth_type="insecure_dev")

    token = None
    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:]

    if not token:
        raise HTTPException(
            status_code=401,
            detail="Missing authorization. Use Authorization: Bearer <token>",
        )

    try:
        return await verify_bearer_token(token, store)
    except UnauthorizedError as e:
        raise HTTPException(status_code=401, detail=e.message)


async def get_actor(auth: AuthContext = Depends(get_auth_context)) -> Actor:
    """Return the authenticated actor."""
    return auth.actor


def get_visibility_filter(
    store: TaskStore = Depends(get_task_store),
    audit: AuditRecorder = Depends(get_audit_recorder),
) -> TaskVisibilityFilter:
    """Build the task engine for this request."""
    return TaskVisibilityFilter(store, audit)


def require_roles(*roles: Role) -> Callable:
    """
    Endpoint gate allowing exactly the listed roles.

    Membership is literal: require_roles(Role.ADMIN) refuses an Owner.
    """
    allowed = frozenset(roles)

    async def dependency(actor: Actor = Depends(get_actor)) -> Actor:
        if not role_permitted(actor.role, allowed):
            logger.info(
                f"Role gate refused {actor.id} ({actor.role.value}); "
                f"allowed: {sorted(r.value for r in allowed)}"
            )
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return actor

    return dependency


def validate_auth_config() -> None:
    """
    Validate authentication configuration at startup.

    Raises:
        RuntimeError: If configuration is insecure for the current environment
    """
    if settings.allow_insecure_dev and settings.env != Environment.DEVELOPMENT:
        raise RuntimeError(
            f"SECURITY ERROR: allow_insecure_dev=true is only permitted in development. "
            f"Current environment: {settings.env.value}. "
            f"Set TASKGATE_ALLOW_INSECURE_DEV=false for {settings.env.value}."
        )

    if not settings.allow_insecure_dev and not settings.jwt_public_key_path:
        raise RuntimeError(
            "SECURITY ERROR: no JWT verification key configured. "
            "Set TASKGATE_JWT_PUBLIC_KEY_PATH or enable insecure dev mode in development."
        )

    if settings.allow_insecure_dev:
        logger.warning(
            "=" * 80 + "\n"
            "WARNING: Running in INSECURE DEV MODE\n"
            "  - X-Actor-* headers are trusted without verification\n"
            "  - This mode is ONLY for local development\n"
            "  - Set TASKGATE_ALLOW_INSECURE_DEV=false for any deployment\n"
            + "=" * 80
        )
    else:
        logger.info(f"Authentication enabled: JWT ({settings.jwt_algorithm}) for {settings.env.value}")
