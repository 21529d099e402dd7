"""Bearer token verification.

TaskGate does not issue tokens; it only verifies tokens signed by the
identity service and maps their subject to a stored user.
"""

from __future__ import annotations

from typing import Optional

from jose import JWTError, jwt

from taskgate.auth.context import AuthContext
from taskgate.config import settings
from taskgate.db.store import TaskStore
from taskgate.engine.errors import UnauthorizedError

_jwt_key_cache: Optional[str] = None


def _load_jwt_key() -> str:
    global _jwt_key_cache
    if _jwt_key_cache:
        return _jwt_key_cache

    if settings.jwt_public_key_path:
        with open(settings.jwt_public_key_path, "r", encoding="utf-8") as handle:
            _jwt_key_cache = handle.read()
            return _jwt_key_cache

    raise UnauthorizedError("JWT verification key not configured")


def decode_token(token: str, key: Optional[str] = None) -> dict:
    """Verify signature and expiry and return the claims."""
    try:
        return jwt.decode(
            token,
            key or _load_jwt_key(),
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError as exc:
        raise UnauthorizedError(f"Invalid JWT: {exc}") from exc


async def verify_bearer_token(
    token: str | None,
    store: TaskStore,
    key: Optional[str] = None,
) -> AuthContext:
    """Resolve a bearer token to the stored user it was issued for."""
    if not token:
        raise UnauthorizedError("Missing authorization token")

    payload = decode_token(token, key)
    subject = payload.get("sub")
    if not subject:
        raise UnauthorizedError("JWT has no subject")

    actor = await store.find_actor_by_id(subject)
    if actor is None:
        raise UnauthorizedError("Unknown user")

    return AuthContext(actor=actor, auth_type="jwt")
