"""Append-only audit trail."""

import logging
from threading import Lock
from typing import Any, Optional

from taskgate.config import settings
from taskgate.engine.errors import AuditWriteFailure
from taskgate.models import Actor, AuditAction, AuditEntry
from taskgate.utils.time import not_before

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("taskgate.audit")

_UNSET: Any = object()


class AuditRecorder:
    """Thread-safe, append-only store of audit entries.

    One instance is owned by the application (or by a test) and passed to the
    engine explicitly. Entries are never removed; retention is an external
    concern.

    `append` never raises. A write that cannot be stored is logged and counted
    in `write_failures` and the caller's operation carries on.
    """

    def __init__(self, max_entries: Optional[int] = _UNSET, log_entries: Optional[bool] = None):
        self._lock = Lock()
        self._entries: list[AuditEntry] = []
        self.max_entries: Optional[int] = (
            settings.audit_max_entries if max_entries is _UNSET else max_entries
        )
        self.log_entries = settings.audit_log_enabled if log_entries is None else log_entries
        self.write_failures = 0

    def append(
        self,
        actor_id: str,
        actor_email: str,
        action: AuditAction,
        resource_kind: str,
        resource_id: str,
        details: Optional[str] = None,
    ) -> None:
        """Record one entry stamped with the current time."""
        try:
            entry = self._store(actor_id, actor_email, action, resource_kind, resource_id, details)
        except Exception as e:
            with self._lock:
                self.write_failures += 1
            logger.error(
                f"Audit write dropped: {action} on {resource_kind} ({resource_id}) "
                f"by {actor_id}: {e}"
            )
            return

        if self.log_entries:
            audit_logger.info(entry.describe())

    def record(
        self,
        actor: Actor,
        action: AuditAction,
        resource_kind: str,
        resource_id: str,
        details: Optional[str] = None,
    ) -> None:
        """Shorthand for `append` taking the actor's identity from an Actor."""
        self.append(actor.id, actor.email, action, resource_kind, resource_id, details)

    def _store(
        self,
        actor_id: str,
        actor_email: str,
        action: AuditAction,
        resource_kind: str,
        resource_id: str,
        details: Optional[str],
    ) -> AuditEntry:
        with self._lock:
            if self.max_entries is not None and len(self._entries) >= self.max_entries:
                raise AuditWriteFailure(
                    f"Audit store is full ({self.max_entries} entries)"
                )
            previous = self._entries[-1].timestamp if self._entries else None
            entry = AuditEntry(
                actor_id=actor_id,
                actor_email=actor_email,
                action=action,
                resource_kind=resource_kind,
                resource_id=resource_id,
                timestamp=not_before(previous),
                details=details,
            )
            self._entries.append(entry)
            return entry

    # ------------------------------------------------------------------
    # Queries (snapshots, insertion order)
    # ------------------------------------------------------------------

    def all(self) -> list[AuditEntry]:
        """Every entry. Not scoped to an organization."""
        with self._lock:
            return list(self._entries)

    def by_actor(self, actor_id: str) -> list[AuditEntry]:
        return [entry for entry in self.all() if entry.actor_id == actor_id]

    def by_resource(self, resource_id: str) -> list[AuditEntry]:
        return [entry for entry in self.all() if entry.resource_id == resource_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
