"""
Audit recorder tests.

The recorder is append-only, ordered, safe under concurrent writers, and
never propagates a failed write to its caller.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from taskgate.engine import AuditRecorder
from taskgate.models import AuditAction


def _append(recorder: AuditRecorder, actor_id: str, resource_id: str, action=AuditAction.VIEW):
    recorder.append(actor_id, f"{actor_id}@test", action, "Task", resource_id)


def test_entries_in_insertion_order(audit):
    _append(audit, "u1", "t1")
    _append(audit, "u2", "t2", AuditAction.UPDATE)
    _append(audit, "u1", "t3", AuditAction.DELETE)

    entries = audit.all()
    assert [(e.actor_id, e.resource_id, e.action) for e in entries] == [
        ("u1", "t1", AuditAction.VIEW),
        ("u2", "t2", AuditAction.UPDATE),
        ("u1", "t3", AuditAction.DELETE),
    ]
    assert len(audit) == 3


def test_filters_are_subsequences_of_all(audit):
    """by_actor and by_resource return exactly the matching entries, in order."""
    _append(audit, "u1", "t1")
    _append(audit, "u2", "t1")
    _append(audit, "u1", "t2")
    _append(audit, "u2", "t2")

    everything = audit.all()
    assert audit.by_actor("u1") == [e for e in everything if e.actor_id == "u1"]
    assert audit.by_resource("t2") == [e for e in everything if e.resource_id == "t2"]
    assert audit.by_actor("nobody") == []


def test_all_returns_a_snapshot(audit):
    _append(audit, "u1", "t1")
    snapshot = audit.all()

    _append(audit, "u1", "t2")

    assert len(snapshot) == 1
    assert len(audit.all()) == 2


def test_entries_are_frozen(audit):
    _append(audit, "u1", "t1")
    entry = audit.all()[0]

    with pytest.raises(ValidationError):
        entry.resource_id = "tampered"


def test_timestamps_are_utc(audit):
    _append(audit, "u1", "t1")
    assert audit.all()[0].timestamp.tzinfo is not None


def test_timestamps_never_go_backwards(audit, monkeypatch):
    """A wall clock stepping back does not reorder the trail."""
    base = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    readings = iter([base, base - timedelta(seconds=30), base + timedelta(seconds=5)])
    monkeypatch.setattr("taskgate.utils.time.utc_now", lambda: next(readings))

    _append(audit, "u1", "t1")
    _append(audit, "u1", "t2")
    _append(audit, "u1", "t3")

    stamps = [e.timestamp for e in audit.all()]
    assert stamps == [base, base, base + timedelta(seconds=5)]


def test_details_are_optional(audit, actors):
    audit.record(actors["a1"], AuditAction.CREATE, "Task", "t9", "Created task: Plan")
    audit.record(actors["a1"], AuditAction.VIEW, "Task", "t9")

    created, viewed = audit.all()
    assert created.details == "Created task: Plan"
    assert created.actor_email == actors["a1"].email
    assert viewed.details is None


def test_full_store_drops_write_without_raising(caplog):
    recorder = AuditRecorder(max_entries=2, log_entries=False)

    with caplog.at_level(logging.ERROR, logger="taskgate.engine.audit"):
        _append(recorder, "u1", "t1")
        _append(recorder, "u1", "t2")
        _append(recorder, "u1", "t3")

    assert len(recorder) == 2
    assert recorder.write_failures == 1
    assert "Audit write dropped" in caplog.text
    assert "t3" in caplog.text


def test_store_error_is_swallowed(audit, monkeypatch):
    def broken(*args, **kwargs):
        raise OSError("disk gone")

    monkeypatch.setattr(audit, "_store", broken)

    _append(audit, "u1", "t1")

    assert audit.write_failures == 1
    assert audit.all() == []


def test_concurrent_appends_are_all_kept():
    recorder = AuditRecorder(max_entries=None, log_entries=False)
    workers, per_worker = 8, 250

    def work(n: int):
        for i in range(per_worker):
            _append(recorder, f"u{n}", f"t{n}-{i}")

    threads = [threading.Thread(target=work, args=(n,)) for n in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    entries = recorder.all()
    assert len(entries) == workers * per_worker
    assert recorder.write_failures == 0

    # Per-writer order is preserved and timestamps are non-decreasing overall.
    for n in range(workers):
        mine = [e.resource_id for e in recorder.by_actor(f"u{n}")]
        assert mine == [f"t{n}-{i}" for i in range(per_worker)]
    stamps = [e.timestamp for e in entries]
    assert stamps == sorted(stamps)


def test_audit_log_line(caplog):
    recorder = AuditRecorder(max_entries=None, log_entries=True)

    with caplog.at_level(logging.INFO, logger="taskgate.audit"):
        recorder.append("a1", "admin@team-a.test", AuditAction.DELETE, "Task", "t1", "Deleted task: X")

    assert "[AUDIT] DELETE - User: admin@team-a.test (a1) - Resource: Task (t1)" in caplog.text
    assert "Details: Deleted task: X" in caplog.text


def test_defaults_come_from_settings():
    from taskgate.config import settings

    recorder = AuditRecorder()
    assert recorder.max_entries == settings.audit_max_entries
    assert recorder.log_entries == settings.audit_log_enabled


def test_explicit_none_capacity_is_unbounded(monkeypatch):
    """None disables the cap even when settings configure one."""
    from taskgate.config import settings

    monkeypatch.setattr(settings, "audit_max_entries", 1)

    assert AuditRecorder(log_entries=False).max_entries == 1

    recorder = AuditRecorder(max_entries=None, log_entries=False)
    _append(recorder, "u1", "t1")
    _append(recorder, "u1", "t2")

    assert recorder.max_entries is None
    assert len(recorder) == 2
    assert recorder.write_failures == 0
