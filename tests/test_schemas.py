"""
Request schema normalization tests.
"""

import pytest
from pydantic import ValidationError

from taskgate.api.schemas import (
    CreateTaskRequest,
    UpdateTaskRequest,
    normalize_category,
    normalize_status,
)
from taskgate.models import TaskCategory, TaskPatch, TaskStatus


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("todo", TaskStatus.TODO),
        ("To Do", TaskStatus.TODO),
        ("In Progress", TaskStatus.IN_PROGRESS),
        ("IN-PROGRESS", TaskStatus.IN_PROGRESS),
        ("inprogress", TaskStatus.IN_PROGRESS),
        (" done ", TaskStatus.DONE),
    ],
)
def test_status_variants(raw, expected):
    assert normalize_status(raw) == expected


def test_unknown_status_passes_through_to_validation():
    assert normalize_status("blocked") == "blocked"

    with pytest.raises(ValidationError):
        CreateTaskRequest(title="x", category="Work", status="blocked")


@pytest.mark.parametrize("raw", ["work", "WORK", " Work "])
def test_category_variants(raw):
    assert normalize_category(raw) == TaskCategory.WORK


def test_create_request_defaults():
    request = CreateTaskRequest(title="Plan", category="personal")

    draft = request.to_draft()

    assert draft.status == TaskStatus.TODO
    assert draft.category == TaskCategory.PERSONAL
    assert draft.owner_user_id is None


def test_create_request_requires_title():
    with pytest.raises(ValidationError):
        CreateTaskRequest(title="", category="Work")


def test_update_request_only_sends_set_fields():
    patch = UpdateTaskRequest(status="In Progress", user_id="v2").to_patch()

    assert patch.changes() == {
        "status": TaskStatus.IN_PROGRESS,
        "owner_user_id": "v2",
    }


def test_empty_update_changes_nothing():
    from conftest import TASKS

    task = TASKS[0]
    assert UpdateTaskRequest().to_patch().apply_to(task) == task


@pytest.mark.parametrize("field", ["title", "status", "category", "user_id"])
def test_update_request_rejects_null(field):
    with pytest.raises(ValidationError):
        UpdateTaskRequest(**{field: None})


def test_update_request_allows_clearing_description():
    patch = UpdateTaskRequest(description=None).to_patch()

    assert patch.changes() == {"description": None}


@pytest.mark.parametrize("field", ["title", "status", "category", "owner_user_id"])
def test_task_patch_rejects_null(field):
    with pytest.raises(ValidationError):
        TaskPatch(**{field: None})


def test_apply_to_validates_the_result():
    """A patch built without validation still cannot produce an invalid Task."""
    from conftest import TASKS

    patch = TaskPatch.model_construct(status=None)

    with pytest.raises(ValidationError):
        patch.apply_to(TASKS[1])
