from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from taskapi.models import (
    Pagination,
    Task,
    TaskCreate,
    TaskPage,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)


def test_create_defaults() -> None:
    t = TaskCreate(title="Write report")
    assert t.description == ""
    assert t.status is TaskStatus.TODO
    assert t.priority is TaskPriority.MEDIUM
    assert t.due_date is None


def test_create_trims_title() -> None:
    assert TaskCreate(title="  Write report  ").title == "Write report"


@pytest.mark.parametrize("title", ["", "   ", "A" * 121])
def test_create_rejects_bad_titles(title: str) -> None:
    with pytest.raises(ValidationError):
        TaskCreate(title=title)


def test_create_accepts_max_lengths() -> None:
    t = TaskCreate(title="A" * 120, description="d" * 500)
    assert len(t.title) == 120


def test_create_null_optionals_fall_back_to_defaults() -> None:
    t = TaskCreate.model_validate(
        {"title": "d", "description": None, "status": None, "priority": None, "dueDate": None}
    )
    assert t.description == ""
    assert t.status is TaskStatus.TODO
    assert t.priority is TaskPriority.MEDIUM
    assert t.due_date is None


def test_create_still_rejects_null_title() -> None:
    with pytest.raises(ValidationError):
        TaskCreate.model_validate({"title": None})


def test_create_rejects_long_description() -> None:
    with pytest.raises(ValidationError):
        TaskCreate(title="ok", description="d" * 501)


def test_create_rejects_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        TaskCreate.model_validate({"title": "ok", "owner": "bob"})


def test_create_accepts_camel_case_due_date() -> None:
    t = TaskCreate.model_validate({"title": "ok", "dueDate": "2024-12-31T23:59:59.000Z"})
    assert t.due_date == datetime(2024, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


def test_update_changes_only_contains_sent_fields() -> None:
    patch = TaskUpdate.model_validate({"description": "", "dueDate": None})
    assert patch.changes() == {"description": "", "due_date": None}


@pytest.mark.parametrize("field", ["title", "description", "status", "priority"])
def test_update_rejects_null_for_required_fields(field: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        TaskUpdate.model_validate({field: None})
    assert field in str(excinfo.value)


def test_pagination_bounds() -> None:
    assert Pagination().page == 1
    assert Pagination().limit == 20
    assert Pagination(page=3, limit=10).offset == 20
    assert Pagination(page=0).page == 1
    assert Pagination(page=-5).page == 1
    assert Pagination(limit=101).limit == 100
    assert Pagination(limit=0).limit == 1
    assert Pagination.model_validate({"page": "0", "limit": "500"}).offset == 0


def test_page_metadata() -> None:
    page = TaskPage.build([], 3, Pagination(page=1, limit=1))
    assert (page.total_pages, page.has_next, page.has_prev) == (3, True, False)

    last = TaskPage.build([], 3, Pagination(page=3, limit=1))
    assert (last.has_next, last.has_prev) == (False, True)

    empty = TaskPage.build([], 0, Pagination())
    assert (empty.total_pages, empty.has_next) == (0, False)


def test_task_serializes_camel_case() -> None:
    now = datetime.now(timezone.utc)
    task = Task(id="01J", title="x", created_at=now, updated_at=now)
    dumped = task.model_dump(by_alias=True)
    assert {"isDeleted", "deletedAt", "completedAt", "dueDate", "createdAt", "updatedAt"} <= set(
        dumped
    )
