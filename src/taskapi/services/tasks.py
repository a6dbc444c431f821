"""Task store: CRUD and lifecycle operations over the tasks collection."""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from ulid import ULID

from ..db import TaskCollection
from ..errors import Internal, NotFound, ValidationFailed, describe_validation_errors
from ..models import (
    Pagination,
    Task,
    TaskCreate,
    TaskFilters,
    TaskPage,
    TaskStatus,
    TaskUpdate,
    check_transition,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_TIMESTAMP_FIELDS = ("due_date", "completed_at", "deleted_at", "created_at", "updated_at")

# SortField value -> collection sort key
_SORT_KEYS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "dueDate": "due_date",
    "title": "title",
    "status": "status",
    "priority": "priority",
}


def _timestamp(value: datetime | None) -> float | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def _to_column(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return _timestamp(value)
    return value


def _to_task(row: dict) -> Task:
    doc = dict(row)
    for name in _TIMESTAMP_FIELDS:
        if doc.get(name) is not None:
            doc[name] = datetime.fromtimestamp(doc[name], tz=timezone.utc)
    return Task.model_validate(doc)


def _validate(model: type[M], data: M | Mapping[str, Any] | None) -> M:
    """Validate ``data`` against ``model`` even if it already is an instance.

    Instances are re-checked from their explicitly set fields, so objects
    built with ``model_construct`` cannot slip past the rules.
    """
    if data is None:
        data = {}
    elif isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed(describe_validation_errors(exc.errors())) from exc


class TaskStore:
    """
    Task store backed by a single SQLite collection.

    - Soft-deleted tasks are hidden from get/list/update until restored
    - Status changes made through update follow the lifecycle table
    - Storage failures surface as Internal, nothing is retried

    Concurrent updates of the same task are read-modify-write without a
    version check, so the last write wins per field.
    """

    def __init__(self, db_path: str | Path = "tasks.db", *, timeout: float = 30.0) -> None:
        self._collection = TaskCollection(db_path, timeout)
        try:
            total = self.count()
        except Internal:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._collection.db_path, total)

    @contextmanager
    def _storage(self, operation: str, task_id: str | None = None) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as exc:
            logger.exception("Storage failure during %s id=%s", operation, task_id)
            raise Internal() from exc

    def count(self) -> int:
        """Number of stored tasks, deleted ones included."""
        with self._storage("count"):
            return self._collection.count()

    def create(self, data: TaskCreate | Mapping[str, Any]) -> Task:
        """Validate and persist a new task."""
        payload = _validate(TaskCreate, data)
        now = time.time()
        doc = {
            "id": str(ULID()),
            "title": payload.title,
            "description": payload.description,
            "status": payload.status.value,
            "priority": payload.priority.value,
            "due_date": _timestamp(payload.due_date),
            "is_deleted": False,
            "created_at": now,
            "updated_at": now,
        }
        with self._storage("create"):
            row = self._collection.insert(doc)
        logger.info("Created task %s status=%s", row["id"], row["status"])
        return _to_task(row)

    def list(
        self,
        filters: TaskFilters | Mapping[str, Any] | None = None,
        pagination: Pagination | Mapping[str, Any] | None = None,
    ) -> TaskPage:
        """Return one page of tasks matching ``filters``, newest first by default."""
        filters = _validate(TaskFilters, filters)
        pagination = _validate(Pagination, pagination)

        with self._storage("list"):
            rows, total = self._collection.find(
                status=filters.status.value if filters.status else None,
                priority=filters.priority.value if filters.priority else None,
                search=filters.search or None,
                include_deleted=filters.include_deleted,
                due_from=_timestamp(filters.due_date_from),
                due_to=_timestamp(filters.due_date_to),
                sort=_SORT_KEYS[filters.sort_by.value],
                descending=filters.order.value == "desc",
                offset=pagination.offset,
                limit=pagination.limit,
            )
        return TaskPage.build([_to_task(row) for row in rows], total, pagination)

    def _get_row(self, task_id: str, *, is_deleted: bool | None) -> dict:
        with self._storage("get", task_id):
            row = self._collection.get(task_id, is_deleted=is_deleted)
        if row is None:
            logger.debug("Task %s not found (is_deleted=%s)", task_id, is_deleted)
            raise NotFound(task_id)
        return row

    def get_by_id(self, task_id: str) -> Task:
        """Return a task that has not been soft-deleted."""
        return _to_task(self._get_row(task_id, is_deleted=False))

    def update(self, task_id: str, patch: TaskUpdate | Mapping[str, Any]) -> Task:
        """Apply a partial update, checking any status change.

        Entering DONE from another status stamps ``completed_at``. Leaving
        DONE keeps the previous ``completed_at`` value.
        """
        changes = _validate(TaskUpdate, patch).changes()
        current = self._get_row(task_id, is_deleted=False)
        current_status = TaskStatus(current["status"])
        now = time.time()

        target = changes.get("status")
        if target is not None and target != current_status:
            check_transition(current_status, target)
            if target is TaskStatus.DONE:
                changes["completed_at"] = datetime.fromtimestamp(now, tz=timezone.utc)

        fields = {name: _to_column(value) for name, value in changes.items()}
        fields["updated_at"] = now

        with self._storage("update", task_id):
            row = self._collection.update(task_id, fields)
        if row is None:
            raise NotFound(task_id)
        logger.info("Updated task %s fields=%s", task_id, sorted(changes))
        return _to_task(row)

    def soft_delete(self, task_id: str) -> None:
        """Mark a task deleted without erasing it."""
        self._get_row(task_id, is_deleted=False)
        now = time.time()
        with self._storage("soft_delete", task_id):
            row = self._collection.update(
                task_id, {"is_deleted": True, "deleted_at": now, "updated_at": now}
            )
        if row is None:
            raise NotFound(task_id)
        logger.info("Soft-deleted task %s", task_id)

    def restore(self, task_id: str) -> Task:
        """Bring back a soft-deleted task."""
        self._get_row(task_id, is_deleted=True)
        with self._storage("restore", task_id):
            row = self._collection.update(
                task_id, {"is_deleted": False, "deleted_at": None, "updated_at": time.time()}
            )
        if row is None:
            raise NotFound(task_id)
        logger.info("Restored task %s", task_id)
        return _to_task(row)

    def hard_delete(self, task_id: str) -> None:
        """Erase a task permanently, whether or not it was soft-deleted."""
        self._get_row(task_id, is_deleted=None)
        with self._storage("hard_delete", task_id):
            deleted = self._collection.delete(task_id)
        if not deleted:
            raise NotFound(task_id)
        logger.info("Hard-deleted task %s", task_id)
