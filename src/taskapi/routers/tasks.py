"""Task API router."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request, status

from ..models import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    MIN_LIMIT,
    Pagination,
    SortField,
    SortOrder,
    Task,
    TaskCreate,
    TaskFilters,
    TaskPage,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)
from ..services import TaskStore

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_store(request: Request) -> TaskStore:
    """Return the store created by the application factory."""
    return request.app.state.task_store


# =============================================================================
# REST API Endpoints (JSON)
# =============================================================================


@router.get("", response_model=TaskPage)
def list_tasks(
    page: int = Query(DEFAULT_PAGE, description="Page number, starting at 1; lower values mean 1"),
    limit: int = Query(
        DEFAULT_LIMIT, description=f"Items per page, clamped to {MIN_LIMIT}..{MAX_LIMIT}"
    ),
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    search: str | None = Query(None, description="Case-insensitive match on title or description"),
    include_deleted: bool = Query(False, alias="includeDeleted"),
    due_date_from: datetime | None = Query(None, alias="dueDateFrom"),
    due_date_to: datetime | None = Query(None, alias="dueDateTo"),
    sort_by: SortField = Query(SortField.CREATED_AT, alias="sortBy"),
    order: SortOrder = SortOrder.DESC,
    store: TaskStore = Depends(get_task_store),
):
    """List tasks with pagination and filters."""
    filters = TaskFilters(
        status=status,
        priority=priority,
        search=search,
        include_deleted=include_deleted,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
        sort_by=sort_by,
        order=order,
    )
    return store.list(filters, Pagination(page=page, limit=limit))


@router.get("/{task_id}", response_model=Task)
def get_task(task_id: str, store: TaskStore = Depends(get_task_store)):
    """Get a task by ID."""
    return store.get_by_id(task_id)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task_endpoint(task_data: TaskCreate, store: TaskStore = Depends(get_task_store)):
    """Create a new task."""
    return store.create(task_data)


@router.patch("/{task_id}", response_model=Task)
def update_task_endpoint(
    task_id: str, task_data: TaskUpdate, store: TaskStore = Depends(get_task_store)
):
    """Update any subset of a task's fields."""
    return store.update(task_id, task_data)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task_endpoint(task_id: str, store: TaskStore = Depends(get_task_store)):
    """Soft delete a task."""
    store.soft_delete(task_id)


@router.put("/{task_id}/restore", response_model=Task)
def restore_task_endpoint(task_id: str, store: TaskStore = Depends(get_task_store)):
    """Restore a soft-deleted task."""
    return store.restore(task_id)


@router.delete("/{task_id}/hard", status_code=status.HTTP_204_NO_CONTENT)
def hard_delete_task_endpoint(task_id: str, store: TaskStore = Depends(get_task_store)):
    """Permanently delete a task."""
    store.hard_delete(task_id)
