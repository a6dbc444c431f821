"""Models package."""

from .lifecycle import TASK_STATUS_TRANSITIONS, check_transition, is_transition_allowed
from .task import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DESCRIPTION_MAX_LENGTH,
    MAX_LIMIT,
    MIN_LIMIT,
    TITLE_MAX_LENGTH,
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

__all__ = [
    "TaskStatus",
    "TaskPriority",
    "SortField",
    "SortOrder",
    "TaskCreate",
    "TaskUpdate",
    "Task",
    "TaskFilters",
    "Pagination",
    "TaskPage",
    "TASK_STATUS_TRANSITIONS",
    "is_transition_allowed",
    "check_transition",
    "TITLE_MAX_LENGTH",
    "DESCRIPTION_MAX_LENGTH",
    "DEFAULT_PAGE",
    "DEFAULT_LIMIT",
    "MIN_LIMIT",
    "MAX_LIMIT",
]
