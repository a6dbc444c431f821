"""Pydantic models for task API."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

TITLE_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 500

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 100


class TaskStatus(str, Enum):
    """Task status enumeration."""

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


class TaskPriority(str, Enum):
    """Task priority enumeration, lowest first."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class SortField(str, Enum):
    """Fields a task listing can be ordered by."""

    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    DUE_DATE = "dueDate"
    TITLE = "title"
    STATUS = "status"
    PRIORITY = "priority"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class _CamelModel(BaseModel):
    """Accepts and emits camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreate(_CamelModel):
    """Request model for creating a task.

    An explicit null for description, status or priority means the default.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field("", max_length=DESCRIPTION_MAX_LENGTH)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None

    @field_validator("description", "status", "priority", mode="before")
    @classmethod
    def _null_means_default(cls, value, info: ValidationInfo):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class TaskUpdate(_CamelModel):
    """Request model for a partial update.

    Only fields present in the request are applied. ``due_date`` and
    ``completed_at`` may be sent as null to clear them; the other fields
    may be omitted but never nulled.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str | None = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None

    @field_validator("title", "description", "status", "priority", mode="before")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    def changes(self) -> dict:
        """Fields explicitly set by the caller."""
        return self.model_dump(exclude_unset=True)


class Task(_CamelModel):
    """A stored task."""

    id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    completed_at: datetime | None = None
    is_deleted: bool = False
    deleted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class TaskFilters(_CamelModel):
    """Filter and ordering options for listing tasks."""

    model_config = ConfigDict(extra="forbid")

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None
    include_deleted: bool = False
    due_date_from: datetime | None = None
    due_date_to: datetime | None = None
    sort_by: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.DESC


class Pagination(_CamelModel):
    """Page request. Out-of-range values are clamped, not rejected."""

    model_config = ConfigDict(extra="forbid")

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @field_validator("page")
    @classmethod
    def _clamp_page(cls, value: int) -> int:
        return max(DEFAULT_PAGE, value)

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return min(MAX_LIMIT, max(MIN_LIMIT, value))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class TaskPage(_CamelModel):
    """Response model for a page of tasks."""

    data: list[Task]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, data: list[Task], total: int, pagination: Pagination) -> "TaskPage":
        total_pages = -(-total // pagination.limit) if total else 0
        return cls(
            data=data,
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            total_pages=total_pages,
            has_next=pagination.page < total_pages,
            has_prev=pagination.page > 1,
        )
