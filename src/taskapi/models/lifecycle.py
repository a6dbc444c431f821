"""Allowed task status transitions."""

from collections.abc import Mapping
from types import MappingProxyType

from ..errors import InvalidTransition
from .task import TaskStatus

TASK_STATUS_TRANSITIONS: Mapping[TaskStatus, frozenset[TaskStatus]] = MappingProxyType(
    {
        TaskStatus.TODO: frozenset({TaskStatus.IN_PROGRESS}),
        TaskStatus.IN_PROGRESS: frozenset({TaskStatus.TODO, TaskStatus.DONE}),
        TaskStatus.DONE: frozenset({TaskStatus.IN_PROGRESS}),
    }
)


def is_transition_allowed(current: TaskStatus, target: TaskStatus) -> bool:
    """Return True if a task may move from ``current`` to ``target``."""
    return target in TASK_STATUS_TRANSITIONS[current]


def check_transition(current: TaskStatus, target: TaskStatus) -> None:
    """Raise InvalidTransition unless ``current -> target`` is allowed.

    Callers skip this for same-status updates.
    """
    if not is_transition_allowed(current, target):
        raise InvalidTransition(current.value, target.value)
