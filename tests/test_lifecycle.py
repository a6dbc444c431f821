from __future__ import annotations

import pytest

from taskapi.errors import InvalidTransition
from taskapi.models import (
    TASK_STATUS_TRANSITIONS,
    TaskStatus,
    check_transition,
    is_transition_allowed,
)

TODO = TaskStatus.TODO
IN_PROGRESS = TaskStatus.IN_PROGRESS
DONE = TaskStatus.DONE


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        (TODO, IN_PROGRESS, True),
        (TODO, DONE, False),
        (IN_PROGRESS, TODO, True),
        (IN_PROGRESS, DONE, True),
        (DONE, IN_PROGRESS, True),
        (DONE, TODO, False),
    ],
)
def test_transition_table(current: TaskStatus, target: TaskStatus, allowed: bool) -> None:
    assert is_transition_allowed(current, target) is allowed


def test_every_status_has_a_way_out() -> None:
    assert set(TASK_STATUS_TRANSITIONS) == set(TaskStatus)
    for targets in TASK_STATUS_TRANSITIONS.values():
        assert targets


def test_transition_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        TASK_STATUS_TRANSITIONS[TODO] = frozenset({DONE})  # type: ignore[index]


def test_check_transition_raises_with_both_statuses() -> None:
    with pytest.raises(InvalidTransition) as excinfo:
        check_transition(DONE, TODO)

    err = excinfo.value
    assert err.current == "Done"
    assert err.target == "To Do"
    assert err.status_code == 400
    assert "Done" in err.message and "To Do" in err.message


def test_check_transition_allows_listed_moves() -> None:
    check_transition(TODO, IN_PROGRESS)
    check_transition(IN_PROGRESS, DONE)
    check_transition(DONE, IN_PROGRESS)
