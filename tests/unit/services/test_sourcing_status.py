import itertools

import pytest

from luxselle.core.enums import SourcingStatus
from luxselle.core.exceptions import InvalidStatusTransitionError
from luxselle.services.sourcing_status import ensure_transition, is_valid_transition, valid_next_statuses

ALLOWED = {
    ("open", "sourcing"),
    ("sourcing", "sourced"),
    ("sourced", "fulfilled"),
    ("sourced", "lost"),
}
STATUSES = [s.value for s in SourcingStatus]


@pytest.mark.parametrize("current,target", list(itertools.product(STATUSES, STATUSES)))
def test_transition_matrix(current, target):
    expected = current == target or (current, target) in ALLOWED
    assert is_valid_transition(current, target) is expected


@pytest.mark.parametrize(
    "current,expected",
    [
        ("open", ["sourcing"]),
        ("sourcing", ["sourced"]),
        ("sourced", ["fulfilled", "lost"]),
        ("fulfilled", []),
        ("lost", []),
    ],
)
def test_valid_next_statuses(current, expected):
    assert [s.value for s in valid_next_statuses(current)] == expected


def test_ensure_transition_raises_with_details():
    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        ensure_transition("open", "fulfilled")
    assert exc_info.value.details == {"from": "open", "to": "fulfilled"}
