"""
Sourcing request status transitions.

open -> sourcing -> sourced -> fulfilled | lost
"""

from typing import Dict, List

from luxselle.core.enums import SourcingStatus
from luxselle.core.exceptions import InvalidStatusTransitionError

ALLOWED_TRANSITIONS: Dict[SourcingStatus, List[SourcingStatus]] = {
    SourcingStatus.OPEN: [SourcingStatus.SOURCING],
    SourcingStatus.SOURCING: [SourcingStatus.SOURCED],
    SourcingStatus.SOURCED: [SourcingStatus.FULFILLED, SourcingStatus.LOST],
    SourcingStatus.FULFILLED: [],
    SourcingStatus.LOST: [],
}


def is_valid_transition(from_status, to_status) -> bool:
    current = SourcingStatus(from_status)
    target = SourcingStatus(to_status)
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def valid_next_statuses(from_status) -> List[SourcingStatus]:
    return list(ALLOWED_TRANSITIONS[SourcingStatus(from_status)])


def ensure_transition(from_status, to_status) -> None:
    if not is_valid_transition(from_status, to_status):
        raise InvalidStatusTransitionError(SourcingStatus(from_status).value, SourcingStatus(to_status).value)
