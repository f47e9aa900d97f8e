"""
Booking status state machine.

    pending -> confirmed -> in_progress -> completed
    pending | confirmed -> cancelled

completed and cancelled are terminal.
"""

from typing import Dict, FrozenSet

from petbkk.core.exceptions import InvalidStateError
from petbkk.domain.entities import Booking

PENDING = "pending"
CONFIRMED = "confirmed"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
CANCELLED = "cancelled"

TERMINAL_STATUSES: FrozenSet[str] = frozenset({COMPLETED, CANCELLED})

ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    PENDING: frozenset({CONFIRMED, CANCELLED}),
    CONFIRMED: frozenset({IN_PROGRESS, CANCELLED}),
    IN_PROGRESS: frozenset({COMPLETED}),
    COMPLETED: frozenset(),
    CANCELLED: frozenset(),
}

LIST_FILTERS = ("upcoming", "past", "all")


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def assert_transition(booking: Booking, target: str) -> None:
    """Raise InvalidStateError unless booking may move to target."""
    if not can_transition(booking.status, target):
        raise InvalidStateError(booking.id, booking.status, target)


def is_upcoming(booking: Booking) -> bool:
    return booking.status not in TERMINAL_STATUSES


def is_past(booking: Booking) -> bool:
    return booking.status in TERMINAL_STATUSES


def matches_filter(booking: Booking, list_filter: str) -> bool:
    if list_filter == "upcoming":
        return is_upcoming(booking)
    if list_filter == "past":
        return is_past(booking)
    return True
