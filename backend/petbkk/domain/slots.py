"""
Slot generator for bookable time-of-day values.

The default grid is static business hours (09:00 to 18:00 inclusive, every
30 minutes) and does not depend on the provider. ``slots_within_hours``
optionally narrows a grid to a provider's opening window.
"""

from datetime import datetime, time, timedelta
from typing import List, Optional

from petbkk.domain.entities import DayHours

GRID_START = time(9, 0)
GRID_END = time(18, 0)
GRID_STEP_MINUTES = 30


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def _parse(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()


def generate_time_slots(
    start: time = GRID_START,
    end: time = GRID_END,
    step_minutes: int = GRID_STEP_MINUTES,
) -> List[str]:
    """Return "HH:MM" slots from start to end inclusive.

    Recomputed on every call; the result is a fresh list the caller may mutate.
    """
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")

    slots = []
    current = datetime.combine(datetime.min, start)
    last = datetime.combine(datetime.min, end)
    while current <= last:
        slots.append(current.strftime("%H:%M"))
        current += timedelta(minutes=step_minutes)
    return slots


def is_slot(value: str, slots: Optional[List[str]] = None) -> bool:
    """True when value is a member of the given grid (default: static grid)."""
    return value in (slots if slots is not None else generate_time_slots())


def slots_within_hours(
    slots: List[str], hours: Optional[DayHours], duration_minutes: int = 0
) -> List[str]:
    """Keep the slots whose appointment fits inside the opening window.

    A slot fits when it starts at or after opening and start + duration
    ends no later than closing. ``hours=None`` means closed all day.
    """
    if hours is None:
        return []

    opens = _minutes(_parse(hours.open))
    closes = _minutes(_parse(hours.close))
    return [
        slot
        for slot in slots
        if _minutes(_parse(slot)) >= opens
        and _minutes(_parse(slot)) + duration_minutes <= closes
    ]
