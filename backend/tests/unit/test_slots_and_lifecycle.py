"""
Unit tests for the slot grid and the booking status state machine.
"""

from datetime import datetime, time, timedelta

import pytest

from petbkk.core.exceptions import InvalidStateError
from petbkk.domain import lifecycle
from petbkk.domain.entities import BOOKING_STATUSES, DayHours
from petbkk.domain.slots import generate_time_slots, is_slot, slots_within_hours
from tests.fixtures.domain_fixtures import make_booking


@pytest.mark.unit
@pytest.mark.slots
class TestSlotGrid:
    def test_default_grid_has_nineteen_slots(self):
        slots = generate_time_slots()

        assert len(slots) == 19
        assert slots[0] == "09:00"
        assert slots[-1] == "18:00"

    def test_slots_are_thirty_minutes_apart(self):
        slots = [datetime.strptime(s, "%H:%M") for s in generate_time_slots()]

        gaps = {b - a for a, b in zip(slots, slots[1:])}
        assert gaps == {timedelta(minutes=30)}

    def test_grid_is_recomputed_per_call(self):
        first = generate_time_slots()
        first.append("18:30")

        assert generate_time_slots() == first[:-1]
        assert generate_time_slots() is not generate_time_slots()

    def test_nothing_after_closing_slot(self):
        assert "18:30" not in generate_time_slots()
        assert is_slot("18:00")
        assert not is_slot("10:15")

    def test_custom_grid(self):
        assert generate_time_slots(time(8, 0), time(9, 0), 20) == [
            "08:00",
            "08:20",
            "08:40",
            "09:00",
        ]

    def test_step_must_be_positive(self):
        with pytest.raises(ValueError):
            generate_time_slots(step_minutes=0)

    def test_within_hours_narrows_grid(self):
        slots = slots_within_hours(generate_time_slots(), DayHours("10:00", "12:00"))

        assert slots == ["10:00", "10:30", "11:00", "11:30", "12:00"]

    def test_within_hours_respects_duration(self):
        slots = slots_within_hours(
            generate_time_slots(), DayHours("10:00", "12:00"), duration_minutes=60
        )

        assert slots == ["10:00", "10:30", "11:00"]

    def test_closed_day_has_no_slots(self):
        assert slots_within_hours(generate_time_slots(), None) == []


@pytest.mark.unit
@pytest.mark.booking
class TestBookingLifecycle:
    @pytest.mark.parametrize(
        "current,target",
        [
            ("pending", "confirmed"),
            ("pending", "cancelled"),
            ("confirmed", "in_progress"),
            ("confirmed", "cancelled"),
            ("in_progress", "completed"),
        ],
    )
    def test_allowed_transitions(self, current, target):
        assert lifecycle.can_transition(current, target)
        lifecycle.assert_transition(make_booking(status=current), target)

    @pytest.mark.parametrize("terminal", ["completed", "cancelled"])
    def test_terminal_states_have_no_exit(self, terminal):
        for target in BOOKING_STATUSES:
            assert not lifecycle.can_transition(terminal, target)

    def test_in_progress_cannot_be_cancelled(self):
        with pytest.raises(InvalidStateError) as exc_info:
            lifecycle.assert_transition(make_booking(status="in_progress"), "cancelled")

        error = exc_info.value
        assert error.booking_id == "b1"
        assert error.current_status == "in_progress"
        assert error.target_status == "cancelled"

    def test_no_skipping_forward(self):
        assert not lifecycle.can_transition("pending", "completed")
        assert not lifecycle.can_transition("pending", "in_progress")

    def test_upcoming_and_past_partition_statuses(self):
        for status in BOOKING_STATUSES:
            booking = make_booking(status=status)
            assert lifecycle.is_upcoming(booking) != lifecycle.is_past(booking)
            assert lifecycle.matches_filter(booking, "all")

    def test_filters(self):
        assert lifecycle.matches_filter(make_booking(status="confirmed"), "upcoming")
        assert lifecycle.matches_filter(make_booking(status="cancelled"), "past")
        assert not lifecycle.matches_filter(make_booking(status="completed"), "upcoming")
