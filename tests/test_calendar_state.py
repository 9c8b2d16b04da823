"""
Tests for the calendar application state and its pending-change handling.
"""

import pytest

from simcal.algorithms.group_reservations import CustomerDetails
from simcal.algorithms.scheduler import CalendarState
from simcal.models.seat import SimulatorGroup
from simcal.utils.config import Settings
from simcal.utils.errors import (
    EmptyGroupViolation,
    OrphanSeatReference,
    OverlapConflict,
    ReservationNotFound,
)


@pytest.fixture
def state():
    return CalendarState(
        groups=[
            SimulatorGroup(id="LOGITECH", name="Logitech G29", seat_count=4, order=0),
            SimulatorGroup(id="MOZA", name="Moza R5", seat_count=2, order=1),
        ],
        label_prefix="S-",
        day_start_hour=9,
        day_end_hour=23,
    )


def details(start="18:00", end="19:00", name="Ayse"):
    return CustomerDetails(name=name, phone="555 123 4567", start_time=start, end_time=end)


class TestConfiguration:

    def test_catalog_and_views(self, state):
        assert [s.label for s in state.view_seats("MOZA")] == ["S-5", "S-6"]
        state.set_label_prefix("R")
        assert state.view_seats("LOGITECH")[0].label == "R1"

    def test_window(self, state):
        state.set_window(10, 24)
        assert (state.day_start_hour, state.day_end_hour) == (10, 24)
        with pytest.raises(ValueError):
            state.set_window(12, 11)

    def test_constructor_checks_window(self):
        with pytest.raises(ValueError):
            CalendarState(day_start_hour=12, day_end_hour=12)
        with pytest.raises(ValueError):
            CalendarState(day_start_hour=20, day_end_hour=10)

    def test_settings_check_window(self):
        with pytest.raises(ValueError):
            Settings(DAY_START_HOUR=12, DAY_END_HOUR=12)
        assert Settings(DAY_START_HOUR=8, DAY_END_HOUR=24).DAY_END_HOUR == 24

    def test_defaults(self):
        state = CalendarState()
        assert [g.id for g in state.groups] == ["LOGITECH", "MOZA"]
        assert len(state.catalog) == 16


class TestSnapshot:
    """Tests for authoritative data vs pending changes."""

    def test_pending_change_is_visible_but_unconfirmed(self, state, day, now):
        change = state.book_group(details(), ["LOGITECH-1", "LOGITECH-2"], day, now=now)
        assert len(state.reservations_for_day(day)) == 2
        assert all(not state.is_confirmed(r.id) for r in change.upserts)

    def test_load_snapshot_replaces_pending(self, state, make_reservation, day, now):
        state.book_group(details(), ["LOGITECH-1"], day, now=now)
        confirmed = make_reservation("10:00", "11:00", seat_id="LOGITECH-3")

        state.load_snapshot([confirmed])

        assert state.pending == []
        assert state.reservations_for_day(day) == [confirmed]
        assert state.is_confirmed(confirmed.id)

    def test_deletions_hide_rows_until_reload(self, state, make_reservation, day):
        a = make_reservation(seat_id="LOGITECH-1", group_reservation_id="G")
        b = make_reservation(seat_id="LOGITECH-2", group_reservation_id="G")
        state.load_snapshot([a, b])

        state.remove_seat_from_group(a.id)
        assert state.reservations_for_day(day) == [b]
        assert not state.is_confirmed(a.id)

        state.load_snapshot([a, b])
        assert len(state.reservations_for_day(day)) == 2

    def test_seat_lists_sorted_by_start(self, state, make_reservation, day):
        late = make_reservation("20:00", "21:00")
        early = make_reservation("09:00", "10:00")
        mid = make_reservation("12:00", "13:00")
        state.load_snapshot([late, early, mid])
        assert state.reservations_for_seat_on_day("LOGITECH-1", day) == [early, mid, late]


class TestMutations:

    def test_booking_checks_pending_rows_too(self, state, day, now):
        state.book_group(details(), ["LOGITECH-1"], day, now=now)
        with pytest.raises(OverlapConflict):
            state.book_group(details("18:30", "19:30", name="Mert"), ["LOGITECH-1"], day, now=now)

    def test_rejected_booking_leaves_state_alone(self, state, make_reservation, day):
        state.load_snapshot([make_reservation("18:00", "19:00", seat_id="LOGITECH-2")])
        with pytest.raises(OverlapConflict):
            state.book_group(details(), ["LOGITECH-1", "LOGITECH-2"], day)
        assert state.pending == []
        assert state.reservations_for_seat_on_day("LOGITECH-1", day) == []

    def test_unknown_seat(self, state, day):
        with pytest.raises(OrphanSeatReference):
            state.book_group(details(), ["LOGITECH-9"], day)

    def test_add_and_remove_seat(self, state, day, now):
        change = state.book_group(details(), ["LOGITECH-1"], day, now=now)
        first = change.upserts[0]

        with pytest.raises(EmptyGroupViolation):
            state.remove_seat_from_group(first.id)

        added = state.add_seat_to_group(first.id, "LOGITECH-2", now=now).upserts[0]
        assert state.group_seats(first) == ["LOGITECH-1", "LOGITECH-2"]

        state.remove_seat_from_group(added.id)
        assert state.group_seats(first) == ["LOGITECH-1"]

    def test_move_and_bulk_edit(self, state, make_reservation, day):
        a = make_reservation("10:00", "11:00")
        state.load_snapshot([a])

        state.move_reservation(a.id, "MOZA-1", "12:00", "13:00")
        moved = state.find_reservation(a.id)
        assert (moved.seat_id, moved.start_time) == ("MOZA-1", "12:00")

        state.bulk_edit([a.id], is_paid=True)
        assert state.find_reservation(a.id).is_paid is True

    def test_delete_group(self, state, make_reservation, day):
        a = make_reservation(seat_id="LOGITECH-1", group_reservation_id="G")
        b = make_reservation(seat_id="LOGITECH-2", group_reservation_id="G")
        c = make_reservation(seat_id="LOGITECH-3", group_reservation_id="H")
        state.load_snapshot([a, b, c])

        change = state.delete_group(b.id)
        assert sorted(change.deleted_ids) == sorted([a.id, b.id])
        assert state.reservations_for_day(day) == [c]

    def test_unknown_reservation(self, state):
        with pytest.raises(ReservationNotFound):
            state.move_reservation("missing", "LOGITECH-1", "10:00", "11:00")


class TestQueries:

    def test_month_and_orphans(self, state, make_reservation, day):
        from datetime import date

        this_month = make_reservation(seat_id="LOGITECH-1")
        next_month = make_reservation(seat_id="LOGITECH-1", day=date(day.year, day.month + 1, 1))
        orphan = make_reservation(seat_id="LOGITECH-7")
        state.load_snapshot([this_month, next_month, orphan])

        assert state.reservations_for_month(day.year, day.month) == [this_month, orphan]
        assert state.orphaned_reservations() == [orphan]

        state.set_groups([SimulatorGroup(id="LOGITECH", name="L", seat_count=8)])
        assert state.orphaned_reservations() == []

    def test_double_bookings_in_loaded_rows(self, state, make_reservation, day):
        from datetime import timedelta

        a = make_reservation("10:00", "11:00", seat_id="LOGITECH-1")
        b = make_reservation("10:30", "11:30", seat_id="LOGITECH-1")
        touching = make_reservation("11:30", "12:00", seat_id="LOGITECH-1")
        other_seat = make_reservation("10:00", "11:00", seat_id="LOGITECH-2")
        other_day = make_reservation("10:00", "11:00", seat_id="LOGITECH-1", day=day + timedelta(days=1))
        state.load_snapshot([a, b, touching, other_seat, other_day])

        assert state.double_bookings() == [(a, b)]

    def test_no_double_bookings_from_valid_edits(self, state, day, now):
        state.book_group(details(), ["LOGITECH-1", "LOGITECH-2"], day, now=now)
        state.book_group(details("19:00", "20:00", name="Mert"), ["LOGITECH-1"], day, now=now)
        assert state.double_bookings() == []
