"""
Tests for booking admissibility on one seat/day.
"""

import pytest

from simcal.algorithms.overlap import (
    check_overlap,
    ensure_available,
    find_conflicts,
    intervals_overlap,
    scope_to_seat_day,
)
from simcal.utils.errors import OverlapConflict


class TestIntervalsOverlap:

    def test_half_open(self):
        assert intervals_overlap(600, 660, 630, 690) is True
        assert intervals_overlap(600, 660, 660, 720) is False
        assert intervals_overlap(660, 720, 600, 660) is False


class TestCheckOverlap:
    """Tests for the candidate-vs-existing check."""

    def test_partial_overlap(self, make_reservation):
        existing = [make_reservation("10:30", "11:30")]
        assert check_overlap("10:00", "11:00", existing) is True

    def test_touching_boundary_is_free(self, make_reservation):
        existing = [make_reservation("11:00", "12:00")]
        assert check_overlap("10:00", "11:00", existing) is False

    def test_containment(self, make_reservation):
        existing = [make_reservation("09:00", "13:00")]
        assert check_overlap("10:00", "11:00", existing) is True

    def test_midnight_candidate_against_late_booking(self, make_reservation):
        existing = [make_reservation("23:00", "23:45")]
        assert check_overlap("23:30", "00:30", existing) is True

    def test_both_cross_midnight(self, make_reservation):
        existing = [make_reservation("23:00", "01:00")]
        assert check_overlap("23:30", "00:30", existing) is True

    def test_midnight_candidate_against_early_morning_booking(self, make_reservation):
        existing = [make_reservation("00:00", "01:00")]
        assert check_overlap("23:30", "00:30", existing) is True

    def test_midnight_candidate_touching_early_morning_booking(self, make_reservation):
        existing = [make_reservation("00:30", "01:30")]
        assert check_overlap("23:30", "00:30", existing) is False

    def test_exclude_id_skips_own_prior_state(self, make_reservation):
        own = make_reservation("10:00", "11:00", id="self")
        assert check_overlap("10:30", "11:30", [own], exclude_id="self") is False
        assert check_overlap("10:30", "11:30", [own]) is True

    def test_empty_snapshot(self):
        assert check_overlap("10:00", "11:00", []) is False

    def test_zero_length_candidate_is_not_rejected_here(self, make_reservation):
        existing = [make_reservation("11:00", "12:00")]
        assert check_overlap("10:00", "10:00", existing) is False
        assert check_overlap("11:30", "11:30", existing) is True


class TestFindConflicts:

    def test_returns_every_clashing_booking(self, make_reservation):
        a = make_reservation("10:00", "11:00")
        b = make_reservation("11:00", "12:00")
        c = make_reservation("13:00", "14:00")
        assert find_conflicts("10:30", "11:30", [a, b, c]) == [a, b]

    def test_ensure_available_names_seat_and_rows(self, make_reservation):
        a = make_reservation("10:00", "11:00", customer_name="Mert")
        with pytest.raises(OverlapConflict) as err:
            ensure_available("LOGITECH-1", "10:30", "11:30", [a])
        assert err.value.seat_id == "LOGITECH-1"
        assert err.value.conflicts == [a]
        assert "Mert" in str(err.value)


class TestScope:

    def test_only_same_seat_and_day(self, make_reservation, day):
        from datetime import timedelta

        same = make_reservation(seat_id="MOZA-1")
        other_seat = make_reservation(seat_id="MOZA-2")
        other_day = make_reservation(seat_id="MOZA-1", day=day + timedelta(days=1))
        assert scope_to_seat_day([same, other_seat, other_day], "MOZA-1", day) == [same]


class TestReservationOverlaps:
    """Tests for the row-against-row check."""

    def test_same_seat_and_day(self, make_reservation):
        a = make_reservation("10:00", "11:00")
        assert a.overlaps(make_reservation("10:30", "11:30")) is True
        assert a.overlaps(make_reservation("11:00", "12:00")) is False

    def test_other_seat_or_day_never_clashes(self, make_reservation, day):
        from datetime import timedelta

        a = make_reservation("10:00", "11:00", seat_id="LOGITECH-1")
        assert a.overlaps(make_reservation("10:00", "11:00", seat_id="LOGITECH-2")) is False
        assert a.overlaps(make_reservation("10:00", "11:00", day=day + timedelta(days=1))) is False

    def test_wraps_past_midnight(self, make_reservation):
        late = make_reservation("23:30", "00:30")
        assert late.overlaps(make_reservation("00:00", "01:00")) is True
        assert make_reservation("00:00", "01:00").overlaps(late) is True
