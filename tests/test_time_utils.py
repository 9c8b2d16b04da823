"""
Tests for wall-clock arithmetic.
"""

import pytest

from simcal.algorithms.time_utils import (
    add_minutes,
    duration_minutes,
    minutes_to_time,
    snap_minutes,
    snap_time,
    time_to_minutes,
    wrap_aware_interval,
)
from simcal.utils.errors import InvalidFormat


class TestTimeToMinutes:
    """Tests for parsing HH:MM."""

    def test_valid_times(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("09:30") == 570
        assert time_to_minutes("9:30") == 570
        assert time_to_minutes("23:59") == 1439

    def test_malformed_times(self):
        for bad in ["", "930", "9.30", "ab:cd", "24:00", "10:60", "10:5", None, 930]:
            with pytest.raises(InvalidFormat):
                time_to_minutes(bad)

    def test_invalid_format_is_a_value_error(self):
        with pytest.raises(ValueError):
            time_to_minutes("noon")


class TestMinutesToTime:
    """Tests for formatting minute offsets."""

    def test_formats_with_padding(self):
        assert minutes_to_time(0) == "00:00"
        assert minutes_to_time(545) == "09:05"

    def test_wraps_past_midnight(self):
        assert minutes_to_time(1440) == "00:00"
        assert minutes_to_time(1500) == "01:00"

    def test_round_trip_over_a_day(self):
        for x in range(0, 1440, 7):
            assert time_to_minutes(minutes_to_time(x)) == x % 1440


class TestIntervals:
    """Tests for wrap-aware ranges."""

    def test_same_day_interval(self):
        assert wrap_aware_interval("10:00", "11:30") == (600, 690)

    def test_interval_crossing_midnight(self):
        assert wrap_aware_interval("23:00", "01:00") == (1380, 1500)

    def test_duration(self):
        assert duration_minutes("10:00", "11:30") == 90
        assert duration_minutes("23:30", "00:30") == 60

    def test_add_minutes_wraps(self):
        assert add_minutes("23:30", 60) == "00:30"


class TestSnapping:
    """Tests for granularity snapping."""

    def test_snap_to_five(self):
        assert snap_minutes(602, 5) == 600
        assert snap_minutes(603, 5) == 605

    def test_snap_to_thirty(self):
        assert snap_time("10:14", 30) == "10:00"
        assert snap_time("10:15", 30) == "10:30"
        assert snap_time("23:50", 30) == "00:00"

    def test_granularity_must_be_positive(self):
        with pytest.raises(ValueError):
            snap_minutes(600, 0)
