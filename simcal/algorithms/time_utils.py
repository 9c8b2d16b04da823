# simcal/algorithms/time_utils.py

import re
from typing import Tuple

from simcal.utils.errors import InvalidFormat

MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def time_to_minutes(value: str) -> int:
    """
    "HH:MM" -> minutes since midnight.
    Raises InvalidFormat for anything that is not a wall-clock time.
    """
    if not isinstance(value, str):
        raise InvalidFormat(value)
    match = _CLOCK_RE.match(value.strip())
    if not match:
        raise InvalidFormat(value)

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidFormat(value)
    return hours * 60 + minutes


def minutes_to_time(total_minutes: int) -> str:
    """
    Inverse of time_to_minutes. Anything past midnight wraps around,
    there is no day counter.
    """
    hours = (total_minutes // 60) % 24
    minutes = total_minutes % 60
    return f"{hours:02d}:{minutes:02d}"


def wrap_aware_interval(start_time: str, end_time: str) -> Tuple[int, int]:
    """
    Half-open [start, end) in minutes. An end earlier than the start means
    the booking runs past midnight, so the end is pushed into the next day:
    23:00-01:00 -> (1380, 1500).
    """
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    if end < start:
        end += MINUTES_PER_DAY
    return start, end


def duration_minutes(start_time: str, end_time: str) -> int:
    start, end = wrap_aware_interval(start_time, end_time)
    return end - start


def snap_minutes(minutes: int, granularity: int) -> int:
    """Round to the nearest multiple of `granularity` (ties go up)."""
    if granularity <= 0:
        raise ValueError("granularity must be positive")
    return ((minutes + granularity // 2) // granularity) * granularity


def snap_time(value: str, granularity: int) -> str:
    return minutes_to_time(snap_minutes(time_to_minutes(value), granularity))


def add_minutes(value: str, delta: int) -> str:
    return minutes_to_time(time_to_minutes(value) + delta)
