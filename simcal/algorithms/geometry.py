# simcal/algorithms/geometry.py

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict

from simcal.algorithms.time_utils import (
    MINUTES_PER_DAY,
    minutes_to_time,
    snap_minutes,
    wrap_aware_interval,
)
from simcal.models.reservation import Reservation


@dataclass(frozen=True)
class GridPosition:
    """Offset and extent along the time axis, both in percent of the visible window."""
    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def as_css(self) -> Dict[str, str]:
        return {"top": f"{self.top}%", "height": f"{self.height}%"}

    def clipped(self) -> "GridPosition":
        """Part that actually falls inside [0, 100]; height 0 if fully outside."""
        top = max(0.0, min(100.0, self.top))
        bottom = max(0.0, min(100.0, self.bottom))
        return GridPosition(top=top, height=max(0.0, bottom - top))


def _window_minutes(window_start_hour: int, window_end_hour: int) -> int:
    if window_end_hour <= window_start_hour:
        raise ValueError(
            f"window end ({window_end_hour}) must be after window start ({window_start_hour})"
        )
    return (window_end_hour - window_start_hour) * 60


def get_grid_position(
    start_time: str, end_time: str, window_start_hour: int, window_end_hour: int
) -> GridPosition:
    """
    Map a booking onto the day grid.

    09:00-10:00 in a 9..23 window -> top 0%, height ~7.14%.
    Bookings reaching outside the window give values outside [0, 100];
    the painter clips them.
    """
    total = _window_minutes(window_start_hour, window_end_hour)
    window_start = window_start_hour * 60

    start, end = wrap_aware_interval(start_time, end_time)

    top = (start - window_start) / total * 100
    height = (end - start) / total * 100
    return GridPosition(top=top, height=height)


def offset_to_time(
    fraction: float, window_start_hour: int, window_end_hour: int, granularity: int = 30
) -> str:
    """Wall-clock time under a click at `fraction` (0 = top, 1 = bottom) of the grid."""
    total = _window_minutes(window_start_hour, window_end_hour)
    fraction = max(0.0, min(1.0, fraction))
    minutes = window_start_hour * 60 + int(fraction * total)
    return minutes_to_time(snap_minutes(minutes, granularity))


# ---------- block status (past / active / upcoming) ----------

class BlockStatus(Enum):
    PAST = "past"
    ACTIVE = "active"
    UPCOMING = "upcoming"


def classify_block(reservation: Reservation, now: datetime, view_date: date) -> BlockStatus:
    """
    Only the day being viewed is compared against the clock: a booking on
    any other day shown in the grid is always UPCOMING.
    """
    if view_date != now.date():
        return BlockStatus.UPCOMING

    current = now.hour * 60 + now.minute
    start, end = reservation.interval()

    if end <= MINUTES_PER_DAY and end < current:
        return BlockStatus.PAST
    if start <= current < end:
        return BlockStatus.ACTIVE
    return BlockStatus.UPCOMING


def palette_key(reservation: Reservation, status: BlockStatus) -> str:
    tense = {
        BlockStatus.PAST: "past",
        BlockStatus.ACTIVE: "active",
        BlockStatus.UPCOMING: "future",
    }[status]
    paid = "paid" if reservation.is_paid else "unpaid"
    return f"{tense}_{paid}"
