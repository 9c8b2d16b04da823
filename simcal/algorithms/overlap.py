# simcal/algorithms/overlap.py

from datetime import date
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from simcal.algorithms.time_utils import MINUTES_PER_DAY, wrap_aware_interval
from simcal.utils.errors import OverlapConflict

if TYPE_CHECKING:
    from simcal.models.reservation import Reservation


def intervals_overlap(s1: int, e1: int, s2: int, e2: int) -> bool:
    """Half-open intersection; touching endpoints (10:00-11:00 / 11:00-12:00) do not clash."""
    return s1 < e2 and e1 > s2


def ranges_clash(s1: int, e1: int, s2: int, e2: int) -> bool:
    """
    Wrap-aware clash of two normalised ranges. A range that spills past
    midnight also covers the early hours of the same calendar day, so each
    side is tried one day later as well: 23:30-00:30 clashes with 00:00-01:00.
    """
    return (
        intervals_overlap(s1, e1, s2, e2)
        or intervals_overlap(s1, e1, s2 + MINUTES_PER_DAY, e2 + MINUTES_PER_DAY)
        or intervals_overlap(s1 + MINUTES_PER_DAY, e1 + MINUTES_PER_DAY, s2, e2)
    )


def find_conflicts(
    start_time: str,
    end_time: str,
    existing: Iterable["Reservation"],
    exclude_id: Optional[str] = None,
) -> List["Reservation"]:
    """
    Every reservation in `existing` that intersects [start_time, end_time).

    Both sides are normalised independently and compared with ranges_clash,
    so a candidate that runs past midnight is compared correctly against one
    that does not. The caller is responsible for passing only bookings of
    one seat on one day.
    """
    start, end = wrap_aware_interval(start_time, end_time)

    conflicts: List["Reservation"] = []
    for res in existing:
        if exclude_id is not None and res.id == exclude_id:
            continue
        res_start, res_end = wrap_aware_interval(res.start_time, res.end_time)
        if ranges_clash(start, end, res_start, res_end):
            conflicts.append(res)
    return conflicts


def check_overlap(
    start_time: str,
    end_time: str,
    existing: Iterable["Reservation"],
    exclude_id: Optional[str] = None,
) -> bool:
    return bool(find_conflicts(start_time, end_time, existing, exclude_id))


def scope_to_seat_day(
    reservations: Iterable["Reservation"], seat_id: str, day: date
) -> List["Reservation"]:
    return [r for r in reservations if r.seat_id == seat_id and r.date == day]


def ensure_available(
    seat_id: str,
    start_time: str,
    end_time: str,
    existing: Sequence["Reservation"],
    exclude_id: Optional[str] = None,
) -> None:
    conflicts = find_conflicts(start_time, end_time, existing, exclude_id)
    if conflicts:
        raise OverlapConflict(seat_id, start_time, end_time, conflicts)
