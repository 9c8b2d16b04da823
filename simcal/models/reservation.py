from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Tuple

from simcal.algorithms.overlap import ranges_clash
from simcal.algorithms.time_utils import time_to_minutes, wrap_aware_interval


@dataclass
class Reservation:
    # One seat booked for one time range on one day.
    # Rows created together share `group_reservation_id`.

    id: str
    group_reservation_id: str
    seat_id: str
    customer_name: str
    customer_phone: str
    start_time: str          # "HH:MM"
    end_time: str            # "HH:MM", earlier than start_time = runs past midnight
    date: date
    is_paid: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    def interval(self) -> Tuple[int, int]:
        """Wrap-aware [start, end) in minutes."""
        return wrap_aware_interval(self.start_time, self.end_time)

    def overlaps(self, other: "Reservation") -> bool:
        """Check if this reservation clashes with another on the same seat & day."""
        if self.seat_id != other.seat_id or self.date != other.date:
            return False
        return ranges_clash(*self.interval(), *other.interval())

    def with_changes(self, **changes) -> "Reservation":
        return replace(self, **changes)

    def __lt__(self, other: "Reservation") -> bool:
        """
        For sorting: first by date, then by start time, then by seat.
        Keeps per-seat lists ordered for binary search.
        """
        return (
            (self.date, time_to_minutes(self.start_time), self.seat_id)
            < (other.date, time_to_minutes(other.start_time), other.seat_id)
        )

    def __repr__(self) -> str:
        return (
            f"{self.customer_name}: {self.seat_id} "
            f"{self.date} ({self.start_time}-{self.end_time})"
        )
