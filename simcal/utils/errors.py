# simcal/utils/errors.py


class SchedulingError(Exception):
    """Base class for everything the scheduling core rejects."""


class InvalidFormat(SchedulingError, ValueError):
    """A wall-clock string is not of the form HH:MM."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"invalid time {value!r}, expected HH:MM")


class InvalidReservation(SchedulingError, ValueError):
    """Booking input rejected before any overlap check (blank name, no seats...)."""


class OverlapConflict(SchedulingError):
    """
    The requested range clashes with existing bookings on one seat.

    `conflicts` holds the reservations it clashed with so the caller
    can tell the user who is already sitting there.
    """

    def __init__(self, seat_id: str, start_time: str, end_time: str, conflicts):
        self.seat_id = seat_id
        self.start_time = start_time
        self.end_time = end_time
        self.conflicts = list(conflicts)

        clashes = ", ".join(
            f"{c.customer_name} ({c.start_time}-{c.end_time})" for c in self.conflicts
        )
        super().__init__(
            f"seat {seat_id} is taken between {start_time} and {end_time}: {clashes}"
        )


class EmptyGroupViolation(SchedulingError):
    def __init__(self, group_reservation_id: str):
        self.group_reservation_id = group_reservation_id
        super().__init__(
            f"cannot remove the last seat of group {group_reservation_id}; "
            "delete the whole reservation instead"
        )


class OrphanSeatReference(SchedulingError):
    """A seat id that the current group configuration no longer produces."""

    def __init__(self, seat_id: str, reservation_id: str | None = None):
        self.seat_id = seat_id
        self.reservation_id = reservation_id
        if reservation_id:
            msg = f"reservation {reservation_id} points at unknown seat {seat_id}"
        else:
            msg = f"unknown seat {seat_id}"
        super().__init__(msg)


class ReservationNotFound(SchedulingError, LookupError):
    def __init__(self, reservation_id: str):
        self.reservation_id = reservation_id
        super().__init__(f"no reservation with id {reservation_id}")


class RowMappingError(SchedulingError, ValueError):
    """A storage row could not be turned into a typed entity."""
