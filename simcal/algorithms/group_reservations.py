# simcal/algorithms/group_reservations.py

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Sequence

from simcal.algorithms.overlap import ensure_available, scope_to_seat_day
from simcal.algorithms.time_utils import add_minutes, duration_minutes, time_to_minutes
from simcal.models.reservation import Reservation
from simcal.utils.errors import (
    EmptyGroupViolation,
    InvalidReservation,
    ReservationNotFound,
)

# fields every row of one group is expected to share
SHARED_FIELDS = ("customer_name", "customer_phone", "start_time", "end_time", "is_paid")


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class CustomerDetails:
    name: str
    phone: str
    start_time: str
    end_time: str
    is_paid: bool = False


def _check_times(start_time: str, end_time: str) -> None:
    # raises InvalidFormat on bad input
    if time_to_minutes(start_time) == time_to_minutes(end_time):
        raise InvalidReservation("start and end time cannot be the same")


def validate_details(details: CustomerDetails, seat_ids: Sequence[str]) -> None:
    if not details.name or not details.name.strip():
        raise InvalidReservation("customer name is required")
    if not details.phone or not details.phone.strip():
        raise InvalidReservation("customer phone is required")
    if not seat_ids:
        raise InvalidReservation("select at least one seat")
    if len(set(seat_ids)) != len(seat_ids):
        raise InvalidReservation("the same seat was selected twice")
    _check_times(details.start_time, details.end_time)


def _find(snapshot: Sequence[Reservation], reservation_id: str) -> Reservation:
    for res in snapshot:
        if res.id == reservation_id:
            return res
    raise ReservationNotFound(reservation_id)


# ---------- creation ----------

def create_group(
    details: CustomerDetails,
    seat_ids: Sequence[str],
    day: date,
    snapshot: Sequence[Reservation],
    now: Optional[datetime] = None,
    id_factory: Callable[[], str] = new_id,
) -> List[Reservation]:
    """
    One row per seat, all sharing a fresh group id.

    Every seat is checked before anything is built: a clash on any of them
    raises OverlapConflict and nothing is returned for the others.
    """
    validate_details(details, seat_ids)

    for seat_id in seat_ids:
        ensure_available(
            seat_id,
            details.start_time,
            details.end_time,
            scope_to_seat_day(snapshot, seat_id, day),
        )

    created_at = now or datetime.now()
    group_id = id_factory()

    return [
        Reservation(
            id=id_factory(),
            group_reservation_id=group_id,
            seat_id=seat_id,
            customer_name=details.name.strip(),
            customer_phone=details.phone.strip(),
            start_time=details.start_time,
            end_time=details.end_time,
            date=day,
            is_paid=details.is_paid,
            created_at=created_at,
        )
        for seat_id in seat_ids
    ]


# ---------- editing ----------

def bulk_edit(
    snapshot: Sequence[Reservation],
    selected_ids: Sequence[str],
    name: Optional[str] = None,
    phone: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    is_paid: Optional[bool] = None,
) -> List[Reservation]:
    """
    Apply the same values to every selected row. Seats are never added or
    removed here.

    When the time range changes, each edited row is checked against its
    seat/day as it would look after the edit (the other selected rows
    already moved), so two selected rows on one seat cannot be pushed on
    top of each other either.
    """
    if not selected_ids:
        return []

    changes = {}
    if name is not None:
        if not name.strip():
            raise InvalidReservation("customer name is required")
        changes["customer_name"] = name.strip()
    if phone is not None:
        if not phone.strip():
            raise InvalidReservation("customer phone is required")
        changes["customer_phone"] = phone.strip()
    if start_time is not None:
        changes["start_time"] = start_time
    if end_time is not None:
        changes["end_time"] = end_time
    if is_paid is not None:
        changes["is_paid"] = is_paid

    edited = [_find(snapshot, rid).with_changes(**changes) for rid in selected_ids]
    for res in edited:
        _check_times(res.start_time, res.end_time)

    if start_time is None and end_time is None:
        return edited

    by_id = {res.id: res for res in edited}
    after = [by_id.get(res.id, res) for res in snapshot]
    for res in edited:
        ensure_available(
            res.seat_id,
            res.start_time,
            res.end_time,
            scope_to_seat_day(after, res.seat_id, res.date),
            exclude_id=res.id,
        )
    return edited


def move_reservation(
    reservation: Reservation,
    seat_id: str,
    start_time: str,
    end_time: str,
    snapshot: Sequence[Reservation],
) -> Reservation:
    """Move one calendar block; the rest of its group stays where it is."""
    _check_times(start_time, end_time)
    ensure_available(
        seat_id,
        start_time,
        end_time,
        scope_to_seat_day(snapshot, seat_id, reservation.date),
        exclude_id=reservation.id,
    )
    return reservation.with_changes(seat_id=seat_id, start_time=start_time, end_time=end_time)


def move_keeping_duration(
    reservation: Reservation,
    seat_id: str,
    new_start: str,
    snapshot: Sequence[Reservation],
) -> Reservation:
    length = duration_minutes(reservation.start_time, reservation.end_time)
    return move_reservation(
        reservation, seat_id, new_start, add_minutes(new_start, length), snapshot
    )


# ---------- seat membership ----------

def add_seat(
    reference: Reservation,
    seat_id: str,
    snapshot: Sequence[Reservation],
    now: Optional[datetime] = None,
    id_factory: Callable[[], str] = new_id,
) -> Reservation:
    """New row on `seat_id` copying the reference's customer, time and payment."""
    ensure_available(
        seat_id,
        reference.start_time,
        reference.end_time,
        scope_to_seat_day(snapshot, seat_id, reference.date),
    )
    return reference.with_changes(
        id=id_factory(),
        seat_id=seat_id,
        created_at=now or datetime.now(),
    )


def remove_seat(reservation_id: str, snapshot: Sequence[Reservation]) -> Reservation:
    """
    Returns the row to delete. The last row of a group cannot go this way,
    the caller has to delete the whole group.
    """
    target = _find(snapshot, reservation_id)
    if len(select_group(snapshot, reservation_id)) <= 1:
        raise EmptyGroupViolation(target.group_reservation_id)
    return target


# ---------- grouping / selection ----------

def select_group(snapshot: Sequence[Reservation], first_id: str) -> List[Reservation]:
    """All rows sharing the first selected row's group id and date."""
    first = _find(snapshot, first_id)
    return [
        r for r in snapshot
        if r.group_reservation_id == first.group_reservation_id and r.date == first.date
    ]


def group_by_reservation(rows: Sequence[Reservation]) -> Dict[str, List[Reservation]]:
    groups: Dict[str, List[Reservation]] = {}
    for res in rows:
        groups.setdefault(res.group_reservation_id, []).append(res)
    return groups


def group_seat_ids(snapshot: Sequence[Reservation], reservation: Reservation) -> List[str]:
    return [r.seat_id for r in select_group(snapshot, reservation.id)]


def group_inconsistencies(rows: Sequence[Reservation]) -> List[str]:
    """Names of shared fields that differ between rows of one group."""
    diverged = []
    for name in SHARED_FIELDS:
        if len({getattr(r, name) for r in rows}) > 1:
            diverged.append(name)
    return diverged
