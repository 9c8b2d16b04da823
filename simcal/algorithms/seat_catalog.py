# simcal/algorithms/seat_catalog.py

from typing import Iterable, List, Sequence

from simcal.models.reservation import Reservation
from simcal.models.seat import Seat, SimulatorGroup
from simcal.utils.errors import OrphanSeatReference


def generate_seats(
    count: int, group_id: str, start_index: int = 1, label_prefix: str = "S-"
) -> List[Seat]:
    """
    Seats for one group.

    ids are local to the group (LOGITECH-1..LOGITECH-n) and never depend on
    `start_index`; only the labels carry the running number, so reordering
    groups relabels seats but leaves every booking pointing at the same id.
    """
    if count < 0:
        raise ValueError("seat count cannot be negative")

    seats: List[Seat] = []
    for i in range(1, count + 1):
        seats.append(
            Seat(
                id=f"{group_id}-{i}",
                label=f"{label_prefix}{start_index + i - 1}",
                group_id=group_id,
            )
        )
    return seats


def build_catalog(groups: Iterable[SimulatorGroup], label_prefix: str = "S-") -> List[Seat]:
    """Full seat list, groups in configured order, labels numbered across groups."""
    catalog: List[Seat] = []
    running = 1
    for group in sorted(groups, key=lambda g: g.order):
        catalog.extend(generate_seats(group.seat_count, group.id, running, label_prefix))
        running += group.seat_count
    return catalog


def seats_for_group(catalog: Sequence[Seat], group_id: str) -> List[Seat]:
    return [s for s in catalog if s.group_id == group_id]


def display_order(seats: Sequence[Seat]) -> List[Seat]:
    """
    Seat picker layout. Eight seats are shown as two facing rows,
    1-4 on top and 8-5 underneath, anything else stays in order.
    """
    seats = list(seats)
    if len(seats) == 8:
        return seats[:4] + seats[:3:-1]
    return seats


def find_orphans(reservations: Iterable[Reservation], catalog: Sequence[Seat]) -> List[Reservation]:
    """Reservations whose seat disappeared, e.g. after a group's seat count was lowered."""
    known = {s.id for s in catalog}
    return [r for r in reservations if r.seat_id not in known]


def ensure_seat(seat_id: str, catalog: Sequence[Seat]) -> Seat:
    for seat in catalog:
        if seat.id == seat_id:
            return seat
    raise OrphanSeatReference(seat_id)
