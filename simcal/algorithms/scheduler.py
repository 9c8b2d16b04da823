import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from simcal.algorithms import group_reservations as groups_core
from simcal.algorithms.search_algorithms import binary_search
from simcal.algorithms.seat_catalog import build_catalog, ensure_seat, find_orphans, seats_for_group
from simcal.algorithms.time_utils import time_to_minutes
from simcal.models.reservation import Reservation
from simcal.models.seat import DEFAULT_GROUPS, Seat, SimulatorGroup
from simcal.utils.config import settings
from simcal.utils.errors import ReservationNotFound, SchedulingError

logger = logging.getLogger(__name__)


@dataclass
class PendingChange:
    """A local mutation the store has not confirmed yet."""
    description: str
    upserts: List[Reservation] = field(default_factory=list)
    deleted_ids: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)


class CalendarState:
    """
    Everything the calendar screen needs, held in one object and handed to
    whoever draws or edits it.

    The rows loaded from the store are authoritative. Local edits are kept as
    PendingChange entries layered on top until the next `load_snapshot`, which
    throws them away and takes the store's rows as they are.

    The scheduling rules themselves live in group_reservations/overlap; this
    class only picks the right snapshot and records the outcome.
    """

    def __init__(
        self,
        groups: Optional[Iterable[SimulatorGroup]] = None,
        label_prefix: Optional[str] = None,
        day_start_hour: Optional[int] = None,
        day_end_hour: Optional[int] = None,
    ) -> None:
        self.groups: List[SimulatorGroup] = list(groups or DEFAULT_GROUPS)
        self.label_prefix: str = label_prefix if label_prefix is not None else settings.SEAT_LABEL_PREFIX
        self.day_start_hour: int = 0
        self.day_end_hour: int = 0
        self.set_window(
            day_start_hour if day_start_hour is not None else settings.DAY_START_HOUR,
            day_end_hour if day_end_hour is not None else settings.DAY_END_HOUR,
        )

        self._authoritative: List[Reservation] = []
        self.pending: List[PendingChange] = []

        # (seat_id, date) -> reservations sorted by start minute
        self._by_seat_date: Dict[Tuple[str, date], List[Reservation]] = {}

    # ---------- configuration ----------

    def set_groups(self, groups: Iterable[SimulatorGroup]) -> None:
        self.groups = list(groups)
        orphans = self.orphaned_reservations()
        if orphans:
            logger.warning("%d reservation(s) point at seats that no longer exist", len(orphans))

    def set_label_prefix(self, prefix: str) -> None:
        self.label_prefix = prefix

    def set_window(self, start_hour: int, end_hour: int) -> None:
        if end_hour <= start_hour:
            raise ValueError("closing hour must be after opening hour")
        self.day_start_hour = start_hour
        self.day_end_hour = end_hour

    @property
    def catalog(self) -> List[Seat]:
        return build_catalog(self.groups, self.label_prefix)

    def view_seats(self, group_id: str) -> List[Seat]:
        return seats_for_group(self.catalog, group_id)

    # ---------- snapshot handling ----------

    def load_snapshot(self, reservations: Iterable[Reservation]) -> None:
        """Replace everything with what the store returned; pending edits are dropped."""
        self._authoritative = list(reservations)
        dropped = len(self.pending)
        self.pending = []
        self._reindex()
        logger.debug(
            "loaded %d reservation(s), dropped %d pending change(s)",
            len(self._authoritative), dropped,
        )
        clashes = self.double_bookings()
        if clashes:
            logger.warning("%d double booking(s) in the loaded reservations", len(clashes))

    def visible_reservations(self) -> List[Reservation]:
        """Authoritative rows with pending changes applied, in order."""
        current: Dict[str, Reservation] = {r.id: r for r in self._authoritative}
        for change in self.pending:
            for rid in change.deleted_ids:
                current.pop(rid, None)
            for res in change.upserts:
                current[res.id] = res
        return list(current.values())

    def is_confirmed(self, reservation_id: str) -> bool:
        for change in self.pending:
            if reservation_id in change.deleted_ids:
                return False
            if any(r.id == reservation_id for r in change.upserts):
                return False
        return True

    def _record(self, change: PendingChange) -> PendingChange:
        self.pending.append(change)
        self._reindex()
        logger.info("%s (unconfirmed)", change.description)
        return change

    def _reindex(self) -> None:
        self._by_seat_date = {}
        for res in self.visible_reservations():
            blist = self._by_seat_date.setdefault((res.seat_id, res.date), [])
            starts = [time_to_minutes(r.start_time) for r in blist]
            _, idx = binary_search(starts, time_to_minutes(res.start_time))
            blist.insert(idx, res)

    # ---------- queries ----------

    def reservations_for_seat_on_day(self, seat_id: str, day: date) -> List[Reservation]:
        return list(self._by_seat_date.get((seat_id, day), []))

    def reservations_for_day(self, day: date) -> List[Reservation]:
        out: List[Reservation] = []
        for (seat_id, d), blist in self._by_seat_date.items():
            if d == day:
                out.extend(blist)
        out.sort()
        return out

    def reservations_for_month(self, year: int, month: int) -> List[Reservation]:
        out = [
            r for r in self.visible_reservations()
            if r.date.year == year and r.date.month == month
        ]
        out.sort()
        return out

    def find_reservation(self, reservation_id: str) -> Reservation | None:
        for res in self.visible_reservations():
            if res.id == reservation_id:
                return res
        return None

    def orphaned_reservations(self) -> List[Reservation]:
        return find_orphans(self.visible_reservations(), self.catalog)

    def group_seats(self, reservation: Reservation) -> List[str]:
        return groups_core.group_seat_ids(self.visible_reservations(), reservation)

    def double_bookings(self) -> List[Tuple[Reservation, Reservation]]:
        """
        Pairs of visible rows that clash on one seat/day. The rules never
        produce these, but rows written by another client can.
        """
        pairs: List[Tuple[Reservation, Reservation]] = []
        for blist in self._by_seat_date.values():
            for i, first in enumerate(blist):
                for second in blist[i + 1:]:
                    if first.overlaps(second):
                        pairs.append((first, second))
        return pairs

    # ---------- mutations (validated, then recorded as pending) ----------

    def book_group(
        self,
        details: groups_core.CustomerDetails,
        seat_ids: Sequence[str],
        day: date,
        now: Optional[datetime] = None,
    ) -> PendingChange:
        catalog = self.catalog
        for seat_id in seat_ids:
            ensure_seat(seat_id, catalog)

        snapshot = self.reservations_for_day(day)
        try:
            rows = groups_core.create_group(details, seat_ids, day, snapshot, now=now)
        except SchedulingError as exc:
            logger.warning("booking for %s rejected: %s", details.name, exc)
            raise

        return self._record(PendingChange(
            description=f"booked {len(rows)} seat(s) for {details.name} on {day}",
            upserts=rows,
        ))

    def add_seat_to_group(
        self, reference_id: str, seat_id: str, now: Optional[datetime] = None
    ) -> PendingChange:
        reference = self._require(reference_id)
        ensure_seat(seat_id, self.catalog)
        try:
            row = groups_core.add_seat(
                reference, seat_id, self.reservations_for_day(reference.date), now=now
            )
        except SchedulingError as exc:
            logger.warning("adding %s to group %s rejected: %s",
                           seat_id, reference.group_reservation_id, exc)
            raise

        return self._record(PendingChange(
            description=f"added {seat_id} to group {reference.group_reservation_id}",
            upserts=[row],
        ))

    def remove_seat_from_group(self, reservation_id: str) -> PendingChange:
        row = groups_core.remove_seat(reservation_id, self.visible_reservations())
        return self._record(PendingChange(
            description=f"removed {row.seat_id} from group {row.group_reservation_id}",
            deleted_ids=[row.id],
        ))

    def delete_group(self, reservation_id: str) -> PendingChange:
        rows = groups_core.select_group(self.visible_reservations(), reservation_id)
        return self._record(PendingChange(
            description=f"deleted group {rows[0].group_reservation_id}",
            deleted_ids=[r.id for r in rows],
        ))

    def move_reservation(
        self, reservation_id: str, seat_id: str, start_time: str, end_time: str
    ) -> PendingChange:
        res = self._require(reservation_id)
        ensure_seat(seat_id, self.catalog)
        moved = groups_core.move_reservation(
            res, seat_id, start_time, end_time, self.reservations_for_day(res.date)
        )
        return self._record(PendingChange(
            description=f"moved {res.id} to {seat_id} {start_time}-{end_time}",
            upserts=[moved],
        ))

    def bulk_edit(self, selected_ids: Sequence[str], **fields) -> PendingChange:
        edited = groups_core.bulk_edit(self.visible_reservations(), selected_ids, **fields)
        return self._record(PendingChange(
            description=f"edited {len(edited)} reservation(s)",
            upserts=edited,
        ))

    def _require(self, reservation_id: str) -> Reservation:
        res = self.find_reservation(reservation_id)
        if res is None:
            raise ReservationNotFound(reservation_id)
        return res
