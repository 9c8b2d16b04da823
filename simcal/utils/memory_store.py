"""
In-process stand-in for the hosted reservations table.

Rows are plain snake_case dicts, exactly what the real backend returns, so
everything read from here goes through row_mapping like production data.
"""

import copy
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from simcal.algorithms.scheduler import PendingChange
from simcal.models.reservation import Reservation
from simcal.models.seat import SimulatorGroup
from simcal.utils.row_mapping import group_from_row, reservation_to_row, reservations_from_rows

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class InMemoryReservationStore:

    def __init__(self, tables: Optional[Dict[str, Iterable[Row]]] = None) -> None:
        self._tables: Dict[str, Dict[str, Row]] = {}
        for name, rows in (tables or {}).items():
            for row in rows:
                self.insert(name, row)

    def _table(self, name: str) -> Dict[str, Row]:
        return self._tables.setdefault(name, {})

    def select(self, table: str, where: Optional[Callable[[Row], bool]] = None) -> List[Row]:
        rows = [copy.deepcopy(r) for r in self._table(table).values()]
        if where is not None:
            rows = [r for r in rows if where(r)]
        return rows

    def insert(self, table: str, row: Row) -> None:
        if "id" not in row:
            raise KeyError(f"row for {table} has no id")
        key = str(row["id"])
        rows = self._table(table)
        if key in rows:
            raise KeyError(f"duplicate id {key} in {table}")
        rows[key] = copy.deepcopy(row)

    def upsert(self, table: str, row: Row) -> None:
        key = str(row["id"])
        self._table(table)[key] = copy.deepcopy(row)

    def delete(self, table: str, row_id: str) -> bool:
        return self._table(table).pop(row_id, None) is not None

    def delete_where(self, table: str, where: Callable[[Row], bool]) -> int:
        rows = self._table(table)
        doomed = [key for key, row in rows.items() if where(row)]
        for key in doomed:
            del rows[key]
        logger.info("deleted %d row(s) from %s", len(doomed), table)
        return len(doomed)


# ---------- typed access ----------

RESERVATIONS = "reservations"
SIMULATOR_GROUPS = "simulator_groups"


def fetch_reservations(store: InMemoryReservationStore) -> List[Reservation]:
    return reservations_from_rows(store.select(RESERVATIONS), skip_invalid=True)


def fetch_groups(store: InMemoryReservationStore) -> List[SimulatorGroup]:
    rows = sorted(store.select(SIMULATOR_GROUPS), key=lambda r: r.get("order", 0))
    return [group_from_row(r) for r in rows]


def save_change(store: InMemoryReservationStore, change: PendingChange) -> None:
    """Write one pending change through to the store."""
    for rid in change.deleted_ids:
        store.delete(RESERVATIONS, rid)
    for res in change.upserts:
        store.upsert(RESERVATIONS, reservation_to_row(res))
    logger.info("saved: %s", change.description)
