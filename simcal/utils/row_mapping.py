"""
Conversion between backend rows (snake_case dicts as the hosted table
returns them) and the typed entities the scheduling code works with.

Rows are validated here, once, instead of trusting whatever shape the
store hands back.
"""

import logging
import datetime as dt
from typing import Any, Dict, Iterable, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from simcal.algorithms.time_utils import time_to_minutes
from simcal.models.reservation import Reservation
from simcal.models.seat import SimulatorGroup
from simcal.utils.errors import InvalidFormat, RowMappingError

logger = logging.getLogger(__name__)


class ReservationRow(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: str
    group_id: str
    seat_id: str
    name: str
    phone: str = ""
    start_time: str
    end_time: str
    is_paid: bool = False
    created_at: Optional[int] = None   # epoch milliseconds
    date: dt.date

    @field_validator("id", "group_id", "seat_id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        # numeric primary keys come back as ints
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def check_clock(cls, value: str) -> str:
        # Postgres `time` columns come back as HH:MM:SS
        if len(value) == 8 and value.count(":") == 2:
            value = value[:5]
        try:
            time_to_minutes(value)
        except InvalidFormat as exc:
            raise ValueError(str(exc)) from exc
        return value


class SimulatorGroupRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    seat_count: int = Field(
        default=8, ge=1, validation_alias=AliasChoices("seat_count", "seatCount")
    )
    order: int = 0


def _validate(model, row: Dict[str, Any]):
    try:
        return model.model_validate(row)
    except ValidationError as exc:
        raise RowMappingError(f"bad {model.__name__} {row.get('id')!r}: {exc}") from exc


# ---------- reservations ----------

def reservation_from_row(row: Dict[str, Any]) -> Reservation:
    parsed = _validate(ReservationRow, row)
    if parsed.created_at is not None:
        created_at = dt.datetime.fromtimestamp(parsed.created_at / 1000)
    else:
        created_at = dt.datetime.now()

    return Reservation(
        id=parsed.id,
        group_reservation_id=parsed.group_id,
        seat_id=parsed.seat_id,
        customer_name=parsed.name,
        customer_phone=parsed.phone,
        start_time=parsed.start_time,
        end_time=parsed.end_time,
        date=parsed.date,
        is_paid=parsed.is_paid,
        created_at=created_at,
    )


def reservation_to_row(res: Reservation) -> Dict[str, Any]:
    return {
        "id": res.id,
        "group_id": res.group_reservation_id,
        "seat_id": res.seat_id,
        "name": res.customer_name,
        "phone": res.customer_phone,
        "start_time": res.start_time,
        "end_time": res.end_time,
        "is_paid": res.is_paid,
        "created_at": int(res.created_at.timestamp() * 1000),
        "date": res.date.isoformat(),
    }


def reservations_from_rows(
    rows: Iterable[Dict[str, Any]], skip_invalid: bool = False
) -> List[Reservation]:
    """
    Map a whole table read. With `skip_invalid` broken rows are logged and
    left out instead of failing the load.
    """
    out: List[Reservation] = []
    for row in rows:
        try:
            out.append(reservation_from_row(row))
        except RowMappingError as exc:
            if not skip_invalid:
                raise
            logger.warning("skipping reservation row: %s", exc)
    return out


# ---------- simulator groups ----------

def group_from_row(row: Dict[str, Any]) -> SimulatorGroup:
    parsed = _validate(SimulatorGroupRow, row)
    return SimulatorGroup(
        id=parsed.id, name=parsed.name, seat_count=parsed.seat_count, order=parsed.order
    )


def group_to_row(group: SimulatorGroup) -> Dict[str, Any]:
    return {
        "id": group.id,
        "name": group.name,
        "seat_count": group.seat_count,
        "order": group.order,
    }
