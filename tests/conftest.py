"""
Pytest configuration and fixtures.
Reservations are built in memory; nothing here touches Qt.
"""

import itertools
from datetime import date, datetime

import pytest

from simcal.models.reservation import Reservation

DAY = date(2025, 3, 14)
NOW = datetime(2025, 3, 14, 15, 0)


@pytest.fixture
def day():
    return DAY


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_reservation():
    """Factory for reservations with sensible defaults and unique ids."""
    counter = itertools.count(1)

    def _make(
        start_time="10:00",
        end_time="11:00",
        seat_id="LOGITECH-1",
        group_reservation_id=None,
        customer_name="Ayse",
        customer_phone="555 123 4567",
        is_paid=False,
        day=DAY,
        id=None,
    ):
        n = next(counter)
        return Reservation(
            id=id or f"r{n}",
            group_reservation_id=group_reservation_id or f"g{n}",
            seat_id=seat_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            start_time=start_time,
            end_time=end_time,
            date=day,
            is_paid=is_paid,
            created_at=NOW,
        )

    return _make


@pytest.fixture
def id_factory():
    """Deterministic ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"
