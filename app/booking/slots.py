"""
Slot generation for one court on one day.

The opening window is cut into fixed-width slots starting at the opening
time. A trailing remainder shorter than one slot is dropped. Slots are
rebuilt on every query; ``is_available`` reflects the reservations passed
in and is a display hint only, the booking write re-checks it.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import Iterable, Iterator, Sequence

from app.booking.overlap import Reservation, is_slot_available
from app.booking.pricing import round_half_up
from app.booking.timeutil import Interval, time_to_minutes
from app.models import TimeSlot

DEFAULT_SLOT_MINUTES = 60


def slot_price(price_per_hour: int, slot_duration_minutes: int, rounding: str = decimal.ROUND_HALF_UP) -> int:
    return round_half_up(Decimal(str(price_per_hour)) * slot_duration_minutes / 60, rounding)


def iter_time_slots(
    court_id: str,
    price_per_hour: int,
    open_time: str,
    close_time: str,
    existing_reservations: Iterable[Reservation],
    slot_duration_minutes: int = DEFAULT_SLOT_MINUTES,
    rounding: str = decimal.ROUND_HALF_UP,
) -> Iterator[TimeSlot]:
    if slot_duration_minutes <= 0:
        raise ValueError("slot_duration_minutes must be positive")

    open_minutes = time_to_minutes(open_time)
    close_minutes = time_to_minutes(close_time)
    # Each slot is checked against the full list, so materialize it once.
    reservations: Sequence[Reservation] = list(existing_reservations)
    price = slot_price(price_per_hour, slot_duration_minutes, rounding)

    current = open_minutes
    number = 1
    while current + slot_duration_minutes <= close_minutes:
        start_time, end_time = Interval(current, current + slot_duration_minutes).as_strings()
        yield TimeSlot(
            id=f"{court_id}-{number}",
            court_id=court_id,
            start_time=start_time,
            end_time=end_time,
            is_available=is_slot_available(start_time, end_time, reservations),
            price=price,
        )
        number += 1
        current += slot_duration_minutes


def generate_time_slots(
    court_id: str,
    price_per_hour: int,
    open_time: str,
    close_time: str,
    existing_reservations: Iterable[Reservation],
    slot_duration_minutes: int = DEFAULT_SLOT_MINUTES,
    rounding: str = decimal.ROUND_HALF_UP,
) -> list[TimeSlot]:
    """All slots for a court between ``open_time`` and ``close_time``.

    Returns an empty list when the venue opens at or after closing time.
    """
    return list(
        iter_time_slots(
            court_id,
            price_per_hour,
            open_time,
            close_time,
            existing_reservations,
            slot_duration_minutes,
            rounding,
        )
    )
