"""Availability checks against already-committed reservations."""

from __future__ import annotations

from typing import Iterable, Protocol, TypeVar

from app.booking.timeutil import time_to_minutes


class Reservation(Protocol):
    start_time: str
    end_time: str


R = TypeVar("R", bound=Reservation)


def _overlaps(start: int, end: int, reservation: Reservation) -> bool:
    return start < time_to_minutes(reservation.end_time) and time_to_minutes(reservation.start_time) < end


def is_slot_available(
    start_time: str,
    end_time: str,
    existing_reservations: Iterable[Reservation],
) -> bool:
    """True when ``[start_time, end_time)`` overlaps none of the reservations."""
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    for reservation in existing_reservations:
        if _overlaps(start, end, reservation):
            return False
    return True


def find_conflicts(
    start_time: str,
    end_time: str,
    existing_reservations: Iterable[R],
) -> list[R]:
    """Every reservation that overlaps ``[start_time, end_time)``."""
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    return [r for r in existing_reservations if _overlaps(start, end, r)]
