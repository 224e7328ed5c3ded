"""Weekly operating hours lookups. Weekdays are numbered 0=Sunday to 6=Saturday."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from app.models import OperatingHours


def get_day_of_week(day: date) -> int:
    # date.weekday() is 0=Monday.
    return (day.weekday() + 1) % 7


def _hours_for(operating_hours: Iterable[OperatingHours], day: date) -> Optional[OperatingHours]:
    day_of_week = get_day_of_week(day)
    return next((h for h in operating_hours if h.day_of_week == day_of_week), None)


def is_venue_open(operating_hours: Iterable[OperatingHours], day: date) -> bool:
    """A weekday with no entry counts as closed."""
    hours = _hours_for(operating_hours, day)
    return hours is not None and not hours.is_closed


def get_operating_hours_for_day(
    operating_hours: Iterable[OperatingHours], day: date
) -> Optional[tuple[str, str]]:
    """``(open_time, close_time)`` for ``day``, or None when closed."""
    hours = _hours_for(operating_hours, day)
    if hours is None or hours.is_closed:
        return None
    return hours.open_time, hours.close_time
