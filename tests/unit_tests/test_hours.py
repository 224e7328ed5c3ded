"""Tests for weekly operating hours lookups."""

from datetime import date

import pytest

from app.booking.hours import get_day_of_week, get_operating_hours_for_day, is_venue_open
from app.models import OperatingHours

SUNDAY = date(2026, 3, 8)
MONDAY = date(2026, 3, 9)
SATURDAY = date(2026, 3, 14)

HOURS = [
    OperatingHours(day_of_week=0, open_time="10:00", close_time="18:00"),
    OperatingHours(day_of_week=1, open_time="09:00", close_time="21:00", is_closed=True),
    OperatingHours(day_of_week=2, open_time="09:00", close_time="21:00"),
]


@pytest.mark.parametrize(
    "day, expected",
    [(SUNDAY, 0), (MONDAY, 1), (date(2026, 3, 11), 3), (SATURDAY, 6)],
)
def test_day_of_week_counts_from_sunday(day, expected):
    assert get_day_of_week(day) == expected


class TestOperatingHours:
    def test_open_day(self):
        assert is_venue_open(HOURS, SUNDAY)
        assert get_operating_hours_for_day(HOURS, SUNDAY) == ("10:00", "18:00")

    def test_closed_flag(self):
        assert not is_venue_open(HOURS, MONDAY)
        assert get_operating_hours_for_day(HOURS, MONDAY) is None

    def test_missing_day_counts_as_closed(self):
        assert not is_venue_open(HOURS, SATURDAY)
        assert get_operating_hours_for_day(HOURS, SATURDAY) is None

    def test_no_hours_at_all(self):
        assert get_operating_hours_for_day([], SUNDAY) is None
