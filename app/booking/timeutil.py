"""
Wall-clock helpers.

All times are naive ``HH:MM`` strings in the venue's local time, handled
internally as minutes since midnight (0-1439).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from app.booking.errors import InvalidTimeFormat, OrderingError

TIME_PATTERN = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")

MINUTES_PER_DAY = 24 * 60


def is_valid_time(value: object) -> bool:
    return isinstance(value, str) and TIME_PATTERN.fullmatch(value) is not None


def time_to_minutes(value: str) -> int:
    """Parse ``HH:MM`` into minutes since midnight.

    Raises InvalidTimeFormat for anything that is not a zero-padded
    24-hour time; nothing is coerced.
    """
    match = TIME_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeFormat(f"Invalid time format: {value!r}. Use HH:MM format")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeFormat(f"Minutes out of range for a single day: {minutes}")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def calculate_duration(start_time: str, end_time: str) -> int:
    """Minutes from start to end. Negative when the pair is misordered."""
    return time_to_minutes(end_time) - time_to_minutes(start_time)


@dataclass(frozen=True)
class Interval:
    """Half-open ``[start, end)`` span within one day, in minutes."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start < MINUTES_PER_DAY or not 0 <= self.end < MINUTES_PER_DAY:
            raise InvalidTimeFormat(f"Interval outside a single day: {self.start}-{self.end}")
        if self.start >= self.end:
            raise OrderingError("Start time must be before end time")

    @classmethod
    def from_strings(cls, start_time: str, end_time: str) -> Interval:
        return cls(time_to_minutes(start_time), time_to_minutes(end_time))

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    def overlaps(self, other: Interval) -> bool:
        # Touching boundaries (10:00 end vs 10:00 start) do not overlap.
        return self.start < other.end and other.start < self.end

    def as_strings(self) -> tuple[str, str]:
        return minutes_to_time(self.start), minutes_to_time(self.end)
