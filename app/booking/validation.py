"""
Booking request validation.

Rules run in a fixed order and stop at the first failure; the order
decides which message the user sees when several rules are broken:

  1. date not in the past
  2. minimum lead time
  3. maximum lead time
  4. HH:MM format of both times
  5. start strictly before end
  6. minimum duration
  7. maximum duration
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Protocol, Union

from app.booking.errors import ErrorKind, error_for_kind
from app.booking.policy import DEFAULT_POLICY, BookingPolicy
from app.booking.timeutil import calculate_duration, is_valid_time, time_to_minutes

SECONDS_PER_HOUR = 3600


class TimeRangeRequest(Protocol):
    start_time: str
    end_time: str


@dataclass(frozen=True)
class BookingValidation:
    valid: bool
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @classmethod
    def ok(cls) -> BookingValidation:
        return cls(valid=True)

    @classmethod
    def fail(cls, kind: ErrorKind, error: str) -> BookingValidation:
        return cls(valid=False, error=error, kind=kind)

    def raise_for_error(self) -> None:
        """Raise the matching BookingError if validation failed."""
        if not self.valid:
            raise error_for_kind(self.kind or ErrorKind.POLICY, self.error or "Invalid booking request")


def as_datetime(value: Union[date, datetime]) -> datetime:
    """Dates without a time component count from midnight."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _format_hours(hours: float) -> str:
    return f"{hours:g} hour" + ("" if hours == 1 else "s")


def validate_booking_request(
    request: TimeRangeRequest,
    booking_date: Union[date, datetime],
    *,
    now: datetime,
    policy: BookingPolicy = DEFAULT_POLICY,
) -> BookingValidation:
    """Check a booking request against the lead-time and duration rules.

    ``booking_date`` and ``now`` must be both naive or both aware.
    """
    booking_at = as_datetime(booking_date)

    if booking_at < now:
        return BookingValidation.fail(ErrorKind.POLICY, "Cannot book for past dates")

    hours_until_booking = (booking_at - now).total_seconds() / SECONDS_PER_HOUR
    if hours_until_booking < policy.min_lead_hours:
        return BookingValidation.fail(
            ErrorKind.POLICY,
            f"Bookings must be made at least {_format_hours(policy.min_lead_hours)} in advance",
        )

    if hours_until_booking / 24 > policy.max_lead_days:
        return BookingValidation.fail(
            ErrorKind.POLICY,
            f"Bookings can only be made up to {policy.max_lead_days:g} days in advance",
        )

    if not is_valid_time(request.start_time) or not is_valid_time(request.end_time):
        return BookingValidation.fail(ErrorKind.FORMAT, "Invalid time format. Use HH:MM format")

    if time_to_minutes(request.start_time) >= time_to_minutes(request.end_time):
        return BookingValidation.fail(ErrorKind.ORDERING, "Start time must be before end time")

    duration = calculate_duration(request.start_time, request.end_time)
    if duration < policy.min_duration_minutes:
        return BookingValidation.fail(
            ErrorKind.POLICY,
            f"Minimum booking duration is {policy.min_duration_minutes} minutes",
        )

    if duration > policy.max_duration_minutes:
        max_hours = policy.max_duration_minutes / 60
        limit = _format_hours(max_hours) if max_hours.is_integer() else f"{policy.max_duration_minutes} minutes"
        return BookingValidation.fail(ErrorKind.POLICY, f"Maximum booking duration is {limit}")

    return BookingValidation.ok()
