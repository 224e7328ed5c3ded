"""
Cancellation refunds.

Tiers, by hours left until the booked start:
  >= full_refund_hours             100%
  >= partial_refund_hours          partial_refund_rate
  otherwise (including past start) 0%
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Union

from app.booking.policy import DEFAULT_POLICY, BookingPolicy
from app.booking.pricing import round_half_up
from app.booking.timeutil import time_to_minutes
from app.booking.validation import SECONDS_PER_HOUR, as_datetime
from app.models import RefundResult


def booking_start(booking_date: Union[date, datetime], start_time: str) -> datetime:
    """Combine the booking date with its ``HH:MM`` start."""
    day = as_datetime(booking_date).replace(hour=0, minute=0, second=0, microsecond=0)
    return day + timedelta(minutes=time_to_minutes(start_time))


def hours_until(booking_date: Union[date, datetime], start_time: str, now: datetime) -> float:
    """Hours from ``now`` to the booked start; negative once it has begun."""
    return (booking_start(booking_date, start_time) - now).total_seconds() / SECONDS_PER_HOUR


def refund_percentage(hours_until_booking: float, policy: BookingPolicy = DEFAULT_POLICY) -> float:
    if hours_until_booking >= policy.full_refund_hours:
        return 100.0
    if hours_until_booking >= policy.partial_refund_hours:
        return float(Decimal(str(policy.partial_refund_rate)) * 100)
    return 0.0


def calculate_refund(
    total_amount: int,
    booking_date: Union[date, datetime],
    start_time: str,
    *,
    now: datetime,
    policy: BookingPolicy = DEFAULT_POLICY,
) -> RefundResult:
    percentage = refund_percentage(hours_until(booking_date, start_time, now), policy)
    amount = round_half_up(Decimal(total_amount) * Decimal(str(percentage)) / 100, policy.rounding)
    return RefundResult(refund_amount=amount, refund_percentage=percentage)
