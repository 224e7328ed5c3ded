"""
Price and commission calculation.

Amounts are whole yen. Every derived amount is rounded on its own
(subtotal first, then commission) so results match the amounts stored on
existing bookings to the yen.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import Optional, Union

from app.booking.policy import DEFAULT_POLICY
from app.models import BookingCalculation

HALF_HOUR_MINUTES = 30

Number = Union[int, float, Decimal]


def round_half_up(value: Number, rounding: str = decimal.ROUND_HALF_UP) -> int:
    """Round to a whole yen. ``rounding`` is any decimal half-rounding mode."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=rounding))


def calculate_booking_price(
    price_per_hour: int,
    price_per_half_hour: Optional[int],
    duration_minutes: int,
    commission_rate: float = DEFAULT_POLICY.commission_rate,
    rounding: str = DEFAULT_POLICY.rounding,
) -> BookingCalculation:
    """Subtotal, commission and venue payout for a booking.

    An exact 30-minute booking on a court with a half-hour rate is charged
    that flat rate; everything else is pro-rated from the hourly rate.
    Commission comes out of the subtotal, the payer is charged the subtotal.
    """
    if duration_minutes == HALF_HOUR_MINUTES and price_per_half_hour is not None:
        subtotal = int(price_per_half_hour)
    else:
        subtotal = round_half_up(Decimal(str(price_per_hour)) * duration_minutes / 60, rounding)

    commission = round_half_up(Decimal(subtotal) * Decimal(str(commission_rate)), rounding)

    return BookingCalculation(
        subtotal=subtotal,
        commission=commission,
        total_amount=subtotal,
        venue_payout=subtotal - commission,
        duration_minutes=duration_minutes,
    )


def format_price(amount: int) -> str:
    """``3000`` -> ``"¥3,000"``."""
    return f"¥{amount:,}"
