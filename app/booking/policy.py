"""
Booking policy knobs.

Lead time, duration bounds, refund tiers and commission are plain values
on a frozen dataclass so call sites take a policy instead of reading
module constants. ``DEFAULT_POLICY`` carries the platform defaults.
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass, fields
from typing import Any, Mapping

# Option names accepted by BookingPolicy.from_mapping() besides the field names.
_OPTION_ALIASES = {
    "minLeadHours": "min_lead_hours",
    "maxLeadDays": "max_lead_days",
    "minDurationMinutes": "min_duration_minutes",
    "maxDurationMinutes": "max_duration_minutes",
    "fullRefundHours": "full_refund_hours",
    "partialRefundHours": "partial_refund_hours",
    "partialRefundRate": "partial_refund_rate",
    "commissionRate": "commission_rate",
}

ROUNDING_MODES = {
    decimal.ROUND_HALF_UP,
    decimal.ROUND_HALF_EVEN,
    decimal.ROUND_HALF_DOWN,
}


@dataclass(frozen=True)
class BookingPolicy:
    min_lead_hours: float = 2
    max_lead_days: float = 30
    min_duration_minutes: int = 30
    max_duration_minutes: int = 240
    full_refund_hours: float = 24
    partial_refund_hours: float = 12
    partial_refund_rate: float = 0.5
    commission_rate: float = 0.10
    # Monetary rounding, applied to every computed yen amount.
    rounding: str = decimal.ROUND_HALF_UP

    def __post_init__(self) -> None:
        for name in ("min_lead_hours", "max_lead_days", "min_duration_minutes",
                     "max_duration_minutes", "full_refund_hours", "partial_refund_hours"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.min_duration_minutes > self.max_duration_minutes:
            raise ValueError("min_duration_minutes exceeds max_duration_minutes")
        if self.partial_refund_hours > self.full_refund_hours:
            raise ValueError("partial_refund_hours exceeds full_refund_hours")
        for name in ("partial_refund_rate", "commission_rate"):
            if not 0 <= getattr(self, name) <= 1:
                raise ValueError(f"{name} must be between 0 and 1")
        if self.rounding not in ROUNDING_MODES:
            raise ValueError(f"Unsupported rounding mode: {self.rounding}")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> BookingPolicy:
        """Build a policy from camelCase or snake_case option names."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown booking policy option: {key}")
            kwargs[name] = value
        return cls(**kwargs)


DEFAULT_POLICY = BookingPolicy()
