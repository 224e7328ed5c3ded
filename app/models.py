"""Pydantic models for the Court Booking API."""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

_HHMM = r"^([01]\d|2[0-3]):([0-5]\d)$"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    FAILED = "FAILED"


class PayoutStatus(str, Enum):
    """State of the venue's share of a booking."""
    PENDING = "PENDING"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


# Bookings in these states block the court.
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


# ── Engine value types ────────────────────────────────────────────────────


class ExistingReservation(BaseModel):
    """An already-committed booking interval for one court on one date."""
    start_time: str = Field(..., pattern=_HHMM, description="Start time (HH:MM)")
    end_time: str = Field(..., pattern=_HHMM, description="End time (HH:MM)")


class TimeSlot(BaseModel):
    """Generated, priced candidate slot for a court."""
    id: str = Field(..., description="Court-scoped slot identifier")
    court_id: str = Field(..., description="Court identifier")
    start_time: str = Field(..., description="Slot start (HH:MM)")
    end_time: str = Field(..., description="Slot end (HH:MM)")
    is_available: bool = Field(..., description="Whether the slot is free of reservations")
    price: int = Field(..., description="Slot price in yen")


class RateCard(BaseModel):
    """Court pricing."""
    price_per_hour: int = Field(..., ge=0, description="Hourly rate in yen")
    price_per_half_hour: Optional[int] = Field(
        None, ge=0, description="Flat rate for exactly 30 minutes, overrides the hourly rate"
    )


class BookingCalculation(BaseModel):
    """Price breakdown for a booking."""
    subtotal: int
    commission: int
    total_amount: int
    venue_payout: int
    duration_minutes: int

    @model_validator(mode="after")
    def _check_totals(self) -> BookingCalculation:
        if self.subtotal != self.commission + self.venue_payout:
            raise ValueError("subtotal must equal commission + venue_payout")
        if self.total_amount != self.subtotal:
            raise ValueError("total_amount must equal subtotal")
        return self


class RefundResult(BaseModel):
    """Refund owed on cancellation."""
    refund_amount: int = Field(..., ge=0)
    refund_percentage: float = Field(..., ge=0, le=100)


class CreateBookingRequest(BaseModel):
    """Request to book a court. Times are validated by the booking rules, not here."""
    court_id: str = Field(..., description="Court identifier")
    booking_date: date = Field(..., description="Date of play")
    start_time: str = Field(..., description="Start time (HH:MM)")
    end_time: str = Field(..., description="End time (HH:MM)")
    user_id: Optional[str] = Field(None, description="Booking user")
    session_id: Optional[str] = Field(None, description="Linked pickup session")
    user_notes: Optional[str] = Field(None, max_length=500, description="Notes for the venue")


# ── Venues ────────────────────────────────────────────────────────────────


class Court(BaseModel):
    """A bookable court."""
    id: str
    venue_id: str
    name_en: str
    name_ja: str
    sport_type: str
    price_per_hour: int = Field(..., ge=0)
    price_per_30min: Optional[int] = Field(None, ge=0)
    max_players: int = 4
    min_players: int = 2
    indoor: bool = False
    has_lighting: bool = False
    has_equipment: bool = False
    is_active: bool = True

    @property
    def rate_card(self) -> RateCard:
        return RateCard(price_per_hour=self.price_per_hour, price_per_half_hour=self.price_per_30min)


class OperatingHours(BaseModel):
    """Opening hours for one weekday."""
    day_of_week: int = Field(..., ge=0, le=6, description="Day of week (0=Sunday, 6=Saturday)")
    open_time: str = Field(..., pattern=_HHMM)
    close_time: str = Field(..., pattern=_HHMM)
    is_closed: bool = False


class VenueClosure(BaseModel):
    """One-off closure (holiday, maintenance)."""
    date: dt.date
    is_full_day: bool = True
    reason_en: Optional[str] = None


class Venue(BaseModel):
    """Partner sport center."""
    id: str
    name_en: str
    name_ja: str
    address_en: str
    address_ja: str
    is_bookable: bool = True
    commission_rate: Optional[float] = Field(
        None, ge=0, le=1, description="Partner-specific commission, falls back to the platform default"
    )
    courts: List[Court] = Field(default_factory=list)
    operating_hours: List[OperatingHours] = Field(default_factory=list)
    closures: List[VenueClosure] = Field(default_factory=list)


class VenueSummary(BaseModel):
    id: str
    name_en: str
    name_ja: str
    address_en: str
    address_ja: str
    is_bookable: bool
    courts_count: int


class VenuesResponse(BaseModel):
    venues: List[VenueSummary]


# ── Availability ──────────────────────────────────────────────────────────


class CourtAvailability(BaseModel):
    court: Court
    slots: List[TimeSlot]
    available_slots_count: int


class OpeningWindow(BaseModel):
    open: str
    close: str


class AvailabilityResponse(BaseModel):
    venue_id: str
    date: dt.date
    day_of_week: Optional[int] = None
    is_open: bool
    closure_reason: Optional[str] = None
    operating_hours: Optional[OpeningWindow] = None
    courts: List[CourtAvailability] = Field(default_factory=list)


# ── Bookings ──────────────────────────────────────────────────────────────


class Booking(BaseModel):
    """A committed court booking."""
    id: str
    court_id: str
    venue_id: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    booking_date: date
    start_time: str
    end_time: str
    duration_minutes: int
    subtotal: int
    commission: int
    total_amount: int
    venue_payout: int
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    user_notes: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    refund_amount: Optional[int] = None
    created_at: datetime


class CancellationPolicy(BaseModel):
    """Refund the user would get if they cancelled now."""
    can_cancel: bool
    refund_amount: int
    refund_percentage: float


class BookingDetail(Booking):
    cancellation_policy: CancellationPolicy


class BookingQuote(BaseModel):
    court_id: str
    booking_date: date
    start_time: str
    end_time: str
    is_available: bool
    pricing: BookingCalculation
    formatted_total: str


class CancelBookingRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class CancellationResponse(BaseModel):
    booking: Booking
    refund: RefundResult
    message: str


# ── Commissions ───────────────────────────────────────────────────────────


class CommissionTransaction(BaseModel):
    """Platform commission recorded for one booking."""
    id: str
    booking_id: str
    venue_id: str
    booking_amount: int = Field(..., description="Amount charged to the player")
    commission_rate: float = Field(..., ge=0, le=1, description="Rate applied when the booking was made")
    commission_amount: int
    venue_amount: int = Field(..., description="Payout owed to the venue")
    payout_status: PayoutStatus = PayoutStatus.PENDING
    payout_date: Optional[datetime] = None
    created_at: datetime


class CommissionTotals(BaseModel):
    total_bookings: int = 0
    total_revenue: int = 0
    total_commission: int = 0
    total_venue_payout: int = 0
    pending_payout: int = 0
    paid_payout: int = 0


class VenueCommission(BaseModel):
    venue_id: str
    venue_name: str
    bookings: int = 0
    revenue: int = 0
    commission: int = 0
    payout: int = 0
    pending: int = 0


class ReportPeriod(BaseModel):
    name: str
    start: datetime
    end: datetime


class CommissionReport(BaseModel):
    period: ReportPeriod
    summary: CommissionTotals
    by_venue: List[VenueCommission]
    transactions: List[CommissionTransaction] = Field(..., description="Most recent transactions, newest first")


class PaginationMeta(BaseModel):
    page: int
    page_size: int
    total_items: int
    total_pages: int


class BookingListResponse(BaseModel):
    items: List[Booking]
    meta: PaginationMeta


# ── Misc ──────────────────────────────────────────────────────────────────


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(..., description="Current timestamp")
