"""
Booking service – quote, create and cancel court bookings.

Creation runs the request through the booking rules, resolves the court,
prices it with the venue's commission rate and hands it to the database,
which re-checks availability and records the commission alongside the
booking in one transaction. Cancellation prices the refund from the stored
total and the booked start.
"""

from __future__ import annotations

import logging
from datetime import datetime

from app import db
from app.booking.hours import get_operating_hours_for_day
from app.booking.overlap import is_slot_available
from app.booking.policy import DEFAULT_POLICY, BookingPolicy
from app.booking.pricing import calculate_booking_price, format_price
from app.booking.refunds import calculate_refund
from app.booking.timeutil import calculate_duration, time_to_minutes
from app.booking.validation import validate_booking_request
from app.models import (
    ACTIVE_STATUSES,
    Booking,
    BookingCalculation,
    BookingDetail,
    BookingQuote,
    CancellationPolicy,
    CancellationResponse,
    Court,
    CreateBookingRequest,
    RefundResult,
    Venue,
)
from app.services.availability_service import full_day_closure
from app.services.errors import (
    BookingNotCancellable,
    BookingNotFound,
    CourtNotFound,
    CourtUnavailable,
    VenueNotBookable,
)
from app.services.venue_store import VenueStore, venue_store

logger = logging.getLogger(__name__)


class BookingService:
    """Booking workflows over the venue catalogue and the bookings table."""

    def __init__(self, policy: BookingPolicy = DEFAULT_POLICY, store: VenueStore | None = None) -> None:
        self.policy = policy
        self._store = store

    @property
    def store(self) -> VenueStore:
        return self._store or venue_store

    # ── Helpers ────────────────────────────────────────────────────────

    def _resolve_court(self, request: CreateBookingRequest) -> tuple[Venue, Court]:
        found = self.store.get_court(request.court_id)
        if found is None:
            raise CourtNotFound("Court not found", court_id=request.court_id)
        venue, court = found

        if not court.is_active:
            raise CourtUnavailable("This court is not available for booking", court_id=court.id)
        if not venue.is_bookable:
            raise VenueNotBookable("This venue does not support online booking", venue_id=venue.id)

        if full_day_closure(venue, request.booking_date) is not None:
            raise CourtUnavailable("The venue is closed on this date", venue_id=venue.id)
        hours = get_operating_hours_for_day(venue.operating_hours, request.booking_date)
        if hours is None:
            raise CourtUnavailable("The venue is closed on this day", venue_id=venue.id)
        open_time, close_time = hours
        if (time_to_minutes(request.start_time) < time_to_minutes(open_time)
                or time_to_minutes(request.end_time) > time_to_minutes(close_time)):
            raise CourtUnavailable(
                f"Bookings must fall within opening hours ({open_time}-{close_time})",
                venue_id=venue.id,
            )
        return venue, court

    def _commission_rate(self, venue: Venue) -> float:
        if venue.commission_rate is None:
            return self.policy.commission_rate
        return venue.commission_rate

    def _price(self, venue: Venue, court: Court, request: CreateBookingRequest) -> BookingCalculation:
        rates = court.rate_card
        return calculate_booking_price(
            rates.price_per_hour,
            rates.price_per_half_hour,
            calculate_duration(request.start_time, request.end_time),
            self._commission_rate(venue),
            self.policy.rounding,
        )

    def _check(self, request: CreateBookingRequest, now: datetime) -> tuple[Venue, Court]:
        validate_booking_request(request, request.booking_date, now=now, policy=self.policy).raise_for_error()
        return self._resolve_court(request)

    def _refund(self, booking: Booking, now: datetime) -> RefundResult:
        return calculate_refund(
            booking.total_amount, booking.booking_date, booking.start_time, now=now, policy=self.policy
        )

    # ── Workflows ──────────────────────────────────────────────────────

    async def quote(self, request: CreateBookingRequest, *, now: datetime) -> BookingQuote:
        """Validate and price a request without booking it."""
        venue, court = self._check(request, now)
        pricing = self._price(venue, court, request)
        reservations = await db.list_active_reservations(court.id, request.booking_date)
        return BookingQuote(
            court_id=court.id,
            booking_date=request.booking_date,
            start_time=request.start_time,
            end_time=request.end_time,
            is_available=is_slot_available(request.start_time, request.end_time, reservations),
            pricing=pricing,
            formatted_total=format_price(pricing.total_amount),
        )

    async def create(self, request: CreateBookingRequest, *, now: datetime) -> Booking:
        """Book a court. Raises SlotConflict if the interval is taken."""
        venue, court = self._check(request, now)
        pricing = self._price(venue, court, request)
        return await db.create_booking(
            court.id,
            venue.id,
            request.booking_date,
            request.start_time,
            request.end_time,
            pricing,
            commission_rate=self._commission_rate(venue),
            user_id=request.user_id,
            session_id=request.session_id,
            user_notes=request.user_notes,
            created_at=now,
        )

    async def get(self, booking_id: str, *, now: datetime) -> BookingDetail:
        """A booking plus the refund it would get if cancelled now."""
        booking = await db.get_booking(booking_id)
        if booking is None:
            raise BookingNotFound("Booking not found", booking_id=booking_id)
        refund = self._refund(booking, now)
        return BookingDetail(
            **booking.model_dump(),
            cancellation_policy=CancellationPolicy(
                can_cancel=booking.status in ACTIVE_STATUSES,
                refund_amount=refund.refund_amount,
                refund_percentage=refund.refund_percentage,
            ),
        )

    async def cancel(
        self, booking_id: str, *, now: datetime, reason: str | None = None
    ) -> CancellationResponse:
        booking = await db.get_booking(booking_id)
        if booking is None:
            raise BookingNotFound("Booking not found", booking_id=booking_id)
        if booking.status not in ACTIVE_STATUSES:
            raise BookingNotCancellable("This booking cannot be cancelled", status=booking.status.value)

        refund = self._refund(booking, now)
        cancelled = await db.cancel_booking(
            booking_id, refund_amount=refund.refund_amount, cancelled_at=now, reason=reason
        )
        if cancelled is None:
            # Cancelled concurrently between the read and the update.
            raise BookingNotCancellable("This booking cannot be cancelled", booking_id=booking_id)

        logger.info(
            "Booking %s cancelled, refund %s (%g%%)",
            booking_id, refund.refund_amount, refund.refund_percentage,
        )
        if refund.refund_amount > 0:
            message = (
                f"Booking cancelled. Refund of {format_price(refund.refund_amount)} "
                f"({refund.refund_percentage:g}%) will be processed."
            )
        else:
            message = "Booking cancelled. No refund available due to late cancellation."
        return CancellationResponse(booking=cancelled, refund=refund, message=message)
