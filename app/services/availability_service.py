"""
Venue availability – turns a venue's hours and committed bookings into
per-court slot grids for one date.
"""

from __future__ import annotations

import logging
from datetime import date

from app import db
from app.booking.hours import get_day_of_week, get_operating_hours_for_day
from app.booking.policy import DEFAULT_POLICY, BookingPolicy
from app.booking.slots import generate_time_slots
from app.config import SLOT_DURATION_MINUTES
from app.models import (
    AvailabilityResponse,
    CourtAvailability,
    OpeningWindow,
    Venue,
    VenueClosure,
)
from app.services.errors import InvalidDate, VenueNotBookable, VenueNotFound
from app.services.venue_store import VenueStore, venue_store

logger = logging.getLogger(__name__)


def full_day_closure(venue: Venue, day: date) -> VenueClosure | None:
    return next((c for c in venue.closures if c.date == day and c.is_full_day), None)


async def get_venue_availability(
    venue_id: str,
    target_date: date,
    *,
    today: date,
    sport_type: str | None = None,
    slot_duration_minutes: int = SLOT_DURATION_MINUTES,
    policy: BookingPolicy = DEFAULT_POLICY,
    store: VenueStore | None = None,
) -> AvailabilityResponse:
    """Slot grid for every active court of a venue on ``target_date``."""
    store = store or venue_store
    if target_date < today:
        raise InvalidDate("Cannot check availability for past dates", date=target_date.isoformat())

    venue = store.get_venue(venue_id)
    if venue is None:
        raise VenueNotFound("Venue not found", venue_id=venue_id)
    if not venue.is_bookable:
        raise VenueNotBookable("This venue does not support online booking", venue_id=venue_id)

    closure = full_day_closure(venue, target_date)
    if closure is not None:
        return AvailabilityResponse(
            venue_id=venue_id,
            date=target_date,
            is_open=False,
            closure_reason=closure.reason_en or "Venue closed",
        )

    hours = get_operating_hours_for_day(venue.operating_hours, target_date)
    if hours is None:
        return AvailabilityResponse(
            venue_id=venue_id,
            date=target_date,
            is_open=False,
            closure_reason="Venue closed on this day",
        )
    open_time, close_time = hours

    reservations = await db.list_venue_reservations(venue_id, target_date)

    courts = sorted(
        (
            c for c in venue.courts
            if c.is_active and (sport_type is None or c.sport_type == sport_type)
        ),
        key=lambda c: c.name_en,
    )

    availability = []
    for court in courts:
        slots = generate_time_slots(
            court.id,
            court.price_per_hour,
            open_time,
            close_time,
            reservations.get(court.id, []),
            slot_duration_minutes,
            policy.rounding,
        )
        availability.append(
            CourtAvailability(
                court=court,
                slots=slots,
                available_slots_count=sum(1 for s in slots if s.is_available),
            )
        )

    logger.debug(
        "Availability for %s on %s: %d courts, %d bookings",
        venue_id, target_date, len(availability), sum(len(r) for r in reservations.values()),
    )
    return AvailabilityResponse(
        venue_id=venue_id,
        date=target_date,
        day_of_week=get_day_of_week(target_date),
        is_open=True,
        operating_hours=OpeningWindow(open=open_time, close=close_time),
        courts=availability,
    )
