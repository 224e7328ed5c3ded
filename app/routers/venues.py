"""
Venue endpoints – catalogue and per-day court availability.
"""

from datetime import date

from fastapi import APIRouter, Query, Request

from app.booking.errors import BookingError
from app.dependencies import Policy, Today, http_error
from app.models import AvailabilityResponse, VenueSummary, VenuesResponse
from app.rate_limit import DEFAULT, limiter
from app.services.availability_service import get_venue_availability
from app.services.errors import ServiceError
from app.services.venue_store import venue_store

router = APIRouter(prefix="/api/venues", tags=["venues"])


@router.get(
    "",
    response_model=VenuesResponse,
    operation_id="listVenues",
    summary="List partner venues",
)
async def list_venues(
    bookable: bool | None = Query(None, description="Only venues that do (or do not) take online bookings"),
) -> VenuesResponse:
    venues = venue_store.list_venues()
    if bookable is not None:
        venues = [v for v in venues if v.is_bookable == bookable]
    return VenuesResponse(
        venues=[
            VenueSummary(
                id=v.id,
                name_en=v.name_en,
                name_ja=v.name_ja,
                address_en=v.address_en,
                address_ja=v.address_ja,
                is_bookable=v.is_bookable,
                courts_count=sum(1 for c in v.courts if c.is_active),
            )
            for v in venues
        ]
    )


@router.get(
    "/{venue_id}/availability",
    response_model=AvailabilityResponse,
    operation_id="getVenueAvailability",
    summary="Bookable slots for every court of a venue on one date",
)
@limiter.limit(DEFAULT)
async def get_availability(
    request: Request,
    venue_id: str,
    today: Today,
    policy: Policy,
    target_date: date = Query(..., alias="date", description="Date to check (YYYY-MM-DD)"),
    sport_type: str | None = Query(None, description="Only courts for this sport"),
) -> AvailabilityResponse:
    try:
        return await get_venue_availability(
            venue_id,
            target_date,
            today=today,
            sport_type=sport_type,
            policy=policy,
        )
    except (BookingError, ServiceError) as exc:
        raise http_error(exc) from None
