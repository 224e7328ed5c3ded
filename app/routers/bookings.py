"""
Booking endpoints – quote, create, list, inspect and cancel.
"""

from fastapi import APIRouter, Body, Depends, Query, Request, status

from app import db
from app.booking.errors import BookingError
from app.dependencies import Bookings, Now, PaginationParams, http_error, paginate
from app.models import (
    Booking,
    BookingDetail,
    BookingListResponse,
    BookingQuote,
    BookingStatus,
    CancelBookingRequest,
    CancellationResponse,
    CreateBookingRequest,
)
from app.rate_limit import BOOKING, limiter
from app.services.errors import ServiceError

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post(
    "/quote",
    response_model=BookingQuote,
    operation_id="quoteBooking",
    summary="Validate and price a booking without reserving it",
)
async def quote_booking(payload: CreateBookingRequest, service: Bookings, now: Now) -> BookingQuote:
    try:
        return await service.quote(payload, now=now)
    except (BookingError, ServiceError) as exc:
        raise http_error(exc) from None


@router.post(
    "",
    response_model=Booking,
    status_code=status.HTTP_201_CREATED,
    operation_id="createBooking",
    summary="Book a court",
)
@limiter.limit(BOOKING)
async def create_booking(
    request: Request,
    payload: CreateBookingRequest,
    service: Bookings,
    now: Now,
) -> Booking:
    try:
        return await service.create(payload, now=now)
    except (BookingError, ServiceError) as exc:
        raise http_error(exc) from None


@router.get(
    "",
    response_model=BookingListResponse,
    operation_id="listBookings",
    summary="List bookings",
)
async def list_bookings(
    pagination: PaginationParams = Depends(PaginationParams),
    user_id: str | None = Query(None, description="Only bookings made by this user"),
    booking_status: BookingStatus | None = Query(None, alias="status", description="Filter by status"),
) -> BookingListResponse:
    bookings = await db.list_bookings(user_id=user_id, status=booking_status)
    return paginate(bookings, pagination, BookingListResponse)


@router.get(
    "/{booking_id}",
    response_model=BookingDetail,
    operation_id="getBooking",
    summary="Get a booking and its current refund terms",
)
async def get_booking(booking_id: str, service: Bookings, now: Now) -> BookingDetail:
    try:
        return await service.get(booking_id, now=now)
    except ServiceError as exc:
        raise http_error(exc) from None


@router.post(
    "/{booking_id}/cancel",
    response_model=CancellationResponse,
    operation_id="cancelBooking",
    summary="Cancel a booking and compute the refund",
)
@limiter.limit(BOOKING)
async def cancel_booking(
    request: Request,
    booking_id: str,
    service: Bookings,
    now: Now,
    payload: CancelBookingRequest | None = Body(None),
) -> CancellationResponse:
    reason = payload.reason if payload else None
    try:
        return await service.cancel(booking_id, now=now, reason=reason)
    except ServiceError as exc:
        raise http_error(exc) from None
