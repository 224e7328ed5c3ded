import logging
from datetime import date, datetime
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status

from app.booking.errors import BookingError
from app.booking.policy import BookingPolicy
from app.config import booking_policy
from app.models import ErrorResponse, PaginationMeta
from app.services.booking_service import BookingService
from app.services.errors import ServiceError, SlotConflict

logger = logging.getLogger(__name__)


# ── Pagination ─────────────────────────────────────────────────────────────


class PaginationParams:
    def __init__(
        self,
        page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
        page_size: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
    ):
        self.page = page
        self.page_size = page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def paginate(items: list, pagination: PaginationParams, response_cls: type):
    total = len(items)
    start = pagination.offset
    end = start + pagination.page_size
    return response_cls(
        items=items[start:end],
        meta=PaginationMeta(
            page=pagination.page,
            page_size=pagination.page_size,
            total_items=total,
            total_pages=max(1, -(-total // pagination.page_size)),
        ),
    )


# ── Clock & policy ─────────────────────────────────────────────────────────


def get_now() -> datetime:
    """Venue-local wall-clock time. Overridden in tests for a fixed clock."""
    return datetime.now()


def get_today(now: Annotated[datetime, Depends(get_now)]) -> date:
    return now.date()


def get_policy() -> BookingPolicy:
    return booking_policy()


def get_booking_service(
    policy: Annotated[BookingPolicy, Depends(get_policy)],
) -> BookingService:
    return BookingService(policy=policy)


Now = Annotated[datetime, Depends(get_now)]
Today = Annotated[date, Depends(get_today)]
Policy = Annotated[BookingPolicy, Depends(get_policy)]
Bookings = Annotated[BookingService, Depends(get_booking_service)]


# ── Error mapping ──────────────────────────────────────────────────────────


def http_error(exc: BookingError | ServiceError) -> HTTPException:
    """Translate a service or booking-rule error into an HTTPException."""
    logger.info("Request rejected: %s", exc.message)
    if isinstance(exc, BookingError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorResponse(
                error="validation_error",
                message=exc.message,
                details={"kind": exc.kind.value},
            ).model_dump(),
        )
    if exc.error == "not_found":
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, SlotConflict):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(
        status_code=code,
        detail=ErrorResponse(error=exc.error, message=exc.message, details=exc.details).model_dump(),
    )
