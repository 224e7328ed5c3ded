"""Service-layer errors, mapped to HTTP responses by the routers."""

from __future__ import annotations

from typing import Any


class ServiceError(Exception):
    """Base class. ``error`` is the machine-readable type in the response body."""

    error = "service_error"

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or None


class VenueNotFound(ServiceError):
    error = "not_found"


class CourtNotFound(ServiceError):
    error = "not_found"


class BookingNotFound(ServiceError):
    error = "not_found"


class VenueNotBookable(ServiceError):
    error = "not_bookable"


class CourtUnavailable(ServiceError):
    error = "court_unavailable"


class InvalidDate(ServiceError):
    error = "validation_error"


class BookingNotCancellable(ServiceError):
    error = "not_cancellable"


class SlotConflict(ServiceError):
    """The requested interval overlaps a committed booking."""

    error = "slot_conflict"
