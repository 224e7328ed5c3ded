"""
Error kinds raised by the booking engine.

None of these are fatal: callers reject the offending request field and
show ``message`` to the user (or map it to an HTTP 400).
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    FORMAT = "format"
    ORDERING = "ordering"
    POLICY = "policy"


class BookingError(ValueError):
    """Base class for every booking engine error."""

    kind: ErrorKind = ErrorKind.POLICY

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidTimeFormat(BookingError):
    """A time string is not a zero-padded 24-hour ``HH:MM`` value."""

    kind = ErrorKind.FORMAT


class OrderingError(BookingError):
    """Start is not strictly before end."""

    kind = ErrorKind.ORDERING


class PolicyViolation(BookingError):
    """A lead-time, date-range or duration rule was broken."""

    kind = ErrorKind.POLICY


_BY_KIND: dict[ErrorKind, type[BookingError]] = {
    ErrorKind.FORMAT: InvalidTimeFormat,
    ErrorKind.ORDERING: OrderingError,
    ErrorKind.POLICY: PolicyViolation,
}


def error_for_kind(kind: ErrorKind, message: str) -> BookingError:
    """Build the exception matching ``kind``."""
    return _BY_KIND[kind](message)
