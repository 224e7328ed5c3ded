"""
Application configuration from environment variables.

All settings have sensible defaults for local development.
A .env file in the project root is loaded automatically (if present).
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from app.booking.policy import BookingPolicy

# Load .env file before reading any env vars
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# ── Environment ───────────────────────────────────────────────────────────

ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info").upper()

# ── Server ────────────────────────────────────────────────────────────────

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))
API_RELOAD: bool = os.getenv("API_RELOAD", "false").lower() == "true"

# ── Paths ─────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# SQLite database file holding committed bookings
DB_PATH: str = os.getenv("DB_PATH", str(DATA_DIR / "court_booking.db"))

# ── Slots ─────────────────────────────────────────────────────────────────

SLOT_DURATION_MINUTES: int = int(os.getenv("SLOT_DURATION_MINUTES", "60"))

# ── Booking policy ────────────────────────────────────────────────────────

BOOKING_MIN_LEAD_HOURS: float = float(os.getenv("BOOKING_MIN_LEAD_HOURS", "2"))
BOOKING_MAX_LEAD_DAYS: float = float(os.getenv("BOOKING_MAX_LEAD_DAYS", "30"))
BOOKING_MIN_DURATION_MINUTES: int = int(os.getenv("BOOKING_MIN_DURATION_MINUTES", "30"))
BOOKING_MAX_DURATION_MINUTES: int = int(os.getenv("BOOKING_MAX_DURATION_MINUTES", "240"))

# Cancellation refunds: full refund at >= REFUND_FULL_HOURS before start,
# REFUND_PARTIAL_RATE at >= REFUND_PARTIAL_HOURS, nothing after that.
REFUND_FULL_HOURS: float = float(os.getenv("REFUND_FULL_HOURS", "24"))
REFUND_PARTIAL_HOURS: float = float(os.getenv("REFUND_PARTIAL_HOURS", "12"))
REFUND_PARTIAL_RATE: float = float(os.getenv("REFUND_PARTIAL_RATE", "0.5"))

# Platform cut when the venue partner has no rate of its own.
DEFAULT_COMMISSION_RATE: float = float(os.getenv("DEFAULT_COMMISSION_RATE", "0.10"))

# decimal rounding mode for yen amounts (ROUND_HALF_UP or ROUND_HALF_EVEN)
MONEY_ROUNDING: str = os.getenv("MONEY_ROUNDING", "ROUND_HALF_UP")


def booking_policy() -> BookingPolicy:
    """The booking policy described by the environment."""
    return BookingPolicy(
        min_lead_hours=BOOKING_MIN_LEAD_HOURS,
        max_lead_days=BOOKING_MAX_LEAD_DAYS,
        min_duration_minutes=BOOKING_MIN_DURATION_MINUTES,
        max_duration_minutes=BOOKING_MAX_DURATION_MINUTES,
        full_refund_hours=REFUND_FULL_HOURS,
        partial_refund_hours=REFUND_PARTIAL_HOURS,
        partial_refund_rate=REFUND_PARTIAL_RATE,
        commission_rate=DEFAULT_COMMISSION_RATE,
        rounding=MONEY_ROUNDING,
    )
