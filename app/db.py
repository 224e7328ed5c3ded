"""
SQLite database layer using aiosqlite.

Stores committed court bookings and the platform commission recorded for
each of them. Tables are created automatically on first connect.

A booking write re-reads the court's active reservations and re-checks
the overlap inside one ``BEGIN IMMEDIATE`` transaction, and writes the
commission row in the same transaction. The partial unique index on
(court_id, booking_date, start_time) backs the overlap check up: an
IntegrityError from it is reported as a SlotConflict too.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from uuid import uuid4

import aiosqlite

from app.booking.overlap import find_conflicts
from app.config import DB_PATH
from app.models import (
    ACTIVE_STATUSES,
    Booking,
    BookingCalculation,
    BookingStatus,
    CommissionTransaction,
    ExistingReservation,
    PaymentStatus,
    PayoutStatus,
)
from app.services.errors import SlotConflict

logger = logging.getLogger(__name__)

# ── Module-level connection ───────────────────────────────────────────────

_db: aiosqlite.Connection | None = None
# Serializes booking writes that share the single connection.
_write_lock: asyncio.Lock | None = None


async def init_db() -> None:
    """Open the database and create tables if they don't exist."""
    global _db, _write_lock
    db_path = Path(DB_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    _db = await aiosqlite.connect(str(db_path))
    _db.row_factory = aiosqlite.Row  # dict-like rows
    await _db.execute("PRAGMA journal_mode=WAL")

    await _db.executescript(_SCHEMA)
    await _db.commit()
    _write_lock = asyncio.Lock()
    logger.info("Database initialized at %s", db_path)


async def close_db() -> None:
    """Close the database connection."""
    global _db, _write_lock
    if _db is not None:
        await _db.close()
        _db = None
        _write_lock = None
        logger.info("Database connection closed")


def get_db() -> aiosqlite.Connection:
    """Return the active database connection (must call init_db first)."""
    assert _db is not None, "Database not initialized, call init_db() first"
    return _db


# ── Schema ────────────────────────────────────────────────────────────────

_SCHEMA = """
CREATE TABLE IF NOT EXISTS bookings (
    id              TEXT PRIMARY KEY,
    court_id        TEXT NOT NULL,
    venue_id        TEXT NOT NULL,
    user_id         TEXT,
    session_id      TEXT,
    booking_date    TEXT NOT NULL,  -- ISO date
    start_time      TEXT NOT NULL,  -- HH:MM
    end_time        TEXT NOT NULL,  -- HH:MM
    duration_minutes INTEGER NOT NULL,
    subtotal        INTEGER NOT NULL,
    commission      INTEGER NOT NULL,
    total_amount    INTEGER NOT NULL,
    venue_payout    INTEGER NOT NULL,
    status          TEXT NOT NULL DEFAULT 'PENDING',
    payment_status  TEXT NOT NULL DEFAULT 'PENDING',
    user_notes      TEXT,
    cancelled_at    TEXT,
    cancellation_reason TEXT,
    refund_amount   INTEGER,
    created_at      TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_bookings_court_date ON bookings(court_id, booking_date);
CREATE INDEX IF NOT EXISTS idx_bookings_venue_date ON bookings(venue_id, booking_date);
CREATE INDEX IF NOT EXISTS idx_bookings_user ON bookings(user_id);

CREATE UNIQUE INDEX IF NOT EXISTS uq_bookings_active_slot
    ON bookings(court_id, booking_date, start_time)
    WHERE status IN ('PENDING', 'CONFIRMED');

CREATE TABLE IF NOT EXISTS commission_transactions (
    id                TEXT PRIMARY KEY,
    booking_id        TEXT NOT NULL UNIQUE REFERENCES bookings(id),
    venue_id          TEXT NOT NULL,
    booking_amount    INTEGER NOT NULL,
    commission_rate   REAL NOT NULL,
    commission_amount INTEGER NOT NULL,
    venue_amount      INTEGER NOT NULL,
    payout_status     TEXT NOT NULL DEFAULT 'PENDING',
    payout_date       TEXT,
    created_at        TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_commissions_venue_created
    ON commission_transactions(venue_id, created_at);
"""

_ACTIVE = tuple(s.value for s in ACTIVE_STATUSES)
_ACTIVE_SQL = "status IN (%s)" % ", ".join("?" for _ in _ACTIVE)


# ── Helpers ───────────────────────────────────────────────────────────────


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_booking(row: aiosqlite.Row) -> Booking:
    """Convert a database row to a Booking model."""
    return Booking(
        id=row["id"],
        court_id=row["court_id"],
        venue_id=row["venue_id"],
        user_id=row["user_id"],
        session_id=row["session_id"],
        booking_date=row["booking_date"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        duration_minutes=row["duration_minutes"],
        subtotal=row["subtotal"],
        commission=row["commission"],
        total_amount=row["total_amount"],
        venue_payout=row["venue_payout"],
        status=BookingStatus(row["status"]),
        payment_status=PaymentStatus(row["payment_status"]),
        user_notes=row["user_notes"],
        cancelled_at=row["cancelled_at"],
        cancellation_reason=row["cancellation_reason"],
        refund_amount=row["refund_amount"],
        created_at=row["created_at"],
    )


def _row_to_commission(row: aiosqlite.Row) -> CommissionTransaction:
    return CommissionTransaction(
        id=row["id"],
        booking_id=row["booking_id"],
        venue_id=row["venue_id"],
        booking_amount=row["booking_amount"],
        commission_rate=row["commission_rate"],
        commission_amount=row["commission_amount"],
        venue_amount=row["venue_amount"],
        payout_status=PayoutStatus(row["payout_status"]),
        payout_date=row["payout_date"],
        created_at=row["created_at"],
    )


# ══════════════════════════════════════════════════════════════════════════
#                    RESERVATION READS
# ══════════════════════════════════════════════════════════════════════════


async def list_active_reservations(court_id: str, booking_date: date) -> list[ExistingReservation]:
    """Pending and confirmed booking intervals for one court on one date."""
    db = get_db()
    async with db.execute(
        f"SELECT start_time, end_time FROM bookings "
        f"WHERE court_id = ? AND booking_date = ? AND {_ACTIVE_SQL} ORDER BY start_time",
        (court_id, booking_date.isoformat(), *_ACTIVE),
    ) as cur:
        rows = await cur.fetchall()
    return [ExistingReservation(start_time=r["start_time"], end_time=r["end_time"]) for r in rows]


async def list_venue_reservations(
    venue_id: str, booking_date: date
) -> dict[str, list[ExistingReservation]]:
    """Active reservations for every court of a venue, grouped by court id."""
    db = get_db()
    async with db.execute(
        f"SELECT court_id, start_time, end_time FROM bookings "
        f"WHERE venue_id = ? AND booking_date = ? AND {_ACTIVE_SQL} ORDER BY start_time",
        (venue_id, booking_date.isoformat(), *_ACTIVE),
    ) as cur:
        rows = await cur.fetchall()

    by_court: dict[str, list[ExistingReservation]] = {}
    for r in rows:
        by_court.setdefault(r["court_id"], []).append(
            ExistingReservation(start_time=r["start_time"], end_time=r["end_time"])
        )
    return by_court


# ══════════════════════════════════════════════════════════════════════════
#                    BOOKING REPOSITORY
# ══════════════════════════════════════════════════════════════════════════


async def create_booking(
    court_id: str,
    venue_id: str,
    booking_date: date,
    start_time: str,
    end_time: str,
    pricing: BookingCalculation,
    *,
    commission_rate: float,
    user_id: str | None = None,
    session_id: str | None = None,
    user_notes: str | None = None,
    created_at: datetime | None = None,
) -> Booking:
    """Insert a PENDING booking and its commission row unless it overlaps an active one.

    Raises SlotConflict when the interval is already taken.
    """
    db = get_db()
    assert _write_lock is not None
    booking_id = str(uuid4())
    created = created_at.isoformat() if created_at is not None else _now_iso()

    async with _write_lock:
        await db.execute("BEGIN IMMEDIATE")
        try:
            async with db.execute(
                f"SELECT start_time, end_time FROM bookings "
                f"WHERE court_id = ? AND booking_date = ? AND {_ACTIVE_SQL}",
                (court_id, booking_date.isoformat(), *_ACTIVE),
            ) as cur:
                rows = await cur.fetchall()
            existing = [ExistingReservation(start_time=r["start_time"], end_time=r["end_time"]) for r in rows]

            conflicts = find_conflicts(start_time, end_time, existing)
            if conflicts:
                raise SlotConflict(
                    "This time slot is no longer available",
                    conflicts=[f"{c.start_time}-{c.end_time}" for c in conflicts],
                )

            await db.execute(
                """
                INSERT INTO bookings (
                    id, court_id, venue_id, user_id, session_id,
                    booking_date, start_time, end_time, duration_minutes,
                    subtotal, commission, total_amount, venue_payout,
                    status, payment_status, user_notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    booking_id, court_id, venue_id, user_id, session_id,
                    booking_date.isoformat(), start_time, end_time, pricing.duration_minutes,
                    pricing.subtotal, pricing.commission, pricing.total_amount, pricing.venue_payout,
                    BookingStatus.PENDING.value, PaymentStatus.PENDING.value,
                    user_notes, created,
                ),
            )
            await db.execute(
                """
                INSERT INTO commission_transactions (
                    id, booking_id, venue_id, booking_amount, commission_rate,
                    commission_amount, venue_amount, payout_status, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(uuid4()), booking_id, venue_id, pricing.total_amount, commission_rate,
                    pricing.commission, pricing.venue_payout, PayoutStatus.PENDING.value, created,
                ),
            )
            await db.commit()
        except aiosqlite.IntegrityError:
            await db.rollback()
            logger.warning(
                "Unique constraint rejected booking for court %s on %s at %s",
                court_id, booking_date, start_time,
            )
            raise SlotConflict("This time slot is no longer available") from None
        except Exception:
            await db.rollback()
            raise

    logger.info("Booking %s created for court %s on %s %s-%s",
                booking_id, court_id, booking_date, start_time, end_time)
    return await get_booking(booking_id)  # type: ignore[return-value]


async def get_booking(booking_id: str) -> Booking | None:
    """Fetch a single booking by ID."""
    db = get_db()
    async with db.execute("SELECT * FROM bookings WHERE id = ?", (booking_id,)) as cur:
        row = await cur.fetchone()
    return _row_to_booking(row) if row else None


async def list_bookings(
    *,
    user_id: str | None = None,
    status: BookingStatus | None = None,
) -> list[Booking]:
    """List bookings, newest booking date first, with optional filters."""
    db = get_db()
    sql = "SELECT * FROM bookings WHERE 1 = 1"
    params: list = []

    if user_id is not None:
        sql += " AND user_id = ?"
        params.append(user_id)
    if status is not None:
        sql += " AND status = ?"
        params.append(status.value)

    sql += " ORDER BY booking_date DESC, start_time DESC"

    async with db.execute(sql, params) as cur:
        rows = await cur.fetchall()
    return [_row_to_booking(r) for r in rows]


async def cancel_booking(
    booking_id: str,
    *,
    refund_amount: int,
    cancelled_at: datetime,
    reason: str | None = None,
) -> Booking | None:
    """Mark an active booking CANCELLED, record the refund and settle its commission row.

    Only a PAID booking moves to REFUNDED, and only when money goes back.
    The commission row of a PAID booking becomes REFUNDED, any other one
    CANCELLED. Returns None when the booking is not active.
    """
    db = get_db()
    assert _write_lock is not None
    async with _write_lock:
        await db.execute("BEGIN IMMEDIATE")
        try:
            await db.execute(
                f"""
                UPDATE commission_transactions SET payout_status = CASE
                    WHEN (SELECT payment_status FROM bookings WHERE id = ?) = ? THEN ? ELSE ?
                END
                WHERE booking_id = ?
                  AND booking_id IN (SELECT id FROM bookings WHERE id = ? AND {_ACTIVE_SQL})
                """,
                (
                    booking_id, PaymentStatus.PAID.value,
                    PayoutStatus.REFUNDED.value, PayoutStatus.CANCELLED.value,
                    booking_id, booking_id, *_ACTIVE,
                ),
            )
            cur = await db.execute(
                f"""
                UPDATE bookings SET
                    status = ?, cancelled_at = ?, cancellation_reason = ?, refund_amount = ?,
                    payment_status = CASE
                        WHEN payment_status = ? AND ? > 0 THEN ? ELSE payment_status
                    END
                WHERE id = ? AND {_ACTIVE_SQL}
                """,
                (
                    BookingStatus.CANCELLED.value, cancelled_at.isoformat(), reason, refund_amount,
                    PaymentStatus.PAID.value, refund_amount, PaymentStatus.REFUNDED.value,
                    booking_id, *_ACTIVE,
                ),
            )
            if cur.rowcount == 0:
                await db.rollback()
                return None
            await db.commit()
        except Exception:
            await db.rollback()
            raise
    return await get_booking(booking_id)


# ══════════════════════════════════════════════════════════════════════════
#                    COMMISSION LEDGER
# ══════════════════════════════════════════════════════════════════════════


async def get_commission(booking_id: str) -> CommissionTransaction | None:
    """The commission row recorded for a booking."""
    db = get_db()
    async with db.execute(
        "SELECT * FROM commission_transactions WHERE booking_id = ?", (booking_id,)
    ) as cur:
        row = await cur.fetchone()
    return _row_to_commission(row) if row else None


async def list_commissions(
    *,
    since: datetime | None = None,
    venue_id: str | None = None,
) -> list[CommissionTransaction]:
    """Commission rows, newest first, optionally from ``since`` onwards and for one venue."""
    db = get_db()
    sql = "SELECT * FROM commission_transactions WHERE 1 = 1"
    params: list = []

    if since is not None:
        sql += " AND created_at >= ?"
        params.append(since.isoformat())
    if venue_id is not None:
        sql += " AND venue_id = ?"
        params.append(venue_id)

    sql += " ORDER BY created_at DESC"

    async with db.execute(sql, params) as cur:
        rows = await cur.fetchall()
    return [_row_to_commission(r) for r in rows]
