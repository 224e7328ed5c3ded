"""Tests for the bookings table and its conflict checks."""

import asyncio
from datetime import date, datetime

import aiosqlite
import pytest

from app.booking.pricing import calculate_booking_price
from app.models import BookingStatus, PaymentStatus, PayoutStatus
from app.services.errors import SlotConflict

DAY = date(2026, 3, 5)
PRICING = calculate_booking_price(3000, None, 60)


async def _create(db, start="10:00", end="11:00", court_id="court-tennis", **kwargs):
    kwargs.setdefault("commission_rate", 0.10)
    return await db.create_booking(court_id, "test-venue", DAY, start, end, PRICING, **kwargs)


@pytest.mark.asyncio
async def test_create_and_fetch(booking_db):
    booking = await _create(booking_db, user_id="u1")
    fetched = await booking_db.get_booking(booking.id)
    assert fetched == booking
    assert fetched.status == BookingStatus.PENDING
    assert fetched.total_amount == 3000


@pytest.mark.asyncio
async def test_overlap_raises_slot_conflict(booking_db):
    await _create(booking_db)
    with pytest.raises(SlotConflict) as exc_info:
        await _create(booking_db, "10:30", "11:30")
    assert exc_info.value.details == {"conflicts": ["10:00-11:00"]}


@pytest.mark.asyncio
async def test_concurrent_writes_for_one_slot(booking_db):
    results = await asyncio.gather(
        *(_create(booking_db) for _ in range(5)),
        return_exceptions=True,
    )
    created = [r for r in results if not isinstance(r, Exception)]
    conflicts = [r for r in results if isinstance(r, SlotConflict)]
    assert len(created) == 1
    assert len(conflicts) == 4
    assert len(await booking_db.list_active_reservations("court-tennis", DAY)) == 1


@pytest.mark.asyncio
async def test_unique_index_backs_up_the_overlap_check(booking_db):
    await _create(booking_db)
    conn = booking_db.get_db()
    with pytest.raises(aiosqlite.IntegrityError):
        await conn.execute(
            "INSERT INTO bookings (id, court_id, venue_id, booking_date, start_time, end_time, "
            "duration_minutes, subtotal, commission, total_amount, venue_payout, status, created_at) "
            "VALUES ('dup', 'court-tennis', 'test-venue', ?, '10:00', '10:30', 30, 0, 0, 0, 0, 'CONFIRMED', '')",
            (DAY.isoformat(),),
        )
    await conn.rollback()


@pytest.mark.asyncio
async def test_venue_reservations_grouped_by_court(booking_db):
    await _create(booking_db, "09:00", "10:00")
    await _create(booking_db, "11:00", "12:00")
    await _create(booking_db, "09:00", "10:00", court_id="court-futsal")

    grouped = await booking_db.list_venue_reservations("test-venue", DAY)
    assert [(r.start_time, r.end_time) for r in grouped["court-tennis"]] == [("09:00", "10:00"), ("11:00", "12:00")]
    assert len(grouped["court-futsal"]) == 1
    assert await booking_db.list_venue_reservations("test-venue", date(2026, 3, 6)) == {}


@pytest.mark.asyncio
async def test_cancel_releases_the_slot(booking_db):
    booking = await _create(booking_db)
    cancelled = await booking_db.cancel_booking(
        booking.id, refund_amount=3000, cancelled_at=datetime(2026, 3, 4, 9, 0), reason="Rain"
    )
    assert cancelled.status == BookingStatus.CANCELLED
    assert cancelled.cancellation_reason == "Rain"
    assert await booking_db.list_active_reservations("court-tennis", DAY) == []
    # Cancelling again touches nothing.
    assert await booking_db.cancel_booking(
        booking.id, refund_amount=0, cancelled_at=datetime(2026, 3, 4, 10, 0)
    ) is None
    assert (await _create(booking_db)).status == BookingStatus.PENDING


@pytest.mark.asyncio
async def test_cancel_paid_booking_marks_refunded(booking_db):
    booking = await _create(booking_db)
    conn = booking_db.get_db()
    await conn.execute("UPDATE bookings SET payment_status = 'PAID' WHERE id = ?", (booking.id,))
    await conn.commit()

    cancelled = await booking_db.cancel_booking(
        booking.id, refund_amount=1500, cancelled_at=datetime(2026, 3, 4, 20, 0)
    )
    assert cancelled.payment_status == PaymentStatus.REFUNDED
    assert cancelled.refund_amount == 1500


@pytest.mark.asyncio
async def test_list_bookings_filters(booking_db):
    await _create(booking_db, "09:00", "10:00", user_id="alice")
    await _create(booking_db, "10:00", "11:00", user_id="bob")

    assert [b.user_id for b in await booking_db.list_bookings(user_id="alice")] == ["alice"]
    assert [b.start_time for b in await booking_db.list_bookings()] == ["10:00", "09:00"]
    assert await booking_db.list_bookings(status=BookingStatus.CANCELLED) == []


# ── Commission ledger ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_booking_records_its_commission(booking_db):
    booking = await _create(booking_db, commission_rate=0.10, created_at=datetime(2026, 3, 4, 9, 0))
    tx = await booking_db.get_commission(booking.id)
    assert tx.venue_id == "test-venue"
    assert (tx.booking_amount, tx.commission_amount, tx.venue_amount) == (3000, 300, 2700)
    assert tx.commission_rate == 0.10
    assert tx.payout_status == PayoutStatus.PENDING
    assert tx.created_at == datetime(2026, 3, 4, 9, 0)
    assert booking.created_at == tx.created_at


@pytest.mark.asyncio
async def test_conflicting_booking_leaves_no_commission(booking_db):
    await _create(booking_db)
    with pytest.raises(SlotConflict):
        await _create(booking_db, "10:30", "11:30")
    assert len(await booking_db.list_commissions()) == 1


@pytest.mark.asyncio
async def test_cancel_unpaid_booking_cancels_commission(booking_db):
    booking = await _create(booking_db)
    await booking_db.cancel_booking(booking.id, refund_amount=3000, cancelled_at=datetime(2026, 3, 4, 9, 0))
    assert (await booking_db.get_commission(booking.id)).payout_status == PayoutStatus.CANCELLED


@pytest.mark.asyncio
async def test_cancel_paid_booking_refunds_commission(booking_db):
    booking = await _create(booking_db)
    conn = booking_db.get_db()
    await conn.execute("UPDATE bookings SET payment_status = 'PAID' WHERE id = ?", (booking.id,))
    await conn.commit()

    await booking_db.cancel_booking(booking.id, refund_amount=0, cancelled_at=datetime(2026, 3, 5, 9, 30))
    assert (await booking_db.get_commission(booking.id)).payout_status == PayoutStatus.REFUNDED


@pytest.mark.asyncio
async def test_second_cancel_leaves_commission_alone(booking_db):
    booking = await _create(booking_db)
    await booking_db.cancel_booking(booking.id, refund_amount=3000, cancelled_at=datetime(2026, 3, 4, 9, 0))
    conn = booking_db.get_db()
    await conn.execute("UPDATE bookings SET payment_status = 'PAID' WHERE id = ?", (booking.id,))
    await conn.commit()

    assert await booking_db.cancel_booking(
        booking.id, refund_amount=0, cancelled_at=datetime(2026, 3, 4, 10, 0)
    ) is None
    assert (await booking_db.get_commission(booking.id)).payout_status == PayoutStatus.CANCELLED


@pytest.mark.asyncio
async def test_list_commissions_filters(booking_db):
    await _create(booking_db, "09:00", "10:00", created_at=datetime(2026, 2, 27, 12, 0))
    await _create(booking_db, "10:00", "11:00", created_at=datetime(2026, 3, 4, 9, 0))
    await booking_db.create_booking(
        "partner-court", "partner-venue", DAY, "09:00", "10:00", PRICING,
        commission_rate=0.08, created_at=datetime(2026, 3, 3, 9, 0),
    )

    recent = await booking_db.list_commissions(since=datetime(2026, 3, 1))
    assert [tx.venue_id for tx in recent] == ["test-venue", "partner-venue"]
    assert len(await booking_db.list_commissions(venue_id="test-venue")) == 2


@pytest.mark.asyncio
async def test_failed_cancel_rolls_back(booking_db):
    booking = await _create(booking_db)
    conn = booking_db.get_db()
    await conn.execute(
        "CREATE TRIGGER reject_update BEFORE UPDATE ON bookings BEGIN SELECT RAISE(ABORT, 'locked'); END"
    )
    await conn.commit()

    with pytest.raises(aiosqlite.IntegrityError):
        await booking_db.cancel_booking(booking.id, refund_amount=0, cancelled_at=datetime(2026, 3, 4, 9, 0))
    assert not conn.in_transaction

    await conn.execute("DROP TRIGGER reject_update")
    await conn.commit()
    assert (await booking_db.get_booking(booking.id)).status == BookingStatus.PENDING
    assert (await booking_db.get_commission(booking.id)).payout_status == PayoutStatus.PENDING
    assert (await _create(booking_db, "11:00", "12:00")).status == BookingStatus.PENDING
