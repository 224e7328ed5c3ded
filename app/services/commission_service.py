"""
Commission service – platform revenue and venue payouts over a period.

Totals cover every commission row created in the period, whatever its
payout state; ``pending_payout`` and ``paid_payout`` split out the venue
share that is still owed and the share already paid.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from app import db
from app.models import (
    CommissionReport,
    CommissionTotals,
    PayoutStatus,
    ReportPeriod,
    VenueCommission,
)
from app.services.venue_store import VenueStore, venue_store

logger = logging.getLogger(__name__)

PERIODS = ("day", "week", "month", "year")

# Transactions listed in a report, newest first.
RECENT_TRANSACTIONS = 50


def period_start(period: str, now: datetime) -> datetime:
    """Start of a reporting period ending at ``now``.

    ``day``, ``month`` and ``year`` are calendar periods; ``week`` is the
    last seven days.
    """
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "day":
        return midnight
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return midnight.replace(day=1)
    if period == "year":
        return midnight.replace(month=1, day=1)
    raise ValueError(f"Unknown reporting period: {period}")


async def commission_report(
    *,
    now: datetime,
    period: str = "month",
    venue_id: str | None = None,
    store: VenueStore | None = None,
) -> CommissionReport:
    store = store or venue_store
    start = period_start(period, now)
    transactions = await db.list_commissions(since=start, venue_id=venue_id)

    totals = CommissionTotals()
    by_venue: dict[str, VenueCommission] = {}
    for tx in transactions:
        totals.total_bookings += 1
        totals.total_revenue += tx.booking_amount
        totals.total_commission += tx.commission_amount
        totals.total_venue_payout += tx.venue_amount
        if tx.payout_status == PayoutStatus.PENDING:
            totals.pending_payout += tx.venue_amount
        elif tx.payout_status == PayoutStatus.PAID:
            totals.paid_payout += tx.venue_amount

        entry = by_venue.get(tx.venue_id)
        if entry is None:
            venue = store.get_venue(tx.venue_id)
            entry = by_venue[tx.venue_id] = VenueCommission(
                venue_id=tx.venue_id,
                venue_name=venue.name_en if venue else tx.venue_id,
            )
        entry.bookings += 1
        entry.revenue += tx.booking_amount
        entry.commission += tx.commission_amount
        entry.payout += tx.venue_amount
        if tx.payout_status == PayoutStatus.PENDING:
            entry.pending += tx.venue_amount

    logger.debug("Commission report %s from %s: %d transactions", period, start, len(transactions))
    return CommissionReport(
        period=ReportPeriod(name=period, start=start, end=now),
        summary=totals,
        by_venue=sorted(by_venue.values(), key=lambda v: v.revenue, reverse=True),
        transactions=transactions[:RECENT_TRANSACTIONS],
    )
