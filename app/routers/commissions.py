"""
Commission endpoints – platform revenue and venue payout summary.
"""

from typing import Literal

from fastapi import APIRouter, Query

from app.dependencies import Now
from app.models import CommissionReport
from app.services.commission_service import commission_report

router = APIRouter(prefix="/api/commissions", tags=["commissions"])


@router.get(
    "",
    response_model=CommissionReport,
    operation_id="getCommissionReport",
    summary="Commission and payout totals for a period",
)
async def get_commission_report(
    now: Now,
    period: Literal["day", "week", "month", "year"] = Query("month", description="Reporting period"),
    venue_id: str | None = Query(None, description="Only this venue"),
) -> CommissionReport:
    return await commission_report(now=now, period=period, venue_id=venue_id)
