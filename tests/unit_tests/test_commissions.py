"""Tests for the commission ledger report."""

from datetime import datetime

import pytest

from app.services.commission_service import period_start
from tests.mocks.models import NOW, booking_payload


def _book(client, **kwargs):
    resp = client.post("/api/bookings", json=booking_payload(**kwargs))
    assert resp.status_code == 201
    return resp.json()


def _report(client, **params):
    resp = client.get("/api/commissions", params=params)
    assert resp.status_code == 200
    return resp.json()


class TestPeriodStart:
    @pytest.mark.parametrize(
        ("period", "expected"),
        [
            ("day", datetime(2026, 3, 4)),
            ("week", datetime(2026, 2, 25, 9, 0)),
            ("month", datetime(2026, 3, 1)),
            ("year", datetime(2026, 1, 1)),
        ],
    )
    def test_periods(self, period, expected):
        assert period_start(period, NOW) == expected

    def test_unknown_period(self):
        with pytest.raises(ValueError):
            period_start("decade", NOW)


class TestCommissionReport:
    def test_empty_ledger(self, client):
        data = _report(client)
        assert data["period"] == {"name": "month", "start": "2026-03-01T00:00:00", "end": "2026-03-04T09:00:00"}
        assert data["summary"]["total_bookings"] == 0
        assert data["by_venue"] == []
        assert data["transactions"] == []

    def test_bookings_are_recorded(self, client):
        tennis = _book(client)
        _book(client, court_id="partner-court", start_time="09:00", end_time="09:30")

        data = _report(client)
        assert data["summary"] == {
            "total_bookings": 2,
            "total_revenue": 4200,
            "total_commission": 396,
            "total_venue_payout": 3804,
            "pending_payout": 3804,
            "paid_payout": 0,
        }
        assert [(v["venue_id"], v["venue_name"], v["revenue"]) for v in data["by_venue"]] == [
            ("test-venue", "Test Sports Center", 3000),
            ("partner-venue", "Partner Courts", 1200),
        ]
        tx = next(t for t in data["transactions"] if t["booking_id"] == tennis["id"])
        assert (tx["booking_amount"], tx["commission_amount"], tx["venue_amount"]) == (3000, 300, 2700)
        assert tx["commission_rate"] == 0.10
        assert tx["payout_status"] == "PENDING"

    def test_venue_filter(self, client):
        _book(client)
        _book(client, court_id="partner-court", start_time="09:00", end_time="09:30")

        data = _report(client, venue_id="partner-venue")
        assert data["summary"]["total_bookings"] == 1
        assert data["summary"]["total_commission"] == 96
        assert [v["venue_id"] for v in data["by_venue"]] == ["partner-venue"]

    def test_cancel_releases_pending_payout(self, client):
        tennis = _book(client)
        _book(client, court_id="partner-court", start_time="09:00", end_time="09:30")
        assert client.post(f"/api/bookings/{tennis['id']}/cancel").status_code == 200

        data = _report(client, period="day")
        assert data["summary"]["total_bookings"] == 2
        assert data["summary"]["pending_payout"] == 1104
        tx = next(t for t in data["transactions"] if t["booking_id"] == tennis["id"])
        assert tx["payout_status"] == "CANCELLED"

    def test_failed_booking_is_not_recorded(self, client):
        _book(client)
        assert client.post("/api/bookings", json=booking_payload(start_time="10:30", end_time="11:30")).status_code == 409
        assert _report(client)["summary"]["total_bookings"] == 1

    def test_unknown_period_is_rejected(self, client):
        assert client.get("/api/commissions", params={"period": "decade"}).status_code == 422
