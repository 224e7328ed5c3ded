"""
End-to-end booking flow against the app with a temp database.

Browse availability, book a slot, see it disappear, lose a race for the
same slot, then cancel at different times and watch the refund tiers.
"""

from datetime import datetime

from app.dependencies import get_now
from app.main import app
from tests.mocks.models import TOMORROW, booking_payload


def _clock(at: datetime):
    return lambda: at


def _tennis_slots(client):
    resp = client.get("/api/venues/test-venue/availability", params={"date": TOMORROW.isoformat()})
    assert resp.status_code == 200
    court = next(c for c in resp.json()["courts"] if c["court"]["id"] == "court-tennis")
    return {s["start_time"]: s["is_available"] for s in court["slots"]}


class TestBookingFlow:
    def test_book_then_cancel_with_full_refund(self, client):
        assert _tennis_slots(client) == {"09:00": True, "10:00": True, "11:00": True}

        quote = client.post("/api/bookings/quote", json=booking_payload()).json()
        assert quote["is_available"] is True

        resp = client.post("/api/bookings", json=booking_payload(user_id="player-1"))
        assert resp.status_code == 201
        booking = resp.json()
        assert booking["total_amount"] == quote["pricing"]["total_amount"]

        assert _tennis_slots(client) == {"09:00": True, "10:00": False, "11:00": True}

        # Someone else tries the overlapping half hour.
        clash = client.post("/api/bookings", json=booking_payload(start_time="10:30", end_time="11:00"))
        assert clash.status_code == 409

        detail = client.get(f"/api/bookings/{booking['id']}").json()
        assert detail["cancellation_policy"]["refund_percentage"] == 100.0

        cancel = client.post(f"/api/bookings/{booking['id']}/cancel", json={"reason": "Plans changed"})
        assert cancel.status_code == 200
        assert cancel.json()["refund"]["refund_amount"] == booking["total_amount"]

        assert _tennis_slots(client) == {"09:00": True, "10:00": True, "11:00": True}
        mine = client.get("/api/bookings", params={"user_id": "player-1"}).json()["items"]
        assert [b["status"] for b in mine] == ["CANCELLED"]

    def test_refund_shrinks_as_start_approaches(self, client):
        ids = [
            client.post("/api/bookings", json=booking_payload(start_time=start, end_time=end)).json()["id"]
            for start, end in [("09:00", "10:00"), ("10:00", "11:00"), ("11:00", "12:00")]
        ]

        refunds = []
        for booking_id, now in zip(
            ids,
            [
                datetime(2026, 3, 4, 9, 0),    # 24h before 09:00
                datetime(2026, 3, 4, 21, 0),   # 13h before 10:00
                datetime(2026, 3, 5, 10, 0),   # 1h before 11:00
            ],
        ):
            app.dependency_overrides[get_now] = _clock(now)
            resp = client.post(f"/api/bookings/{booking_id}/cancel")
            assert resp.status_code == 200
            refunds.append(resp.json()["refund"])

        assert refunds == [
            {"refund_amount": 3000, "refund_percentage": 100.0},
            {"refund_amount": 1500, "refund_percentage": 50.0},
            {"refund_amount": 0, "refund_percentage": 0.0},
        ]
