"""Seed venue catalogue for the Court Booking API."""

from datetime import date
from typing import List

from app.models import Court, OperatingHours, Venue, VenueClosure


def _weekly_hours(open_time: str, close_time: str, closed_days=()) -> List[OperatingHours]:
    return [
        OperatingHours(
            day_of_week=day,
            open_time=open_time,
            close_time=close_time,
            is_closed=day in closed_days,
        )
        for day in range(7)
    ]


def get_mock_venues() -> List[Venue]:
    """Partner venues with their courts and opening hours."""
    return [
        Venue(
            id="shibuya-sports-center",
            name_en="Shibuya Sports Center",
            name_ja="渋谷スポーツセンター",
            address_en="1-2-3 Jinnan, Shibuya-ku, Tokyo",
            address_ja="東京都渋谷区神南1-2-3",
            is_bookable=True,
            commission_rate=None,
            courts=[
                Court(
                    id="shibuya-futsal-1",
                    venue_id="shibuya-sports-center",
                    name_en="Futsal Court A",
                    name_ja="フットサルコートA",
                    sport_type="futsal",
                    price_per_hour=8000,
                    price_per_30min=4500,
                    max_players=12,
                    min_players=6,
                    indoor=True,
                    has_lighting=True,
                ),
                Court(
                    id="shibuya-basketball-1",
                    venue_id="shibuya-sports-center",
                    name_en="Basketball Court",
                    name_ja="バスケットボールコート",
                    sport_type="basketball",
                    price_per_hour=6000,
                    max_players=10,
                    min_players=4,
                    indoor=True,
                    has_lighting=True,
                    has_equipment=True,
                ),
                Court(
                    id="shibuya-futsal-2",
                    venue_id="shibuya-sports-center",
                    name_en="Futsal Court B",
                    name_ja="フットサルコートB",
                    sport_type="futsal",
                    price_per_hour=7000,
                    is_active=False,
                ),
            ],
            operating_hours=_weekly_hours("09:00", "22:00"),
            closures=[
                VenueClosure(date=date(2026, 12, 31), is_full_day=True, reason_en="New Year holidays"),
                VenueClosure(date=date(2027, 1, 1), is_full_day=True, reason_en="New Year holidays"),
            ],
        ),
        Venue(
            id="koto-tennis-park",
            name_en="Koto Tennis Park",
            name_ja="江東テニスパーク",
            address_en="4-5-6 Ariake, Koto-ku, Tokyo",
            address_ja="東京都江東区有明4-5-6",
            is_bookable=True,
            commission_rate=0.08,
            courts=[
                Court(
                    id="koto-tennis-1",
                    venue_id="koto-tennis-park",
                    name_en="Hard Court 1",
                    name_ja="ハードコート1",
                    sport_type="tennis",
                    price_per_hour=3000,
                    price_per_30min=1800,
                    max_players=4,
                    min_players=2,
                ),
                Court(
                    id="koto-tennis-2",
                    venue_id="koto-tennis-park",
                    name_en="Omni Court 2",
                    name_ja="オムニコート2",
                    sport_type="tennis",
                    price_per_hour=2500,
                    max_players=4,
                    min_players=2,
                    has_lighting=True,
                ),
            ],
            # Closed on Mondays
            operating_hours=_weekly_hours("07:00", "21:30", closed_days=(1,)),
        ),
        Venue(
            id="setagaya-gym",
            name_en="Setagaya Community Gym",
            name_ja="世田谷区民体育館",
            address_en="7-8-9 Kamiuma, Setagaya-ku, Tokyo",
            address_ja="東京都世田谷区上馬7-8-9",
            is_bookable=False,
            courts=[
                Court(
                    id="setagaya-volleyball-1",
                    venue_id="setagaya-gym",
                    name_en="Main Hall",
                    name_ja="メインホール",
                    sport_type="volleyball",
                    price_per_hour=4000,
                    indoor=True,
                ),
            ],
            operating_hours=_weekly_hours("10:00", "20:00"),
        ),
    ]
