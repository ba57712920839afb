"""Seed script for StayDesk development database."""

import asyncio
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select

from staydesk.database import async_session_factory
from staydesk.models.hotel import Hotel, RoomType
from staydesk.models.inventory import RoomInventory
from staydesk.models.promotion import Promotion, PromotionBenefit, PromotionDailyRate
from staydesk.models.season import Season, SeasonRate

# ── Hotel ──────────────────────────────────────────────────────────────────────

HOTEL = {
    "hotel_code": "DEMO-CEBU",
    "hotel_name": "Demo Beach Resort",
    "hotel_name_en": "Demo Beach Resort",
    "country": "Philippines",
    "region": "Cebu",
    "currency": "USD",
}

# code, name, display order, breakfast adult/child/infant, extra bed, baby cot
ROOM_TYPES = [
    ("STD", "Standard", 1, "12.00", "6.00", "0.00", "25.00", "10.00"),
    ("SUP", "Superior", 2, "12.00", "6.00", "0.00", "25.00", "10.00"),
    ("DLX", "Deluxe Garden", 3, "15.00", "8.00", "0.00", "30.00", "10.00"),
    ("DLXO", "Deluxe Ocean", 4, "15.00", "8.00", "0.00", "30.00", "10.00"),
]

# ── Seasons ────────────────────────────────────────────────────────────────────

SEASONS = [
    ("Autumn 2025", "shoulder", date(2025, 9, 1), date(2025, 11, 30)),
    ("Winter 2025", "peak", date(2025, 12, 1), date(2025, 12, 19)),
    ("Holidays 2025", "super_peak", date(2025, 12, 20), date(2026, 1, 4)),
    ("Winter 2026", "peak", date(2026, 1, 5), date(2026, 2, 28)),
    ("Spring 2026", "low", date(2026, 3, 1), date(2026, 5, 31)),
]

# Base rate by season label, per room type display order
BASE_RATES = {
    "low": ["80.00", "95.00", "120.00", "140.00"],
    "shoulder": ["90.00", "105.00", "130.00", "150.00"],
    "peak": ["110.00", "125.00", "150.00", "170.00"],
    "super_peak": ["150.00", "170.00", "200.00", "230.00"],
}

# ── Promotions ─────────────────────────────────────────────────────────────────

EARLY_WINTER = {
    "promo_code": "EARLYWINTER2025",
    "promo_name": "Early Winter 2025",
    "booking_start_date": date(2025, 9, 1),
    "booking_end_date": date(2026, 1, 4),
    "stay_start_date": date(2026, 1, 5),
    "stay_end_date": date(2026, 2, 28),
    "description": "Book early for January and February stays",
    "terms_and_conditions": "Non-refundable. Minimum 2 nights.",
}


async def seed():
    async with async_session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(Hotel).limit(1))
        if result.scalar_one_or_none():
            print("Database already seeded. Skipping.")
            return

        # ── Hotel and room types ──
        hotel = Hotel(**HOTEL)
        db.add(hotel)
        await db.flush()  # get hotel.id

        room_types = []
        for code, name, order, bf_adult, bf_child, bf_infant, extra_bed, cot in ROOM_TYPES:
            rt = RoomType(
                hotel_id=hotel.id,
                room_type_code=code,
                room_type_name=name,
                display_order=order,
                breakfast_rate_adult=Decimal(bf_adult),
                breakfast_rate_child=Decimal(bf_child),
                breakfast_rate_infant=Decimal(bf_infant),
                extra_bed_rate=Decimal(extra_bed),
                baby_cot_rate=Decimal(cot),
            )
            db.add(rt)
            room_types.append(rt)
        await db.flush()
        print(f"Created hotel {hotel.hotel_code} with {len(room_types)} room types")

        # ── Seasons and base rates ──
        for name, label, start, end in SEASONS:
            season = Season(hotel_id=hotel.id, season_name=name, label=label, start_date=start, end_date=end)
            db.add(season)
            await db.flush()
            for rt, rate in zip(room_types, BASE_RATES[label]):
                db.add(SeasonRate(season_id=season.id, room_type_id=rt.id, base_rate=Decimal(rate)))
        print(f"Created {len(SEASONS)} seasons with base rates")

        # ── Promotion ──
        promo = Promotion(hotel_id=hotel.id, **EARLY_WINTER)
        promo.benefits = [
            PromotionBenefit(kind="free_night", nights_required=7, free_nights=1, description="Stay 7, pay 6"),
        ]
        db.add(promo)
        await db.flush()

        ocean = room_types[-1]
        stay = EARLY_WINTER["stay_start_date"]
        while stay <= EARLY_WINTER["stay_end_date"]:
            # Tuesdays cost a little more
            rate = Decimal("110.00") if stay.weekday() == 1 else Decimal("100.00")
            db.add(PromotionDailyRate(
                promotion_id=promo.id,
                room_type_id=ocean.id,
                stay_date=stay,
                rate_per_night=rate,
                min_nights=2,
            ))
            stay += timedelta(days=1)
        print(f"Created promotion {promo.promo_code} for {ocean.room_type_name}")

        # ── Inventory ──
        day = date(2025, 12, 1)
        days = 0
        while day <= date(2026, 3, 31):
            for rt in room_types:
                db.add(RoomInventory(
                    hotel_id=hotel.id,
                    room_type_id=rt.id,
                    inventory_date=day,
                    available_rooms=5,
                    reserved_rooms=0,
                ))
            day += timedelta(days=1)
            days += 1
        print(f"Created inventory for {days} days")

        await db.commit()
        print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
