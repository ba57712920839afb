"""In-memory store implementing both storage ports. Used by tests and local runs."""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import date
from decimal import Decimal

from staydesk.services.rates.ports import InventoryStore, RateStore
from staydesk.services.rates.types import (
    DailyRateRecord,
    InventoryRecord,
    PromotionRecord,
    RoomTypeRecord,
    SeasonRecord,
)


class InMemoryStore(RateStore, InventoryStore):
    def __init__(self):
        self.room_types: dict[int, RoomTypeRecord] = {}
        self.seasons: dict[int, SeasonRecord] = {}
        self.season_rate_table: dict[tuple[int, int], Decimal] = {}
        self.promotions: dict[int, PromotionRecord] = {}
        self.daily_rate_table: dict[tuple[int, int, date], DailyRateRecord] = {}
        self.inventory: dict[tuple[int, int, date], InventoryRecord] = {}
        self._lock = asyncio.Lock()

    # Loading helpers

    def add_room_type(self, room_type: RoomTypeRecord):
        self.room_types[room_type.id] = room_type

    def add_season(self, season: SeasonRecord, rates: dict[int, Decimal] | None = None):
        self.seasons[season.id] = season
        for room_type_id, rate in (rates or {}).items():
            self.season_rate_table[(season.id, room_type_id)] = Decimal(str(rate))

    def add_promotion(self, promotion: PromotionRecord, rates: list[DailyRateRecord] | None = None):
        self.promotions[promotion.id] = promotion
        for r in rates or []:
            self.daily_rate_table[(r.promotion_id, r.room_type_id, r.stay_date)] = r

    def put_inventory(self, record: InventoryRecord):
        self.inventory[(record.hotel_id, record.room_type_id, record.date)] = replace(record)

    # RateStore

    async def get_room_type(self, room_type_id: int) -> RoomTypeRecord | None:
        return self.room_types.get(room_type_id)

    async def list_seasons(self, hotel_id: int) -> list[SeasonRecord]:
        return [s for s in self.seasons.values() if s.hotel_id == hotel_id and s.is_active]

    async def season_rates(self, room_type_id: int) -> dict[int, Decimal]:
        return {sid: rate for (sid, rtid), rate in self.season_rate_table.items() if rtid == room_type_id}

    async def list_promotions(self, hotel_id: int) -> list[PromotionRecord]:
        return [p for p in self.promotions.values() if p.hotel_id == hotel_id]

    async def daily_rates(
        self, promotion_ids: list[int], room_type_id: int, start: date, end: date
    ) -> list[DailyRateRecord]:
        wanted = set(promotion_ids)
        return [
            r
            for (pid, rtid, d), r in self.daily_rate_table.items()
            if pid in wanted and rtid == room_type_id and start <= d < end
        ]

    # InventoryStore

    @asynccontextmanager
    async def locked(self, hotel_id: int, room_type_id: int, dates: list[date]):
        async with self._lock:
            working = {
                d: replace(self.inventory[(hotel_id, room_type_id, d)])
                for d in dates
                if (hotel_id, room_type_id, d) in self.inventory
            }
            # let other waiters queue on the lock
            await asyncio.sleep(0)
            yield working
            for d, record in working.items():
                self.inventory[(hotel_id, room_type_id, d)] = replace(record)

    async def read_range(self, hotel_id: int, room_type_id: int, start: date, end: date) -> list[InventoryRecord]:
        return sorted(
            (
                replace(r)
                for (hid, rtid, d), r in self.inventory.items()
                if hid == hotel_id and rtid == room_type_id and start <= d <= end
            ),
            key=lambda r: r.date,
        )
