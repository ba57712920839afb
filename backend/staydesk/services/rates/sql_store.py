"""SQLAlchemy implementations of the rate and inventory storage ports."""

import logging
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from staydesk.models.hotel import Hotel, RoomType
from staydesk.models.inventory import RoomInventory
from staydesk.models.promotion import Promotion, PromotionDailyRate
from staydesk.models.season import Season, SeasonRate
from staydesk.services.cache_service import cache_service
from staydesk.services.rates.ports import InventoryStore, RateStore
from staydesk.services.rates.types import (
    BenefitKind,
    BenefitRecord,
    DailyRateRecord,
    InventoryRecord,
    PromotionRecord,
    RoomTypeRecord,
    SeasonLabel,
    SeasonRecord,
)

logger = logging.getLogger(__name__)


def season_record(season: Season) -> SeasonRecord:
    return SeasonRecord(
        id=season.id,
        hotel_id=season.hotel_id,
        name=season.season_name,
        label=SeasonLabel(season.label),
        start_date=season.start_date,
        end_date=season.end_date,
        is_active=season.is_active,
    )


def promotion_record(promo: Promotion) -> PromotionRecord:
    return PromotionRecord(
        id=promo.id,
        hotel_id=promo.hotel_id,
        code=promo.promo_code,
        name=promo.promo_name,
        booking_start=promo.booking_start_date,
        booking_end=promo.booking_end_date,
        stay_start=promo.stay_start_date,
        stay_end=promo.stay_end_date,
        is_active=promo.is_active,
        description=promo.description,
        benefits=tuple(
            BenefitRecord(
                kind=BenefitKind(b.kind),
                nights_required=b.nights_required,
                free_nights=b.free_nights,
                percent=b.percent,
                amount=b.amount,
                description=b.description,
            )
            for b in sorted(promo.benefits, key=lambda b: b.id)
        ),
    )


def inventory_record(row: RoomInventory) -> InventoryRecord:
    return InventoryRecord(
        hotel_id=row.hotel_id,
        room_type_id=row.room_type_id,
        date=row.inventory_date,
        available=row.available_rooms,
        allocated=row.allocated_rooms,
        reserved=row.reserved_rooms,
        notes=row.notes,
    )


class SqlRateStore(RateStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_room_type(self, room_type_id: int) -> RoomTypeRecord | None:
        result = await self.db.execute(
            select(RoomType, Hotel.currency)
            .join(Hotel, Hotel.id == RoomType.hotel_id)
            .where(RoomType.id == room_type_id, RoomType.is_active.is_(True))
        )
        row = result.first()
        if row is None:
            return None
        rt, currency = row
        return RoomTypeRecord(
            id=rt.id,
            hotel_id=rt.hotel_id,
            code=rt.room_type_code,
            name=rt.room_type_name,
            currency=currency,
            breakfast_adult=rt.breakfast_rate_adult or Decimal("0"),
            breakfast_child=rt.breakfast_rate_child or Decimal("0"),
            breakfast_infant=rt.breakfast_rate_infant or Decimal("0"),
            extra_bed_rate=rt.extra_bed_rate or Decimal("0"),
            baby_cot_rate=rt.baby_cot_rate or Decimal("0"),
        )

    async def list_seasons(self, hotel_id: int) -> list[SeasonRecord]:
        cached = await cache_service.get_seasons(hotel_id)
        if cached is not None:
            return [SeasonRecord.from_dict(s) for s in cached]

        result = await self.db.execute(
            select(Season)
            .where(Season.hotel_id == hotel_id, Season.is_active.is_(True))
            .order_by(Season.start_date)
        )
        seasons = [season_record(s) for s in result.scalars().all()]
        await cache_service.set_seasons(hotel_id, [s.to_dict() for s in seasons])
        return seasons

    async def season_rates(self, room_type_id: int) -> dict[int, Decimal]:
        result = await self.db.execute(
            select(SeasonRate.season_id, SeasonRate.base_rate).where(SeasonRate.room_type_id == room_type_id)
        )
        return {season_id: rate for season_id, rate in result.all()}

    async def list_promotions(self, hotel_id: int) -> list[PromotionRecord]:
        result = await self.db.execute(
            select(Promotion)
            .where(Promotion.hotel_id == hotel_id)
            .options(selectinload(Promotion.benefits))
            .order_by(Promotion.promo_code)
        )
        return [promotion_record(p) for p in result.scalars().all()]

    async def daily_rates(
        self, promotion_ids: list[int], room_type_id: int, start: date, end: date
    ) -> list[DailyRateRecord]:
        if not promotion_ids:
            return []
        result = await self.db.execute(
            select(PromotionDailyRate).where(
                PromotionDailyRate.promotion_id.in_(promotion_ids),
                PromotionDailyRate.room_type_id == room_type_id,
                PromotionDailyRate.stay_date >= start,
                PromotionDailyRate.stay_date < end,
            )
        )
        return [
            DailyRateRecord(
                promotion_id=r.promotion_id,
                room_type_id=r.room_type_id,
                stay_date=r.stay_date,
                rate=r.rate_per_night,
                min_nights=r.min_nights or 1,
                max_nights=r.max_nights,
            )
            for r in result.scalars().all()
        ]


class SqlInventoryStore(InventoryStore):
    """Row-locking inventory store.

    With autocommit the transaction is committed when a locked block exits;
    otherwise changes are only flushed and the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession, autocommit: bool = False):
        self.db = db
        self.autocommit = autocommit

    @asynccontextmanager
    async def locked(self, hotel_id: int, room_type_id: int, dates: list[date]):
        result = await self.db.execute(
            select(RoomInventory)
            .where(
                RoomInventory.hotel_id == hotel_id,
                RoomInventory.room_type_id == room_type_id,
                RoomInventory.inventory_date.in_(dates),
            )
            .order_by(RoomInventory.inventory_date)
            .with_for_update()
        )
        rows = {row.inventory_date: row for row in result.scalars().all()}
        working = {d: inventory_record(row) for d, row in rows.items()}

        try:
            yield working
        except Exception:
            if self.autocommit:
                await self.db.rollback()
            raise

        for d, record in working.items():
            row = rows.get(d)
            if row is None:
                row = RoomInventory(hotel_id=hotel_id, room_type_id=room_type_id, inventory_date=d)
                self.db.add(row)
            row.available_rooms = record.available
            row.allocated_rooms = record.allocated
            row.reserved_rooms = record.reserved
            row.notes = record.notes
        await self.db.flush()
        if self.autocommit:
            await self.db.commit()

    async def read_range(self, hotel_id: int, room_type_id: int, start: date, end: date) -> list[InventoryRecord]:
        result = await self.db.execute(
            select(RoomInventory)
            .where(
                RoomInventory.hotel_id == hotel_id,
                RoomInventory.room_type_id == room_type_id,
                RoomInventory.inventory_date >= start,
                RoomInventory.inventory_date <= end,
            )
            .order_by(RoomInventory.inventory_date)
        )
        return [inventory_record(r) for r in result.scalars().all()]
