"""Season router: season intervals, month calendar and base rates."""

import calendar
import logging
from datetime import date, timedelta
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, model_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.database import get_db
from staydesk.models.hotel import Hotel, RoomType
from staydesk.models.season import Season, SeasonRate
from staydesk.schemas.common import PartialUpdate
from staydesk.services.cache_service import cache_service
from staydesk.services.rates.errors import SeasonOverlapError
from staydesk.services.rates.season_calendar import SeasonCalendar, find_overlaps
from staydesk.services.rates.sql_store import season_record
from staydesk.services.rates.types import SeasonLabel

logger = logging.getLogger(__name__)

router = APIRouter()


class SeasonCreate(BaseModel):
    season_name: str
    label: SeasonLabel
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class SeasonUpdate(PartialUpdate):
    required_fields = ("season_name", "label", "start_date", "end_date", "is_active")

    season_name: str | None = None
    label: SeasonLabel | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None


class SeasonRateItem(BaseModel):
    season_id: int
    room_type_id: int
    base_rate: Decimal = Field(ge=0)
    notes: str | None = None


class SeasonRateBulk(BaseModel):
    rates: list[SeasonRateItem]


def _season_dict(s: Season) -> dict:
    return {
        "id": s.id,
        "hotel_id": s.hotel_id,
        "season_name": s.season_name,
        "label": s.label,
        "start_date": s.start_date.isoformat(),
        "end_date": s.end_date.isoformat(),
        "is_active": s.is_active,
    }


async def _lock_hotel(db: AsyncSession, hotel_id: int) -> Hotel:
    """Serialize season writes per hotel so overlap checks see a stable set."""
    result = await db.execute(select(Hotel).where(Hotel.id == hotel_id).with_for_update())
    hotel = result.scalar_one_or_none()
    if not hotel:
        raise HTTPException(status_code=404, detail="Hotel not found")
    return hotel


async def _active_seasons(db: AsyncSession, hotel_id: int) -> list[Season]:
    result = await db.execute(
        select(Season).where(Season.hotel_id == hotel_id, Season.is_active.is_(True)).order_by(Season.start_date)
    )
    return list(result.scalars().all())


async def _reject_overlaps(db: AsyncSession, hotel_id: int, start: date, end: date, exclude_id: int | None = None):
    existing = [season_record(s) for s in await _active_seasons(db, hotel_id)]
    conflicts = find_overlaps(existing, start, end, exclude_id=exclude_id)
    if conflicts:
        logger.warning(
            f"Season {start}..{end} for hotel {hotel_id} overlaps {[c.id for c in conflicts]}"
        )
        raise SeasonOverlapError(conflicts)


@router.get("/hotels/{hotel_id}/seasons")
async def list_seasons(
    hotel_id: int,
    include_inactive: bool = False,
    db: AsyncSession = Depends(get_db),
):
    query = select(Season).where(Season.hotel_id == hotel_id).order_by(Season.start_date)
    if not include_inactive:
        query = query.where(Season.is_active.is_(True))
    result = await db.execute(query)
    return {"seasons": [_season_dict(s) for s in result.scalars().all()]}


@router.post("/hotels/{hotel_id}/seasons", status_code=201)
async def create_season(hotel_id: int, req: SeasonCreate, db: AsyncSession = Depends(get_db)):
    await _lock_hotel(db, hotel_id)
    await _reject_overlaps(db, hotel_id, req.start_date, req.end_date)

    season = Season(
        hotel_id=hotel_id,
        season_name=req.season_name,
        label=req.label.value,
        start_date=req.start_date,
        end_date=req.end_date,
    )
    db.add(season)
    await db.commit()
    await db.refresh(season)
    await cache_service.invalidate_seasons(hotel_id)
    return _season_dict(season)


@router.put("/seasons/{season_id}")
async def update_season(season_id: int, req: SeasonUpdate, db: AsyncSession = Depends(get_db)):
    season = await db.get(Season, season_id)
    if not season:
        raise HTTPException(status_code=404, detail="Season not found")
    await _lock_hotel(db, season.hotel_id)

    update_data = req.model_dump(exclude_unset=True)
    start = update_data.get("start_date", season.start_date)
    end = update_data.get("end_date", season.end_date)
    if end < start:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    if update_data.get("is_active", season.is_active):
        await _reject_overlaps(db, season.hotel_id, start, end, exclude_id=season.id)

    if "label" in update_data and update_data["label"] is not None:
        update_data["label"] = update_data["label"].value
    for field, value in update_data.items():
        setattr(season, field, value)

    await db.commit()
    await db.refresh(season)
    await cache_service.invalidate_seasons(season.hotel_id)
    return _season_dict(season)


@router.delete("/seasons/{season_id}")
async def delete_season(season_id: int, db: AsyncSession = Depends(get_db)):
    season = await db.get(Season, season_id)
    if not season:
        raise HTTPException(status_code=404, detail="Season not found")
    hotel_id = season.hotel_id
    await db.delete(season)
    await db.commit()
    await cache_service.invalidate_seasons(hotel_id)
    return {"status": "deleted"}


@router.get("/hotels/{hotel_id}/season-calendar")
async def season_calendar(
    hotel_id: int,
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    db: AsyncSession = Depends(get_db),
):
    """Season label for every day of a month."""
    cal = SeasonCalendar([season_record(s) for s in await _active_seasons(db, hotel_id)])
    first = date(year, month, 1)
    days = [first + timedelta(days=i) for i in range(calendar.monthrange(year, month)[1])]

    return {
        "hotel_id": hotel_id,
        "year": year,
        "month": month,
        "days": [
            {
                "date": d.isoformat(),
                "season_id": s.id if s else None,
                "season_name": s.name if s else None,
                "label": s.label.value if s else None,
            }
            for d, s in cal.label_days(days).items()
        ],
    }


@router.get("/hotels/{hotel_id}/season-rates")
async def list_season_rates(hotel_id: int, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(SeasonRate, Season, RoomType)
        .join(Season, Season.id == SeasonRate.season_id)
        .join(RoomType, RoomType.id == SeasonRate.room_type_id)
        .where(Season.hotel_id == hotel_id)
        .order_by(Season.start_date, RoomType.display_order)
    )
    return {
        "rates": [
            {
                "id": rate.id,
                "season_id": season.id,
                "season_name": season.season_name,
                "label": season.label,
                "room_type_id": room_type.id,
                "room_type_name": room_type.room_type_name,
                "base_rate": str(rate.base_rate),
                "notes": rate.notes,
            }
            for rate, season, room_type in result.all()
        ]
    }


@router.put("/season-rates")
async def upsert_season_rates(req: SeasonRateBulk, db: AsyncSession = Depends(get_db)):
    """Bulk upsert on (season, room type)."""
    saved = 0
    for item in req.rates:
        season = await db.get(Season, item.season_id)
        room_type = await db.get(RoomType, item.room_type_id)
        if not season or not room_type:
            raise HTTPException(status_code=404, detail=f"Season {item.season_id} or room type {item.room_type_id} not found")
        if season.hotel_id != room_type.hotel_id:
            raise HTTPException(status_code=400, detail="Season and room type belong to different hotels")

        result = await db.execute(
            select(SeasonRate).where(
                SeasonRate.season_id == item.season_id, SeasonRate.room_type_id == item.room_type_id
            )
        )
        rate = result.scalar_one_or_none()
        if rate:
            rate.base_rate = item.base_rate
            rate.notes = item.notes
        else:
            db.add(SeasonRate(**item.model_dump()))
        saved += 1

    await db.commit()
    return {"saved": saved}
