"""Promotion router: promotion CRUD, daily rates and eligibility lookup."""

import logging
from datetime import date, timedelta
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, model_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from staydesk.database import get_db
from staydesk.dependencies import get_quote_service, get_today
from staydesk.models.hotel import Hotel, RoomType
from staydesk.models.promotion import Promotion, PromotionBenefit, PromotionDailyRate
from staydesk.schemas.common import PartialUpdate
from staydesk.services.rates.quote_service import QuoteService
from staydesk.services.rates.types import BenefitKind, BenefitRecord

logger = logging.getLogger(__name__)

router = APIRouter()


class BenefitIn(BaseModel):
    kind: BenefitKind
    nights_required: int | None = None
    free_nights: int | None = None
    percent: Decimal | None = None
    amount: Decimal | None = None
    description: str | None = None

    @model_validator(mode="after")
    def check_kind_fields(self):
        # Raises ValueError for fields that don't fit the kind
        BenefitRecord(**self.model_dump())
        allowed = {
            BenefitKind.FREE_NIGHT: {"nights_required", "free_nights"},
            BenefitKind.DISCOUNT_PERCENT: {"percent"},
            BenefitKind.FIXED_DISCOUNT: {"amount"},
        }[self.kind]
        extra = {f for f in ("nights_required", "free_nights", "percent", "amount") if getattr(self, f) is not None} - allowed
        if extra:
            raise ValueError(f"{self.kind.value} benefit does not take {sorted(extra)}")
        return self


class PromotionCreate(BaseModel):
    hotel_id: int
    promo_code: str = Field(min_length=1, max_length=50)
    promo_name: str
    booking_start_date: date
    booking_end_date: date
    stay_start_date: date
    stay_end_date: date
    description: str | None = None
    terms_and_conditions: str | None = None
    is_active: bool = True
    benefits: list[BenefitIn] = []

    @model_validator(mode="after")
    def check_windows(self):
        if self.booking_end_date < self.booking_start_date:
            raise ValueError("booking_end_date must not be before booking_start_date")
        if self.stay_end_date < self.stay_start_date:
            raise ValueError("stay_end_date must not be before stay_start_date")
        return self


class PromotionUpdate(PartialUpdate):
    required_fields = (
        "promo_name",
        "booking_start_date",
        "booking_end_date",
        "stay_start_date",
        "stay_end_date",
        "is_active",
    )

    promo_name: str | None = None
    booking_start_date: date | None = None
    booking_end_date: date | None = None
    stay_start_date: date | None = None
    stay_end_date: date | None = None
    description: str | None = None
    terms_and_conditions: str | None = None
    is_active: bool | None = None
    benefits: list[BenefitIn] | None = None


class DailyRateBulk(BaseModel):
    room_type_id: int
    start_date: date
    end_date: date  # inclusive
    rate_per_night: Decimal = Field(ge=0)
    min_nights: int = Field(default=1, ge=1)
    max_nights: int | None = None
    days_of_week: list[int] | None = None  # 0=Monday .. 6=Sunday
    notes: str | None = None

    @model_validator(mode="after")
    def check_values(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.max_nights is not None and self.max_nights < self.min_nights:
            raise ValueError("max_nights must be >= min_nights")
        return self


def _benefit_dict(b: PromotionBenefit) -> dict:
    return {
        "id": b.id,
        "kind": b.kind,
        "nights_required": b.nights_required,
        "free_nights": b.free_nights,
        "percent": str(b.percent) if b.percent is not None else None,
        "amount": str(b.amount) if b.amount is not None else None,
        "description": b.description,
    }


def _promotion_dict(p: Promotion) -> dict:
    return {
        "id": p.id,
        "hotel_id": p.hotel_id,
        "promo_code": p.promo_code,
        "promo_name": p.promo_name,
        "booking_start_date": p.booking_start_date.isoformat(),
        "booking_end_date": p.booking_end_date.isoformat(),
        "stay_start_date": p.stay_start_date.isoformat(),
        "stay_end_date": p.stay_end_date.isoformat(),
        "description": p.description,
        "terms_and_conditions": p.terms_and_conditions,
        "is_active": p.is_active,
        "benefits": [_benefit_dict(b) for b in sorted(p.benefits, key=lambda b: b.id or 0)],
    }


async def _load_promotion(db: AsyncSession, promotion_id: int) -> Promotion:
    result = await db.execute(
        select(Promotion).where(Promotion.id == promotion_id).options(selectinload(Promotion.benefits))
    )
    promo = result.scalar_one_or_none()
    if not promo:
        raise HTTPException(status_code=404, detail="Promotion not found")
    return promo


@router.get("")
async def list_promotions(
    hotel_id: int | None = None,
    is_active: bool | None = None,
    db: AsyncSession = Depends(get_db),
):
    query = select(Promotion).options(selectinload(Promotion.benefits)).order_by(Promotion.promo_code)
    if hotel_id is not None:
        query = query.where(Promotion.hotel_id == hotel_id)
    if is_active is not None:
        query = query.where(Promotion.is_active.is_(is_active))
    result = await db.execute(query)
    return {"promotions": [_promotion_dict(p) for p in result.scalars().all()]}


@router.get("/eligible")
async def list_eligible_promotions(
    hotel_id: int,
    room_type_id: int,
    check_in: date,
    check_out: date,
    booking_date: date | None = None,
    service: QuoteService = Depends(get_quote_service),
    today: date = Depends(get_today),
):
    """Promotions that could price this stay if booked on booking_date (default today)."""
    promotions = await service.list_eligible_promotions(
        hotel_id, room_type_id, check_in, check_out, booking_date or today
    )
    return {"promotions": [p.to_dict() for p in promotions]}


@router.post("", status_code=201)
async def create_promotion(req: PromotionCreate, db: AsyncSession = Depends(get_db)):
    if not await db.get(Hotel, req.hotel_id):
        raise HTTPException(status_code=404, detail="Hotel not found")
    existing = await db.execute(
        select(Promotion).where(Promotion.hotel_id == req.hotel_id, Promotion.promo_code == req.promo_code)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Promotion code already exists for this hotel")

    promo = Promotion(**req.model_dump(exclude={"benefits"}))
    promo.benefits = [PromotionBenefit(**{**b.model_dump(), "kind": b.kind.value}) for b in req.benefits]
    db.add(promo)
    await db.commit()
    logger.info(f"Promotion {promo.promo_code} created for hotel {promo.hotel_id}")
    return _promotion_dict(await _load_promotion(db, promo.id))


@router.get("/{promotion_id}")
async def get_promotion(promotion_id: int, db: AsyncSession = Depends(get_db)):
    promo = await _load_promotion(db, promotion_id)
    result = await db.execute(
        select(PromotionDailyRate)
        .where(PromotionDailyRate.promotion_id == promotion_id)
        .order_by(PromotionDailyRate.room_type_id, PromotionDailyRate.stay_date)
    )
    return {
        **_promotion_dict(promo),
        "daily_rates": [
            {
                "room_type_id": r.room_type_id,
                "stay_date": r.stay_date.isoformat(),
                "rate_per_night": str(r.rate_per_night),
                "min_nights": r.min_nights,
                "max_nights": r.max_nights,
                "notes": r.notes,
            }
            for r in result.scalars().all()
        ],
    }


@router.put("/{promotion_id}")
async def update_promotion(promotion_id: int, req: PromotionUpdate, db: AsyncSession = Depends(get_db)):
    promo = await _load_promotion(db, promotion_id)
    update_data = req.model_dump(exclude_unset=True, exclude={"benefits"})

    booking_start = update_data.get("booking_start_date", promo.booking_start_date)
    booking_end = update_data.get("booking_end_date", promo.booking_end_date)
    stay_start = update_data.get("stay_start_date", promo.stay_start_date)
    stay_end = update_data.get("stay_end_date", promo.stay_end_date)
    if booking_end < booking_start or stay_end < stay_start:
        raise HTTPException(status_code=400, detail="Window end must not be before window start")

    for field, value in update_data.items():
        setattr(promo, field, value)
    if req.benefits is not None:
        promo.benefits = [PromotionBenefit(**{**b.model_dump(), "kind": b.kind.value}) for b in req.benefits]

    await db.commit()
    return _promotion_dict(await _load_promotion(db, promotion_id))


@router.delete("/{promotion_id}")
async def delete_promotion(promotion_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a promotion with its daily rates and benefits."""
    promo = await _load_promotion(db, promotion_id)
    await db.delete(promo)
    await db.commit()
    logger.info(f"Promotion {promotion_id} deleted")
    return {"status": "deleted"}


@router.put("/{promotion_id}/daily-rates")
async def upsert_daily_rates(promotion_id: int, req: DailyRateBulk, db: AsyncSession = Depends(get_db)):
    """Set one rate on every matching date in [start_date, end_date]."""
    promo = await _load_promotion(db, promotion_id)
    room_type = await db.get(RoomType, req.room_type_id)
    if not room_type or room_type.hotel_id != promo.hotel_id:
        raise HTTPException(status_code=404, detail="Room type not found for this promotion's hotel")

    dates = [req.start_date + timedelta(days=i) for i in range((req.end_date - req.start_date).days + 1)]
    if req.days_of_week:
        dates = [d for d in dates if d.weekday() in set(req.days_of_week)]

    result = await db.execute(
        select(PromotionDailyRate).where(
            PromotionDailyRate.promotion_id == promotion_id,
            PromotionDailyRate.room_type_id == req.room_type_id,
            PromotionDailyRate.stay_date.in_(dates),
        )
    )
    existing = {r.stay_date: r for r in result.scalars().all()}

    for d in dates:
        row = existing.get(d)
        if row is None:
            row = PromotionDailyRate(promotion_id=promotion_id, room_type_id=req.room_type_id, stay_date=d)
            db.add(row)
        row.rate_per_night = req.rate_per_night
        row.min_nights = req.min_nights
        row.max_nights = req.max_nights
        row.notes = req.notes

    await db.commit()
    return {"saved": len(dates), "created": len(dates) - len(existing)}


@router.get("/{promotion_id}/daily-rates")
async def list_daily_rates(
    promotion_id: int,
    room_type_id: int | None = None,
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    await _load_promotion(db, promotion_id)
    query = select(PromotionDailyRate).where(PromotionDailyRate.promotion_id == promotion_id)
    if room_type_id is not None:
        query = query.where(PromotionDailyRate.room_type_id == room_type_id)
    if start is not None:
        query = query.where(PromotionDailyRate.stay_date >= start)
    if end is not None:
        query = query.where(PromotionDailyRate.stay_date <= end)
    result = await db.execute(query.order_by(PromotionDailyRate.room_type_id, PromotionDailyRate.stay_date))
    return {
        "daily_rates": [
            {
                "room_type_id": r.room_type_id,
                "stay_date": r.stay_date.isoformat(),
                "rate_per_night": str(r.rate_per_night),
                "min_nights": r.min_nights,
                "max_nights": r.max_nights,
            }
            for r in result.scalars().all()
        ]
    }
