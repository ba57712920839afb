"""Hotel catalog router: hotels and their room types."""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.config import settings
from staydesk.data.currency import is_supported_currency
from staydesk.database import get_db
from staydesk.models.hotel import Hotel, RoomType
from staydesk.schemas.common import PartialUpdate

router = APIRouter()


class HotelCreate(BaseModel):
    hotel_code: str
    hotel_name: str
    hotel_name_en: str | None = None
    country: str | None = None
    region: str | None = None
    currency: str = Field(default_factory=lambda: settings.default_currency, min_length=3, max_length=3)
    description: str | None = None


class HotelUpdate(PartialUpdate):
    required_fields = ("hotel_name", "currency", "is_active")

    hotel_name: str | None = None
    hotel_name_en: str | None = None
    country: str | None = None
    region: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    description: str | None = None
    is_active: bool | None = None


class RoomTypeCreate(BaseModel):
    room_type_code: str
    room_type_name: str
    description: str | None = None
    max_adults: int = Field(default=2, ge=1)
    max_children: int = Field(default=1, ge=0)
    max_infants: int = Field(default=1, ge=0)
    display_order: int = 0
    breakfast_rate_adult: Decimal = Field(default=Decimal("0"), ge=0)
    breakfast_rate_child: Decimal = Field(default=Decimal("0"), ge=0)
    breakfast_rate_infant: Decimal = Field(default=Decimal("0"), ge=0)
    extra_bed_rate: Decimal = Field(default=Decimal("0"), ge=0)
    baby_cot_rate: Decimal = Field(default=Decimal("0"), ge=0)


class RoomTypeUpdate(PartialUpdate):
    required_fields = (
        "room_type_name",
        "max_adults",
        "max_children",
        "max_infants",
        "display_order",
        "breakfast_rate_adult",
        "breakfast_rate_child",
        "breakfast_rate_infant",
        "extra_bed_rate",
        "baby_cot_rate",
        "is_active",
    )

    room_type_name: str | None = None
    description: str | None = None
    max_adults: int | None = Field(default=None, ge=1)
    max_children: int | None = Field(default=None, ge=0)
    max_infants: int | None = Field(default=None, ge=0)
    display_order: int | None = None
    breakfast_rate_adult: Decimal | None = Field(default=None, ge=0)
    breakfast_rate_child: Decimal | None = Field(default=None, ge=0)
    breakfast_rate_infant: Decimal | None = Field(default=None, ge=0)
    extra_bed_rate: Decimal | None = Field(default=None, ge=0)
    baby_cot_rate: Decimal | None = Field(default=None, ge=0)
    is_active: bool | None = None


def _hotel_dict(h: Hotel) -> dict:
    return {
        "id": h.id,
        "hotel_code": h.hotel_code,
        "hotel_name": h.hotel_name,
        "hotel_name_en": h.hotel_name_en,
        "country": h.country,
        "region": h.region,
        "currency": h.currency,
        "description": h.description,
        "is_active": h.is_active,
        "created_at": h.created_at.isoformat() if h.created_at else None,
    }


def _room_type_dict(rt: RoomType) -> dict:
    return {
        "id": rt.id,
        "hotel_id": rt.hotel_id,
        "room_type_code": rt.room_type_code,
        "room_type_name": rt.room_type_name,
        "description": rt.description,
        "max_adults": rt.max_adults,
        "max_children": rt.max_children,
        "max_infants": rt.max_infants,
        "display_order": rt.display_order,
        "breakfast_rate_adult": str(rt.breakfast_rate_adult),
        "breakfast_rate_child": str(rt.breakfast_rate_child),
        "breakfast_rate_infant": str(rt.breakfast_rate_infant),
        "extra_bed_rate": str(rt.extra_bed_rate),
        "baby_cot_rate": str(rt.baby_cot_rate),
        "is_active": rt.is_active,
    }


async def _get_hotel(db: AsyncSession, hotel_id: int) -> Hotel:
    hotel = await db.get(Hotel, hotel_id)
    if not hotel:
        raise HTTPException(status_code=404, detail="Hotel not found")
    return hotel


@router.get("/hotels")
async def list_hotels(
    include_inactive: bool = False,
    db: AsyncSession = Depends(get_db),
):
    query = select(Hotel).order_by(Hotel.hotel_name)
    if not include_inactive:
        query = query.where(Hotel.is_active.is_(True))
    result = await db.execute(query)
    return {"hotels": [_hotel_dict(h) for h in result.scalars().all()]}


@router.post("/hotels", status_code=201)
async def create_hotel(req: HotelCreate, db: AsyncSession = Depends(get_db)):
    if not is_supported_currency(req.currency):
        raise HTTPException(status_code=400, detail=f"Unsupported currency: {req.currency}")
    existing = await db.execute(select(Hotel).where(Hotel.hotel_code == req.hotel_code))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Hotel code already exists")

    hotel = Hotel(**{**req.model_dump(), "currency": req.currency.upper()})
    db.add(hotel)
    await db.commit()
    await db.refresh(hotel)
    return _hotel_dict(hotel)


@router.get("/hotels/{hotel_id}")
async def get_hotel(hotel_id: int, db: AsyncSession = Depends(get_db)):
    hotel = await _get_hotel(db, hotel_id)
    result = await db.execute(
        select(RoomType)
        .where(RoomType.hotel_id == hotel_id, RoomType.is_active.is_(True))
        .order_by(RoomType.display_order, RoomType.room_type_name)
    )
    return {**_hotel_dict(hotel), "room_types": [_room_type_dict(rt) for rt in result.scalars().all()]}


@router.put("/hotels/{hotel_id}")
async def update_hotel(hotel_id: int, req: HotelUpdate, db: AsyncSession = Depends(get_db)):
    hotel = await _get_hotel(db, hotel_id)
    update_data = req.model_dump(exclude_unset=True)
    if "currency" in update_data:
        if not is_supported_currency(update_data["currency"]):
            raise HTTPException(status_code=400, detail=f"Unsupported currency: {update_data['currency']}")
        update_data["currency"] = update_data["currency"].upper()
    for field, value in update_data.items():
        setattr(hotel, field, value)

    await db.commit()
    await db.refresh(hotel)
    return _hotel_dict(hotel)


@router.delete("/hotels/{hotel_id}")
async def delete_hotel(hotel_id: int, db: AsyncSession = Depends(get_db)):
    """Deactivate a hotel. Reservations keep referencing it."""
    hotel = await _get_hotel(db, hotel_id)
    hotel.is_active = False
    await db.commit()
    return {"status": "deactivated"}


@router.get("/hotels/{hotel_id}/room-types")
async def list_room_types(hotel_id: int, db: AsyncSession = Depends(get_db)):
    await _get_hotel(db, hotel_id)
    result = await db.execute(
        select(RoomType)
        .where(RoomType.hotel_id == hotel_id, RoomType.is_active.is_(True))
        .order_by(RoomType.display_order, RoomType.room_type_name)
    )
    return {"room_types": [_room_type_dict(rt) for rt in result.scalars().all()]}


@router.post("/hotels/{hotel_id}/room-types", status_code=201)
async def create_room_type(hotel_id: int, req: RoomTypeCreate, db: AsyncSession = Depends(get_db)):
    await _get_hotel(db, hotel_id)
    existing = await db.execute(
        select(RoomType).where(RoomType.hotel_id == hotel_id, RoomType.room_type_code == req.room_type_code)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Room type code already exists for this hotel")

    room_type = RoomType(hotel_id=hotel_id, **req.model_dump())
    db.add(room_type)
    await db.commit()
    await db.refresh(room_type)
    return _room_type_dict(room_type)


@router.put("/room-types/{room_type_id}")
async def update_room_type(room_type_id: int, req: RoomTypeUpdate, db: AsyncSession = Depends(get_db)):
    room_type = await db.get(RoomType, room_type_id)
    if not room_type:
        raise HTTPException(status_code=404, detail="Room type not found")

    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(room_type, field, value)
    await db.commit()
    await db.refresh(room_type)
    return _room_type_dict(room_type)


@router.delete("/room-types/{room_type_id}")
async def delete_room_type(room_type_id: int, db: AsyncSession = Depends(get_db)):
    room_type = await db.get(RoomType, room_type_id)
    if not room_type:
        raise HTTPException(status_code=404, detail="Room type not found")
    room_type.is_active = False
    await db.commit()
    return {"status": "deactivated"}
