"""Inventory router: per-date room counts, bulk setup and holds."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.database import get_db
from staydesk.dependencies import get_inventory_store
from staydesk.models.hotel import RoomType
from staydesk.models.inventory import RoomInventory
from staydesk.schemas.inventory import InventoryBulkRequest, InventoryHoldRequest
from staydesk.services.rates.inventory_ledger import InventoryLedger
from staydesk.services.rates.ports import InventoryStore
from staydesk.services.rates.types import stay_dates

router = APIRouter()


def get_ledger(store: InventoryStore = Depends(get_inventory_store)) -> InventoryLedger:
    return InventoryLedger(store)


@router.get("")
async def get_inventory(
    hotel_id: int,
    room_type_id: int,
    start: date,
    end: date,
    ledger: InventoryLedger = Depends(get_ledger),
):
    if end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")
    records = await ledger.snapshot(hotel_id, room_type_id, start, end)
    return {"inventory": [r.to_dict() for r in records]}


@router.put("/bulk")
async def bulk_set_inventory(req: InventoryBulkRequest, ledger: InventoryLedger = Depends(get_ledger)):
    records = await ledger.set_inventory(
        req.hotel_id,
        req.room_type_id,
        req.start_date,
        req.end_date,
        available=req.available_rooms,
        allocated=req.allocated_rooms,
        days_of_week=req.days_of_week,
        notes=req.notes,
    )
    return {"updated": len(records), "inventory": [r.to_dict() for r in records]}


@router.get("/summary")
async def inventory_summary(
    hotel_id: int,
    start: date,
    end: date,
    db: AsyncSession = Depends(get_db),
):
    """Per room type totals over [start, end]."""
    capacity = func.coalesce(RoomInventory.allocated_rooms, RoomInventory.available_rooms)
    result = await db.execute(
        select(
            RoomType.id,
            RoomType.room_type_name,
            func.count(RoomInventory.id),
            func.coalesce(func.sum(capacity), 0),
            func.coalesce(func.sum(RoomInventory.reserved_rooms), 0),
            func.min(capacity - RoomInventory.reserved_rooms),
        )
        .join(RoomInventory, RoomInventory.room_type_id == RoomType.id)
        .where(
            RoomType.hotel_id == hotel_id,
            RoomInventory.inventory_date >= start,
            RoomInventory.inventory_date <= end,
        )
        .group_by(RoomType.id, RoomType.room_type_name, RoomType.display_order)
        .order_by(RoomType.display_order)
    )
    return {
        "hotel_id": hotel_id,
        "start": start.isoformat(),
        "end": end.isoformat(),
        "room_types": [
            {
                "room_type_id": rt_id,
                "room_type_name": name,
                "days": days,
                "total_capacity": int(total_capacity),
                "total_reserved": int(total_reserved),
                "min_remaining": min_remaining,
            }
            for rt_id, name, days, total_capacity, total_reserved, min_remaining in result.all()
        ],
    }


@router.post("/reserve")
async def reserve_inventory(req: InventoryHoldRequest, ledger: InventoryLedger = Depends(get_ledger)):
    dates = stay_dates(req.check_in, req.check_out)
    await ledger.check_and_reserve(req.hotel_id, req.room_type_id, dates, req.count)
    return {"status": "reserved", "nights": len(dates), "count": req.count}


@router.post("/release")
async def release_inventory(req: InventoryHoldRequest, ledger: InventoryLedger = Depends(get_ledger)):
    dates = stay_dates(req.check_in, req.check_out)
    await ledger.release(req.hotel_id, req.room_type_id, dates, req.count)
    return {"status": "released", "nights": len(dates), "count": req.count}
