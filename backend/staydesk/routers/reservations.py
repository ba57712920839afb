"""Reservation router: confirm, inspect, cancel and settle bookings."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.data.currency import format_price, is_supported_currency
from staydesk.database import get_db
from staydesk.dependencies import get_today
from staydesk.routers.quotes import to_stay_request
from staydesk.schemas.reservation import ReservationCreate, ReservationResponse, SettlementRequest
from staydesk.services.booking_service import booking_service

router = APIRouter()


def _reservation_payload(reservation) -> dict:
    data = ReservationResponse.model_validate(reservation).model_dump(mode="json")
    data["total_display"] = format_price(reservation.total_price, reservation.currency)
    if reservation.settlement_total is not None:
        data["settlement_display"] = format_price(reservation.settlement_total, reservation.settlement_currency)
    return data


@router.post("", status_code=201)
async def create_reservation(
    req: ReservationCreate,
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
):
    reservation = await booking_service.confirm(
        db,
        to_stay_request(req, today),
        room_count=req.room_count,
        guest_name=req.guest_name,
        special_requests=req.special_requests,
    )
    return _reservation_payload(reservation)


@router.get("/{reservation_id}")
async def get_reservation(reservation_id: int, db: AsyncSession = Depends(get_db)):
    reservation = await booking_service.get(db, reservation_id)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return _reservation_payload(reservation)


@router.post("/{reservation_id}/cancel")
async def cancel_reservation(reservation_id: int, db: AsyncSession = Depends(get_db)):
    """Idempotent: cancelling twice releases inventory once."""
    reservation = await booking_service.cancel(db, reservation_id)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return _reservation_payload(reservation)


@router.post("/{reservation_id}/settlement")
async def settle_reservation(
    reservation_id: int,
    req: SettlementRequest,
    db: AsyncSession = Depends(get_db),
):
    if not is_supported_currency(req.settlement_currency):
        raise HTTPException(status_code=400, detail=f"Unsupported currency: {req.settlement_currency}")
    reservation = await booking_service.settle(db, reservation_id, req.settlement_currency, req.exchange_rate)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return _reservation_payload(reservation)
