from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from staydesk.schemas.quote import QuoteRequest


class ReservationCreate(QuoteRequest):
    room_count: int = Field(default=1, ge=1)
    guest_name: str | None = None
    special_requests: str | None = None


class SettlementRequest(BaseModel):
    settlement_currency: str = Field(min_length=3, max_length=3)
    exchange_rate: Decimal = Field(gt=0)


class ReservationLineResponse(BaseModel):
    id: int
    room_type_id: int
    room_number: int
    nightly_snapshot: list[dict]
    promo_code: str | None
    room_subtotal: Decimal
    discount_total: Decimal
    extras_total: Decimal
    line_total: Decimal
    inventory_status: str

    model_config = {"from_attributes": True}


class ReservationResponse(BaseModel):
    id: int
    reservation_number: str
    hotel_id: int
    check_in_date: date
    check_out_date: date
    nights: int
    adult_count: int
    child_count: int
    infant_count: int
    room_count: int
    promo_code: str | None
    currency: str
    total_price: Decimal
    status: str
    guest_name: str | None
    settlement_currency: str | None
    exchange_rate: Decimal | None
    settlement_total: Decimal | None
    lines: list[ReservationLineResponse]

    model_config = {"from_attributes": True}
