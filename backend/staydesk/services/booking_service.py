"""Booking service: turns an accepted quote into a reservation holding inventory."""

import logging
import uuid
from collections.abc import Callable
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from staydesk.config import settings
from staydesk.data.currency import convert_with_rate
from staydesk.models.reservation import Reservation, ReservationRoomLine
from staydesk.services.rates.ports import InventoryStore, RateStore
from staydesk.services.rates.quote_service import QuoteService
from staydesk.services.rates.sql_store import SqlInventoryStore, SqlRateStore
from staydesk.services.rates.types import PriceQuote, StayQuoteRequest, money

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}

LINE_HELD = "held"
LINE_RELEASED = "released"

StoreFactory = Callable[[AsyncSession], tuple[RateStore, InventoryStore]]


def sql_stores(db: AsyncSession) -> tuple[RateStore, InventoryStore]:
    return SqlRateStore(db), SqlInventoryStore(db)


def is_retryable(exc: DBAPIError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code in RETRYABLE_SQLSTATES


def reservation_total(quote: PriceQuote, room_count: int) -> Decimal:
    """Room charge per booked room; stay-level extras once."""
    return money(room_count * (quote.room_subtotal - quote.discount_total) + quote.extras_total)


def build_room_lines(quote: PriceQuote, room_count: int) -> list[dict]:
    """One line per booked room, each with its own frozen copy of the nightly rates.

    Extras are priced for the whole party, so only room 1 carries them.
    """
    snapshot = [
        {
            "date": n.date.isoformat(),
            "rate": str(n.rate),
            "source": n.source.value,
            "promo_code": n.promo_code,
        }
        for n in quote.nightly_rates
    ]
    room_charge = money(quote.room_subtotal - quote.discount_total)
    lines = []
    for i in range(1, room_count + 1):
        extras_total = quote.extras_total if i == 1 else money(0)
        lines.append(
            {
                "room_type_id": quote.room_type_id,
                "room_number": i,
                "nightly_snapshot": [dict(night) for night in snapshot],
                "promo_code": quote.promo_code,
                "room_subtotal": quote.room_subtotal,
                "discount_total": quote.discount_total,
                "extras_total": extras_total,
                "line_total": money(room_charge + extras_total),
                "inventory_status": LINE_HELD,
            }
        )
    return lines


def snapshot_dates(line: ReservationRoomLine) -> list[date]:
    return [date.fromisoformat(night["date"]) for night in line.nightly_snapshot]


def generate_reservation_number(today: date) -> str:
    return f"SD-{today:%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


class BookingService:
    def __init__(self, stores: StoreFactory = sql_stores):
        self.stores = stores

    def _quote_service(self, db: AsyncSession) -> QuoteService:
        return QuoteService(*self.stores(db))

    async def _load(self, db: AsyncSession, reservation_id: int, for_update: bool = False) -> Reservation | None:
        query = select(Reservation).where(Reservation.id == reservation_id).options(selectinload(Reservation.lines))
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get(self, db: AsyncSession, reservation_id: int) -> Reservation | None:
        return await self._load(db, reservation_id)

    async def confirm(
        self,
        db: AsyncSession,
        request: StayQuoteRequest,
        room_count: int = 1,
        guest_name: str | None = None,
        special_requests: str | None = None,
    ) -> Reservation:
        """Quote, reserve every night and persist the reservation in one transaction.

        Serialization failures and deadlocks roll back and retry the whole
        transaction up to settings.booking_retry_attempts times.
        """
        attempts = max(settings.booking_retry_attempts, 1)
        for attempt in range(1, attempts + 1):
            try:
                return await self._confirm_once(db, request, room_count, guest_name, special_requests)
            except DBAPIError as e:
                await db.rollback()
                if is_retryable(e) and attempt < attempts:
                    logger.warning(
                        f"Booking transaction conflict on attempt {attempt}/{attempts} "
                        f"(room_type={request.room_type_id}), retrying"
                    )
                    continue
                raise
            except Exception:
                await db.rollback()
                raise
        raise RuntimeError("unreachable")

    async def _confirm_once(
        self,
        db: AsyncSession,
        request: StayQuoteRequest,
        room_count: int,
        guest_name: str | None,
        special_requests: str | None,
    ) -> Reservation:
        service = self._quote_service(db)
        quote = await service.get_quote(request)
        await service.reserve_inventory(quote.hotel_id, quote.room_type_id, request.dates, room_count)

        reservation = Reservation(
            reservation_number=generate_reservation_number(request.today),
            hotel_id=quote.hotel_id,
            check_in_date=quote.check_in,
            check_out_date=quote.check_out,
            nights=quote.nights,
            adult_count=request.adult_count,
            child_count=request.child_count,
            infant_count=request.infant_count,
            room_count=room_count,
            promo_code=quote.promo_code,
            currency=quote.currency,
            total_price=reservation_total(quote, room_count),
            status="confirmed",
            guest_name=guest_name,
            special_requests=special_requests,
        )
        reservation.lines = [ReservationRoomLine(**line) for line in build_room_lines(quote, room_count)]
        db.add(reservation)
        await db.commit()

        logger.info(
            f"Reservation {reservation.reservation_number} confirmed: {room_count} x room_type "
            f"{quote.room_type_id} {quote.check_in}..{quote.check_out} total={reservation.total_price}"
        )
        return await self._load(db, reservation.id)

    async def cancel(self, db: AsyncSession, reservation_id: int) -> Reservation | None:
        """Release held inventory and cancel. Lines already released are skipped."""
        reservation = await self._load(db, reservation_id, for_update=True)
        if reservation is None:
            return None

        service = self._quote_service(db)
        released = 0
        try:
            for line in reservation.lines:
                if line.inventory_status != LINE_HELD:
                    continue
                await service.release_inventory(reservation.hotel_id, line.room_type_id, snapshot_dates(line), 1)
                line.inventory_status = LINE_RELEASED
                released += 1

            if reservation.status != "cancelled":
                reservation.status = "cancelled"
                reservation.cancelled_at = datetime.now(timezone.utc)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        if released:
            logger.info(f"Reservation {reservation.reservation_number} cancelled, {released} room line(s) released")
        else:
            logger.info(f"Reservation {reservation.reservation_number} already released, nothing to do")
        return await self._load(db, reservation_id)

    async def settle(
        self,
        db: AsyncSession,
        reservation_id: int,
        settlement_currency: str,
        exchange_rate: Decimal,
    ) -> Reservation | None:
        reservation = await self._load(db, reservation_id)
        if reservation is None:
            return None

        reservation.settlement_currency = settlement_currency.upper()
        reservation.exchange_rate = exchange_rate
        reservation.settlement_total = convert_with_rate(
            reservation.total_price, exchange_rate, reservation.settlement_currency
        )
        await db.commit()
        logger.info(
            f"Reservation {reservation.reservation_number} settled in {reservation.settlement_currency} "
            f"at {exchange_rate}: {reservation.settlement_total}"
        )
        return await self._load(db, reservation_id)


booking_service = BookingService()
