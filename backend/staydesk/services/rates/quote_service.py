"""Quote service: the boundary operations of rate resolution.

get_quote                  price a stay, optionally with one named promotion
list_eligible_promotions   promotions that could price the stay
reserve_inventory          all-or-nothing hold across the stay
release_inventory          inverse of reserve_inventory
"""

import logging
from datetime import date

from staydesk.services.rates.aggregator import PriceAggregator
from staydesk.services.rates.errors import (
    IncompleteRateCoverage,
    InvalidStayError,
    PromoNotApplicable,
    RoomTypeNotFound,
)
from staydesk.services.rates.inventory_ledger import InventoryLedger
from staydesk.services.rates.ports import InventoryStore, RateStore
from staydesk.services.rates.promotion_matcher import UNKNOWN_PROMOTION, PromotionMatcher
from staydesk.services.rates.resolver import RateResolver
from staydesk.services.rates.season_calendar import SeasonCalendar
from staydesk.services.rates.types import PriceQuote, PromotionRecord, StayQuoteRequest

logger = logging.getLogger(__name__)


def validate_stay(check_in: date, check_out: date):
    if check_out <= check_in:
        raise InvalidStayError(
            "check_out must be after check_in",
            {"check_in": check_in.isoformat(), "check_out": check_out.isoformat()},
        )


class QuoteService:
    def __init__(self, rates: RateStore, inventory: InventoryStore):
        self.rates = rates
        self.matcher = PromotionMatcher(rates)
        self.resolver = RateResolver()
        self.aggregator = PriceAggregator()
        self.ledger = InventoryLedger(inventory)

    async def get_quote(self, request: StayQuoteRequest) -> PriceQuote:
        validate_stay(request.check_in, request.check_out)
        if min(request.adult_count, request.child_count, request.infant_count) < 0:
            raise InvalidStayError("Guest counts must not be negative")

        room_type = await self.rates.get_room_type(request.room_type_id)
        if room_type is None:
            raise RoomTypeNotFound(request.room_type_id)

        verdicts = await self.matcher.evaluate(
            room_type.hotel_id, room_type.id, request.check_in, request.check_out, request.today
        )
        eligible_codes = [v.promotion.code for v in verdicts if v.eligible]

        selected = None
        if request.promo_code:
            selected = next((v for v in verdicts if v.promotion.code == request.promo_code), None)
            if selected is None:
                raise PromoNotApplicable(request.promo_code, UNKNOWN_PROMOTION)
            if not selected.eligible:
                details = {}
                if selected.missing_dates:
                    details["missing_dates"] = [d.isoformat() for d in selected.missing_dates]
                raise PromoNotApplicable(request.promo_code, selected.reason, details)

        calendar = SeasonCalendar(await self.rates.list_seasons(room_type.hotel_id))
        season_rates = await self.rates.season_rates(room_type.id)
        dates = request.dates
        try:
            nightly = self.resolver.resolve(
                room_type.id,
                dates,
                calendar,
                season_rates,
                promotion=selected.promotion if selected else None,
                promo_rates=selected.rates if selected else None,
            )
        except IncompleteRateCoverage as e:
            logger.warning(
                f"Rate coverage gap room_type={room_type.id} "
                f"missing={[d.isoformat() for d in e.missing_dates]}"
            )
            raise

        remaining = await self.ledger.remaining_rooms(room_type.hotel_id, room_type.id, dates)
        quote = self.aggregator.aggregate(
            request,
            room_type,
            nightly,
            benefits=list(selected.promotion.benefits) if selected else None,
            promo_code=selected.promotion.code if selected else None,
            eligible_codes=eligible_codes,
            remaining_rooms=remaining,
        )
        logger.info(
            f"Quote room_type={room_type.id} {request.check_in}..{request.check_out} "
            f"promo={quote.promo_code} total={quote.grand_total} {quote.currency}"
        )
        return quote

    async def list_eligible_promotions(
        self,
        hotel_id: int,
        room_type_id: int,
        check_in: date,
        check_out: date,
        today: date,
    ) -> list[PromotionRecord]:
        validate_stay(check_in, check_out)
        verdicts = await self.matcher.eligible(hotel_id, room_type_id, check_in, check_out, today)
        return [v.promotion for v in verdicts]

    async def reserve_inventory(self, hotel_id: int, room_type_id: int, dates: list[date], count: int) -> None:
        await self.ledger.check_and_reserve(hotel_id, room_type_id, dates, count)

    async def release_inventory(self, hotel_id: int, room_type_id: int, dates: list[date], count: int) -> None:
        await self.ledger.release(hotel_id, room_type_id, dates, count)
