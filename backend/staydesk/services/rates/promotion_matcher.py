"""Promotion matcher: decides which promotions may price a given stay.

A promotion is eligible only when all of these hold:
    - it is active
    - the booking date falls inside its booking window
    - its stay window contains every night of the stay
    - it has a daily rate for the room type on every night

Partial daily-rate coverage disqualifies the promotion outright; it is never
mixed with season rates inside one stay.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from staydesk.services.rates.ports import RateStore
from staydesk.services.rates.types import DailyRateRecord, PromotionRecord, stay_dates

logger = logging.getLogger(__name__)

# Verdict reasons
INACTIVE = "INACTIVE"
OUTSIDE_BOOKING_WINDOW = "OUTSIDE_BOOKING_WINDOW"
OUTSIDE_STAY_WINDOW = "OUTSIDE_STAY_WINDOW"
MISSING_DAILY_RATES = "MISSING_DAILY_RATES"
UNKNOWN_PROMOTION = "UNKNOWN_PROMOTION"


@dataclass
class PromotionVerdict:
    promotion: PromotionRecord
    eligible: bool
    reason: str | None = None
    rates: dict[date, DailyRateRecord] = field(default_factory=dict)
    missing_dates: list[date] = field(default_factory=list)


def check_promotion(
    promotion: PromotionRecord,
    rates: dict[date, DailyRateRecord],
    nights: list[date],
    today: date,
) -> tuple[str | None, list[date]]:
    """Return (reason, missing_dates). A None reason means eligible."""
    if not promotion.is_active:
        return INACTIVE, []
    if not promotion.booking_start <= today <= promotion.booking_end:
        return OUTSIDE_BOOKING_WINDOW, []
    if not nights:
        return OUTSIDE_STAY_WINDOW, []
    last_night = nights[-1]
    if promotion.stay_start > nights[0] or promotion.stay_end < last_night:
        return OUTSIDE_STAY_WINDOW, []
    missing = [d for d in nights if d not in rates]
    if missing:
        return MISSING_DAILY_RATES, missing
    return None, []


class PromotionMatcher:
    def __init__(self, store: RateStore):
        self.store = store

    async def evaluate(
        self,
        hotel_id: int,
        room_type_id: int,
        check_in: date,
        check_out: date,
        today: date,
    ) -> list[PromotionVerdict]:
        """One verdict per promotion of the hotel, ordered by promo code."""
        promotions = await self.store.list_promotions(hotel_id)
        if not promotions:
            return []

        nights = stay_dates(check_in, check_out)
        daily = await self.store.daily_rates([p.id for p in promotions], room_type_id, check_in, check_out)
        by_promotion: dict[int, dict[date, DailyRateRecord]] = {}
        for r in daily:
            by_promotion.setdefault(r.promotion_id, {})[r.stay_date] = r

        verdicts = []
        for promo in sorted(promotions, key=lambda p: p.code):
            rates = by_promotion.get(promo.id, {})
            reason, missing = check_promotion(promo, rates, nights, today)
            verdicts.append(
                PromotionVerdict(
                    promotion=promo,
                    eligible=reason is None,
                    reason=reason,
                    rates=rates if reason is None else {},
                    missing_dates=missing,
                )
            )
        eligible_count = sum(1 for v in verdicts if v.eligible)
        logger.debug(
            f"Promotions for hotel {hotel_id} room type {room_type_id} "
            f"{check_in}..{check_out - timedelta(days=1)}: {eligible_count}/{len(verdicts)} eligible"
        )
        return verdicts

    async def eligible(
        self,
        hotel_id: int,
        room_type_id: int,
        check_in: date,
        check_out: date,
        today: date,
    ) -> list[PromotionVerdict]:
        verdicts = await self.evaluate(hotel_id, room_type_id, check_in, check_out, today)
        return [v for v in verdicts if v.eligible]
