"""
Tests for promotion eligibility: booking window, stay window, daily-rate coverage.
"""

from datetime import date

from staydesk.services.rates import promotion_matcher as pm
from staydesk.services.rates.promotion_matcher import PromotionMatcher, check_promotion
from staydesk.services.rates.types import stay_dates

from factories import CHECK_IN, CHECK_OUT, HOTEL_ID, ROOM_TYPE_ID, daily_rate, make_promotion

NIGHTS = stay_dates(CHECK_IN, CHECK_OUT)
FULL_RATES = {
    date(2026, 1, 5): daily_rate(1, date(2026, 1, 5), "100.00"),
    date(2026, 1, 6): daily_rate(1, date(2026, 1, 6), "110.00"),
}


class TestCheckPromotion:
    """Single promotion verdicts."""

    def test_eligible(self):
        reason, missing = check_promotion(make_promotion(), FULL_RATES, NIGHTS, date(2025, 12, 1))
        assert reason is None
        assert missing == []

    def test_inactive(self):
        promo = make_promotion(is_active=False)
        assert check_promotion(promo, FULL_RATES, NIGHTS, date(2025, 12, 1))[0] == pm.INACTIVE

    def test_booking_window_inclusive(self):
        promo = make_promotion()
        assert check_promotion(promo, FULL_RATES, NIGHTS, date(2025, 9, 1))[0] is None
        assert check_promotion(promo, FULL_RATES, NIGHTS, date(2026, 1, 4))[0] is None

    def test_booked_too_early_or_too_late(self):
        promo = make_promotion()
        assert check_promotion(promo, FULL_RATES, NIGHTS, date(2025, 8, 31))[0] == pm.OUTSIDE_BOOKING_WINDOW
        assert check_promotion(promo, FULL_RATES, NIGHTS, date(2026, 1, 5))[0] == pm.OUTSIDE_BOOKING_WINDOW

    def test_last_night_may_be_stay_end(self):
        # Checkout the day after stay_end is fine: the last night is stay_end itself
        promo = make_promotion(stay_end=date(2026, 1, 6))
        assert check_promotion(promo, FULL_RATES, NIGHTS, date(2025, 12, 1))[0] is None

    def test_stay_outside_window(self):
        promo = make_promotion(stay_end=date(2026, 1, 5))
        assert check_promotion(promo, FULL_RATES, NIGHTS, date(2025, 12, 1))[0] == pm.OUTSIDE_STAY_WINDOW
        promo = make_promotion(stay_start=date(2026, 1, 6))
        assert check_promotion(promo, FULL_RATES, NIGHTS, date(2025, 12, 1))[0] == pm.OUTSIDE_STAY_WINDOW

    def test_partial_daily_rates(self):
        rates = {date(2026, 1, 5): FULL_RATES[date(2026, 1, 5)]}
        reason, missing = check_promotion(make_promotion(), rates, NIGHTS, date(2025, 12, 1))
        assert reason == pm.MISSING_DAILY_RATES
        assert missing == [date(2026, 1, 6)]


class TestPromotionMatcher:
    """Matcher over a store."""

    async def test_eligible_promotion(self, store):
        verdicts = await PromotionMatcher(store).eligible(HOTEL_ID, ROOM_TYPE_ID, CHECK_IN, CHECK_OUT, date(2025, 12, 1))
        assert [v.promotion.code for v in verdicts] == ["EARLYWINTER2025"]
        assert set(verdicts[0].rates) == set(NIGHTS)

    async def test_other_room_type_not_covered(self, store):
        verdicts = await PromotionMatcher(store).eligible(HOTEL_ID, 5, CHECK_IN, CHECK_OUT, date(2025, 12, 1))
        assert verdicts == []

    async def test_partial_coverage_excludes_promotion(self, store):
        store.add_promotion(
            make_promotion(2, "HALFCOVER"),
            rates=[daily_rate(2, date(2026, 1, 5), "90.00")],
        )
        verdicts = await PromotionMatcher(store).evaluate(HOTEL_ID, ROOM_TYPE_ID, CHECK_IN, CHECK_OUT, date(2025, 12, 1))
        by_code = {v.promotion.code: v for v in verdicts}
        assert by_code["HALFCOVER"].eligible is False
        assert by_code["HALFCOVER"].reason == pm.MISSING_DAILY_RATES
        assert by_code["HALFCOVER"].missing_dates == [date(2026, 1, 6)]
        assert by_code["EARLYWINTER2025"].eligible is True

    async def test_verdicts_ordered_by_code(self, store):
        store.add_promotion(
            make_promotion(2, "AAA"),
            rates=[daily_rate(2, d, "90.00") for d in NIGHTS],
        )
        verdicts = await PromotionMatcher(store).eligible(HOTEL_ID, ROOM_TYPE_ID, CHECK_IN, CHECK_OUT, date(2025, 12, 1))
        assert [v.promotion.code for v in verdicts] == ["AAA", "EARLYWINTER2025"]

    async def test_other_hotel_promotions_ignored(self, store):
        store.add_promotion(
            make_promotion(3, "ELSEWHERE", hotel_id=2),
            rates=[daily_rate(3, d, "50.00") for d in NIGHTS],
        )
        verdicts = await PromotionMatcher(store).evaluate(HOTEL_ID, ROOM_TYPE_ID, CHECK_IN, CHECK_OUT, date(2025, 12, 1))
        assert "ELSEWHERE" not in {v.promotion.code for v in verdicts}

    async def test_no_promotions(self, empty_store):
        verdicts = await PromotionMatcher(empty_store).evaluate(
            HOTEL_ID, ROOM_TYPE_ID, CHECK_IN, CHECK_OUT, date(2025, 12, 1)
        )
        assert verdicts == []
