"""
Tests for the quote service boundary operations.
"""

from datetime import date
from decimal import Decimal

import pytest

from staydesk.services.rates.errors import (
    IncompleteRateCoverage,
    InsufficientInventory,
    InvalidStayError,
    MinNightsNotMet,
    PromoNotApplicable,
    RoomTypeNotFound,
)
from staydesk.services.rates.quote_service import QuoteService
from staydesk.services.rates.types import BenefitKind, BenefitRecord, SourceKind, stay_dates

from factories import (
    BOOKING_DATE,
    CHECK_IN,
    CHECK_OUT,
    HOTEL_ID,
    OTHER_ROOM_TYPE_ID,
    ROOM_TYPE_ID,
    daily_rate,
    make_promotion,
    make_season,
    stay_request,
)


class TestGetQuote:
    """Pricing a stay end to end over the in-memory store."""

    async def test_named_promotion_with_breakfast(self, quote_service):
        quote = await quote_service.get_quote(stay_request(breakfast=True, promo_code="EARLYWINTER2025"))
        assert [n.rate for n in quote.nightly_rates] == [Decimal("100.00"), Decimal("110.00")]
        assert all(n.source == SourceKind.PROMOTION for n in quote.nightly_rates)
        assert quote.extras["breakfast"] == Decimal("60.00")
        assert quote.grand_total == Decimal("270.00")
        assert quote.promo_code == "EARLYWINTER2025"
        assert quote.remaining_rooms == 5

    async def test_without_promo_code_uses_season_rates(self, quote_service):
        quote = await quote_service.get_quote(stay_request(breakfast=True))
        assert all(n.source == SourceKind.SEASON for n in quote.nightly_rates)
        assert quote.room_subtotal == Decimal("300.00")
        assert quote.grand_total == Decimal("360.00")
        assert quote.promo_code is None
        assert quote.eligible_promotions == ("EARLYWINTER2025",)

    async def test_promotion_benefits_applied(self, store):
        nights = stay_dates(date(2026, 1, 5), date(2026, 1, 12))
        store.add_promotion(
            make_promotion(
                7,
                "STAY7",
                benefits=(BenefitRecord(kind=BenefitKind.FREE_NIGHT, nights_required=7, free_nights=1),),
            ),
            rates=[daily_rate(7, d, "100.00") for d in nights],
        )
        quote = await QuoteService(store, store).get_quote(
            stay_request(check_out=date(2026, 1, 12), promo_code="STAY7")
        )
        assert quote.room_subtotal == Decimal("700.00")
        assert quote.discount_total == Decimal("100.00")
        assert quote.grand_total == Decimal("600.00")

    async def test_unknown_promo_code(self, quote_service):
        with pytest.raises(PromoNotApplicable) as exc_info:
            await quote_service.get_quote(stay_request(promo_code="NOPE"))
        assert exc_info.value.reason == "UNKNOWN_PROMOTION"
        assert exc_info.value.code == "PROMO_NOT_APPLICABLE"

    async def test_promo_code_booked_too_late(self, quote_service):
        with pytest.raises(PromoNotApplicable) as exc_info:
            await quote_service.get_quote(stay_request(today=date(2026, 1, 5), promo_code="EARLYWINTER2025"))
        assert exc_info.value.reason == "OUTSIDE_BOOKING_WINDOW"

    async def test_partial_coverage_promotion(self, store):
        store.add_promotion(make_promotion(2, "HALFCOVER"), rates=[daily_rate(2, CHECK_IN, "90.00")])
        service = QuoteService(store, store)
        with pytest.raises(PromoNotApplicable) as exc_info:
            await service.get_quote(stay_request(promo_code="HALFCOVER"))
        assert exc_info.value.reason == "MISSING_DAILY_RATES"
        assert exc_info.value.details["missing_dates"] == ["2026-01-06"]

        quote = await service.get_quote(stay_request())
        assert quote.eligible_promotions == ("EARLYWINTER2025",)

    async def test_season_gap_fails_whole_quote(self, empty_store):
        empty_store.add_season(
            make_season(20, date(2026, 1, 1), date(2026, 1, 5)), rates={ROOM_TYPE_ID: Decimal("150.00")}
        )
        with pytest.raises(IncompleteRateCoverage) as exc_info:
            await QuoteService(empty_store, empty_store).get_quote(stay_request())
        assert exc_info.value.details["missing_dates"] == ["2026-01-06"]

    async def test_promotion_min_nights(self, store):
        store.add_promotion(
            make_promotion(3, "LONGSTAY"),
            rates=[daily_rate(3, d, "80.00", min_nights=3) for d in stay_dates(CHECK_IN, CHECK_OUT)],
        )
        with pytest.raises(MinNightsNotMet):
            await QuoteService(store, store).get_quote(stay_request(promo_code="LONGSTAY"))

    async def test_other_room_type_has_no_promotion(self, quote_service):
        quote = await quote_service.get_quote(stay_request(room_type_id=OTHER_ROOM_TYPE_ID))
        assert quote.room_subtotal == Decimal("240.00")
        assert quote.eligible_promotions == ()
        assert quote.remaining_rooms is None

    async def test_unknown_room_type(self, quote_service):
        with pytest.raises(RoomTypeNotFound):
            await quote_service.get_quote(stay_request(room_type_id=999))

    async def test_check_out_not_after_check_in(self, quote_service):
        with pytest.raises(InvalidStayError):
            await quote_service.get_quote(stay_request(check_out=CHECK_IN))

    async def test_negative_guest_count(self, quote_service):
        with pytest.raises(InvalidStayError):
            await quote_service.get_quote(stay_request(child_count=-1))


class TestListEligiblePromotions:
    async def test_lists_eligible(self, quote_service):
        promos = await quote_service.list_eligible_promotions(
            HOTEL_ID, ROOM_TYPE_ID, CHECK_IN, CHECK_OUT, BOOKING_DATE
        )
        assert [p.code for p in promos] == ["EARLYWINTER2025"]

    async def test_outside_booking_window(self, quote_service):
        promos = await quote_service.list_eligible_promotions(
            HOTEL_ID, ROOM_TYPE_ID, CHECK_IN, CHECK_OUT, date(2026, 2, 1)
        )
        assert promos == []

    async def test_invalid_stay(self, quote_service):
        with pytest.raises(InvalidStayError):
            await quote_service.list_eligible_promotions(HOTEL_ID, ROOM_TYPE_ID, CHECK_OUT, CHECK_IN, BOOKING_DATE)


class TestInventoryOperations:
    async def test_reserve_lowers_quoted_remaining(self, quote_service):
        nights = stay_dates(CHECK_IN, CHECK_OUT)
        await quote_service.reserve_inventory(HOTEL_ID, ROOM_TYPE_ID, nights, 4)
        quote = await quote_service.get_quote(stay_request())
        assert quote.remaining_rooms == 1

        with pytest.raises(InsufficientInventory):
            await quote_service.reserve_inventory(HOTEL_ID, ROOM_TYPE_ID, nights, 2)

        await quote_service.release_inventory(HOTEL_ID, ROOM_TYPE_ID, nights, 4)
        quote = await quote_service.get_quote(stay_request())
        assert quote.remaining_rooms == 5
