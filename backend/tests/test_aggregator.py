"""
Tests for price aggregation: subtotal, benefits and extras.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from staydesk.services.rates.aggregator import PriceAggregator
from staydesk.services.rates.types import (
    BenefitKind,
    BenefitRecord,
    NightlyRate,
    SeasonLabel,
    SourceKind,
)

from factories import CHECK_IN, make_room_type, stay_request


def promo_nights(*rates: str) -> list[NightlyRate]:
    return [
        NightlyRate(
            date=CHECK_IN + timedelta(days=i),
            rate=Decimal(rate),
            source=SourceKind.PROMOTION,
            promo_code="EARLYWINTER2025",
        )
        for i, rate in enumerate(rates)
    ]


def season_nights(*rates: str) -> list[NightlyRate]:
    return [
        NightlyRate(
            date=CHECK_IN + timedelta(days=i),
            rate=Decimal(rate),
            source=SourceKind.SEASON,
            season_label=SeasonLabel.PEAK,
        )
        for i, rate in enumerate(rates)
    ]


FREE_NIGHT = BenefitRecord(kind=BenefitKind.FREE_NIGHT, nights_required=7, free_nights=1)
TEN_PERCENT = BenefitRecord(kind=BenefitKind.DISCOUNT_PERCENT, percent=Decimal("10"))


class TestAggregate:
    """Quote totals."""

    def test_promotion_with_breakfast(self):
        quote = PriceAggregator().aggregate(
            stay_request(breakfast=True, promo_code="EARLYWINTER2025"),
            make_room_type(),
            promo_nights("100.00", "110.00"),
            promo_code="EARLYWINTER2025",
        )
        assert quote.room_subtotal == Decimal("210.00")
        assert quote.extras == {"breakfast": Decimal("60.00")}
        assert quote.grand_total == Decimal("270.00")
        assert quote.currency == "USD"

    def test_season_stay_without_extras(self):
        quote = PriceAggregator().aggregate(stay_request(), make_room_type(), season_nights("150.00", "150.00"))
        assert quote.grand_total == Decimal("300.00")
        assert quote.discounts == ()
        assert quote.extras_total == Decimal("0.00")

    def test_benefits_ignored_without_promo_code(self):
        quote = PriceAggregator().aggregate(
            stay_request(), make_room_type(), season_nights("150.00", "150.00"), benefits=[TEN_PERCENT]
        )
        assert quote.discount_total == Decimal("0.00")

    def test_discounts_reduce_grand_total(self):
        quote = PriceAggregator().aggregate(
            stay_request(breakfast=True),
            make_room_type(),
            promo_nights("100.00", "110.00"),
            benefits=[TEN_PERCENT],
            promo_code="EARLYWINTER2025",
        )
        assert quote.discount_total == Decimal("21.00")
        assert quote.grand_total == Decimal("249.00")

    def test_to_dict_renders_money_as_strings(self):
        quote = PriceAggregator().aggregate(
            stay_request(),
            make_room_type(),
            promo_nights("100.00", "110.00"),
            promo_code="EARLYWINTER2025",
            eligible_codes=["EARLYWINTER2025"],
            remaining_rooms=5,
        )
        data = quote.to_dict()
        assert data["grand_total"] == "210.00"
        assert data["nightly_rates"][0] == {
            "date": "2026-01-05",
            "rate": "100.00",
            "source": "promotion",
            "promo_code": "EARLYWINTER2025",
            "season_label": None,
        }
        assert data["eligible_promotions"] == ["EARLYWINTER2025"]
        assert data["remaining_rooms"] == 5


class TestBenefits:
    """Benefit application order and caps."""

    def test_free_night_waives_cheapest_promotion_night(self):
        nightly = promo_nights("100", "100", "90", "100", "110", "100", "100")
        lines = PriceAggregator().apply_benefits(nightly, [FREE_NIGHT])
        assert len(lines) == 1
        assert lines[0].kind == BenefitKind.FREE_NIGHT
        assert lines[0].amount == Decimal("90.00")

    def test_free_night_repeats_per_block(self):
        nightly = promo_nights(*["100"] * 14)
        lines = PriceAggregator().apply_benefits(nightly, [FREE_NIGHT])
        assert lines[0].amount == Decimal("200.00")

    def test_free_night_needs_enough_nights(self):
        lines = PriceAggregator().apply_benefits(promo_nights(*["100"] * 6), [FREE_NIGHT])
        assert lines == []

    def test_free_night_never_waives_season_nights(self):
        lines = PriceAggregator().apply_benefits(season_nights(*["100"] * 7), [FREE_NIGHT])
        assert lines == []

    def test_percent_applies_after_free_night(self):
        nightly = promo_nights(*["100"] * 7)
        lines = PriceAggregator().apply_benefits(nightly, [TEN_PERCENT, FREE_NIGHT])
        assert [line.kind for line in lines] == [BenefitKind.FREE_NIGHT, BenefitKind.DISCOUNT_PERCENT]
        assert lines[1].amount == Decimal("60.00")

    def test_percent_rounds_half_up(self):
        lines = PriceAggregator().apply_benefits(
            promo_nights("33.35"), [BenefitRecord(kind=BenefitKind.DISCOUNT_PERCENT, percent=Decimal("10"))]
        )
        assert lines[0].amount == Decimal("3.34")

    def test_fixed_discount_capped_at_remaining(self):
        fixed = BenefitRecord(kind=BenefitKind.FIXED_DISCOUNT, amount=Decimal("1000"))
        nightly = promo_nights(*["100"] * 7)
        lines = PriceAggregator().apply_benefits(nightly, [fixed, TEN_PERCENT, FREE_NIGHT])
        assert [line.amount for line in lines] == [Decimal("100.00"), Decimal("60.00"), Decimal("540.00")]
        assert sum(line.amount for line in lines) == Decimal("700.00")

    def test_default_descriptions(self):
        lines = PriceAggregator().apply_benefits(promo_nights(*["100"] * 7), [FREE_NIGHT, TEN_PERCENT])
        assert lines[0].description == "Stay 7, 1 night(s) free"
        assert lines[1].description == "10% off"

    def test_invalid_benefits_rejected(self):
        with pytest.raises(ValueError):
            BenefitRecord(kind=BenefitKind.FREE_NIGHT, nights_required=3, free_nights=4)
        with pytest.raises(ValueError):
            BenefitRecord(kind=BenefitKind.DISCOUNT_PERCENT, percent=Decimal("0"))
        with pytest.raises(ValueError):
            BenefitRecord(kind=BenefitKind.FIXED_DISCOUNT, amount=Decimal("-5"))


class TestExtras:
    """Breakfast per person per night, beds and cots per stay."""

    def test_breakfast_by_guest_type(self):
        extras = PriceAggregator().extras(make_room_type(), stay_request(breakfast=True, child_count=1, infant_count=1))
        assert extras == {"breakfast": Decimal("76.00")}

    def test_extra_bed_and_cot(self):
        extras = PriceAggregator().extras(make_room_type(), stay_request(extra_bed=True, baby_cot=True))
        assert extras == {"extra_bed": Decimal("30.00"), "baby_cot": Decimal("10.00")}

    def test_nothing_requested(self):
        assert PriceAggregator().extras(make_room_type(), stay_request()) == {}
