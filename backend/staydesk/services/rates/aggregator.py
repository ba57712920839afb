"""Price aggregator: nightly rates + benefits + extras -> quote totals."""

from decimal import Decimal

from staydesk.services.rates.types import (
    BENEFIT_ORDER,
    BenefitKind,
    BenefitRecord,
    DiscountLine,
    NightlyRate,
    PriceQuote,
    RoomTypeRecord,
    SourceKind,
    StayQuoteRequest,
    money,
)


ZERO = Decimal("0.00")


class PriceAggregator:
    def apply_benefits(self, nightly: list[NightlyRate], benefits: list[BenefitRecord]) -> list[DiscountLine]:
        """Discount lines in fixed kind order; their sum never exceeds the room subtotal."""
        remaining = money(sum((n.rate for n in nightly), ZERO))
        promo_nights = sorted(n.rate for n in nightly if n.source == SourceKind.PROMOTION)
        lines: list[DiscountLine] = []

        for kind in BENEFIT_ORDER:
            for benefit in (b for b in benefits if b.kind == kind):
                if remaining <= 0:
                    break
                if kind == BenefitKind.FREE_NIGHT:
                    waived_count = (len(nightly) // benefit.nights_required) * benefit.free_nights
                    waived = promo_nights[:waived_count]
                    promo_nights = promo_nights[waived_count:]
                    amount = sum(waived, ZERO)
                    label = benefit.description or (
                        f"Stay {benefit.nights_required}, {benefit.free_nights} night(s) free"
                    )
                elif kind == BenefitKind.DISCOUNT_PERCENT:
                    amount = remaining * benefit.percent / Decimal("100")
                    label = benefit.description or f"{benefit.percent.normalize():f}% off"
                else:
                    amount = benefit.amount
                    label = benefit.description or f"{money(benefit.amount)} off"

                amount = min(money(amount), remaining)
                if amount <= 0:
                    continue
                remaining -= amount
                lines.append(DiscountLine(kind=kind, description=label, amount=amount))
        return lines

    def extras(self, room_type: RoomTypeRecord, request: StayQuoteRequest) -> dict[str, Decimal]:
        result: dict[str, Decimal] = {}
        if request.breakfast:
            per_night = (
                request.adult_count * room_type.breakfast_adult
                + request.child_count * room_type.breakfast_child
                + request.infant_count * room_type.breakfast_infant
            )
            result["breakfast"] = money(per_night * request.nights)
        if request.extra_bed:
            result["extra_bed"] = money(room_type.extra_bed_rate)
        if request.baby_cot:
            result["baby_cot"] = money(room_type.baby_cot_rate)
        return result

    def aggregate(
        self,
        request: StayQuoteRequest,
        room_type: RoomTypeRecord,
        nightly: list[NightlyRate],
        benefits: list[BenefitRecord] | None = None,
        promo_code: str | None = None,
        eligible_codes: list[str] | None = None,
        remaining_rooms: int | None = None,
    ) -> PriceQuote:
        room_subtotal = money(sum((n.rate for n in nightly), ZERO))
        discounts = self.apply_benefits(nightly, benefits or []) if promo_code else []
        discount_total = money(sum((d.amount for d in discounts), ZERO))
        extras = self.extras(room_type, request)
        extras_total = money(sum(extras.values(), ZERO))

        return PriceQuote(
            room_type_id=room_type.id,
            hotel_id=room_type.hotel_id,
            check_in=request.check_in,
            check_out=request.check_out,
            nights=request.nights,
            nightly_rates=tuple(nightly),
            room_subtotal=room_subtotal,
            discounts=tuple(discounts),
            discount_total=discount_total,
            extras=extras,
            extras_total=extras_total,
            grand_total=money(room_subtotal - discount_total + extras_total),
            currency=room_type.currency,
            promo_code=promo_code,
            eligible_promotions=tuple(eligible_codes or ()),
            remaining_rooms=remaining_rooms,
        )
