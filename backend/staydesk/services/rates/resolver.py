"""Rate resolver: picks the nightly rate for each night of a stay."""

from datetime import date
from decimal import Decimal

from staydesk.services.rates.errors import IncompleteRateCoverage, MaxNightsExceeded, MinNightsNotMet
from staydesk.services.rates.season_calendar import SeasonCalendar
from staydesk.services.rates.types import DailyRateRecord, NightlyRate, PromotionRecord, SourceKind, money


class RateResolver:
    """Promotion daily rate first, season base rate second, otherwise unresolved."""

    def resolve(
        self,
        room_type_id: int,
        nights: list[date],
        calendar: SeasonCalendar,
        season_rates: dict[int, Decimal],
        promotion: PromotionRecord | None = None,
        promo_rates: dict[date, DailyRateRecord] | None = None,
    ) -> list[NightlyRate]:
        promo_rates = promo_rates or {}
        resolved: list[NightlyRate] = []
        used_promo: list[DailyRateRecord] = []
        missing: list[date] = []

        for d in nights:
            daily = promo_rates.get(d) if promotion else None
            if daily is not None:
                season = calendar.season_for(d)
                resolved.append(
                    NightlyRate(
                        date=d,
                        rate=money(daily.rate),
                        source=SourceKind.PROMOTION,
                        promo_code=promotion.code,
                        season_label=season.label if season else None,
                    )
                )
                used_promo.append(daily)
                continue

            season = calendar.season_for(d)
            base = season_rates.get(season.id) if season else None
            if base is None:
                missing.append(d)
                continue
            resolved.append(
                NightlyRate(date=d, rate=money(base), source=SourceKind.SEASON, season_label=season.label)
            )

        if missing:
            raise IncompleteRateCoverage(room_type_id, missing)

        if used_promo:
            self._check_length(len(nights), used_promo, promotion.code)
        return resolved

    def _check_length(self, stay_nights: int, used: list[DailyRateRecord], promo_code: str):
        required = max(r.min_nights for r in used)
        if stay_nights < required:
            raise MinNightsNotMet(required, stay_nights, promo_code)
        caps = [r.max_nights for r in used if r.max_nights is not None]
        if caps and stay_nights > min(caps):
            raise MaxNightsExceeded(min(caps), stay_nights, promo_code)
