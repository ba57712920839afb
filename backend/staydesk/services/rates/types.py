"""Value types shared by the rate resolution pipeline."""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

CENT = Decimal("0.01")


def money(value) -> Decimal:
    """Quantize to cents, half-up."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def stay_dates(check_in: date, check_out: date) -> list[date]:
    """Nights of a stay: every date in [check_in, check_out)."""
    return [check_in + timedelta(days=i) for i in range((check_out - check_in).days)]


class SourceKind(str, Enum):
    PROMOTION = "promotion"
    SEASON = "season"
    NONE = "none"


class SeasonLabel(str, Enum):
    LOW = "low"
    SHOULDER = "shoulder"
    PEAK = "peak"
    SUPER_PEAK = "super_peak"


class BenefitKind(str, Enum):
    FREE_NIGHT = "free_night"
    DISCOUNT_PERCENT = "discount_percent"
    FIXED_DISCOUNT = "fixed_discount"


# Fixed application order of benefit kinds
BENEFIT_ORDER = (BenefitKind.FREE_NIGHT, BenefitKind.DISCOUNT_PERCENT, BenefitKind.FIXED_DISCOUNT)


class InventoryState(str, Enum):
    OPEN = "OPEN"
    FULL = "FULL"


@dataclass(frozen=True)
class RoomTypeRecord:
    id: int
    hotel_id: int
    code: str
    name: str
    currency: str = "USD"
    breakfast_adult: Decimal = Decimal("0")
    breakfast_child: Decimal = Decimal("0")
    breakfast_infant: Decimal = Decimal("0")
    extra_bed_rate: Decimal = Decimal("0")
    baby_cot_rate: Decimal = Decimal("0")


@dataclass(frozen=True)
class SeasonRecord:
    id: int
    hotel_id: int
    name: str
    label: SeasonLabel
    start_date: date
    end_date: date  # inclusive
    is_active: bool = True

    def covers(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "hotel_id": self.hotel_id,
            "name": self.name,
            "label": self.label.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SeasonRecord":
        return cls(
            id=data["id"],
            hotel_id=data["hotel_id"],
            name=data["name"],
            label=SeasonLabel(data["label"]),
            start_date=date.fromisoformat(data["start_date"]),
            end_date=date.fromisoformat(data["end_date"]),
            is_active=data.get("is_active", True),
        )


@dataclass(frozen=True)
class BenefitRecord:
    """One tagged promotion benefit. Only the fields of its kind are set."""

    kind: BenefitKind
    nights_required: int | None = None
    free_nights: int | None = None
    percent: Decimal | None = None
    amount: Decimal | None = None
    description: str | None = None

    def __post_init__(self):
        if self.kind == BenefitKind.FREE_NIGHT:
            if not self.nights_required or self.nights_required < 1:
                raise ValueError("free_night benefit needs nights_required >= 1")
            if not self.free_nights or not 1 <= self.free_nights <= self.nights_required:
                raise ValueError("free_night benefit needs 1 <= free_nights <= nights_required")
        elif self.kind == BenefitKind.DISCOUNT_PERCENT:
            if self.percent is None or not Decimal("0") < self.percent <= Decimal("100"):
                raise ValueError("discount_percent benefit needs percent in (0, 100]")
        elif self.kind == BenefitKind.FIXED_DISCOUNT:
            if self.amount is None or self.amount <= 0:
                raise ValueError("fixed_discount benefit needs amount > 0")


@dataclass(frozen=True)
class PromotionRecord:
    id: int
    hotel_id: int
    code: str
    name: str
    booking_start: date
    booking_end: date
    stay_start: date
    stay_end: date
    is_active: bool = True
    benefits: tuple[BenefitRecord, ...] = ()
    description: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "hotel_id": self.hotel_id,
            "promo_code": self.code,
            "promo_name": self.name,
            "booking_start_date": self.booking_start.isoformat(),
            "booking_end_date": self.booking_end.isoformat(),
            "stay_start_date": self.stay_start.isoformat(),
            "stay_end_date": self.stay_end.isoformat(),
            "is_active": self.is_active,
            "description": self.description,
            "benefits": [
                {
                    "kind": b.kind.value,
                    "nights_required": b.nights_required,
                    "free_nights": b.free_nights,
                    "percent": str(b.percent) if b.percent is not None else None,
                    "amount": str(b.amount) if b.amount is not None else None,
                    "description": b.description,
                }
                for b in self.benefits
            ],
        }


@dataclass(frozen=True)
class DailyRateRecord:
    promotion_id: int
    room_type_id: int
    stay_date: date
    rate: Decimal
    min_nights: int = 1
    max_nights: int | None = None


@dataclass(frozen=True)
class StayQuoteRequest:
    room_type_id: int
    check_in: date  # inclusive
    check_out: date  # exclusive
    today: date
    adult_count: int = 2
    child_count: int = 0
    infant_count: int = 0
    breakfast: bool = False
    extra_bed: bool = False
    baby_cot: bool = False
    promo_code: str | None = None

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def dates(self) -> list[date]:
        return stay_dates(self.check_in, self.check_out)


@dataclass(frozen=True)
class NightlyRate:
    date: date
    rate: Decimal
    source: SourceKind
    promo_code: str | None = None
    season_label: SeasonLabel | None = None

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "rate": str(self.rate),
            "source": self.source.value,
            "promo_code": self.promo_code,
            "season_label": self.season_label.value if self.season_label else None,
        }


@dataclass(frozen=True)
class DiscountLine:
    kind: BenefitKind
    description: str
    amount: Decimal

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "description": self.description, "amount": str(self.amount)}


@dataclass(frozen=True)
class PriceQuote:
    room_type_id: int
    hotel_id: int
    check_in: date
    check_out: date
    nights: int
    nightly_rates: tuple[NightlyRate, ...]
    room_subtotal: Decimal
    discounts: tuple[DiscountLine, ...]
    discount_total: Decimal
    extras: dict[str, Decimal]
    extras_total: Decimal
    grand_total: Decimal
    currency: str
    promo_code: str | None = None
    eligible_promotions: tuple[str, ...] = ()
    remaining_rooms: int | None = None

    def to_dict(self) -> dict:
        return {
            "room_type_id": self.room_type_id,
            "hotel_id": self.hotel_id,
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
            "nights": self.nights,
            "nightly_rates": [n.to_dict() for n in self.nightly_rates],
            "room_subtotal": str(self.room_subtotal),
            "discounts": [d.to_dict() for d in self.discounts],
            "discount_total": str(self.discount_total),
            "extras": {k: str(v) for k, v in self.extras.items()},
            "extras_total": str(self.extras_total),
            "grand_total": str(self.grand_total),
            "currency": self.currency,
            "promo_code": self.promo_code,
            "eligible_promotions": list(self.eligible_promotions),
            "remaining_rooms": self.remaining_rooms,
        }


@dataclass
class InventoryRecord:
    """Mutable per-date inventory counters for one room type."""

    hotel_id: int
    room_type_id: int
    date: date
    available: int = 0
    allocated: int | None = None  # channel ceiling, None = no ceiling
    reserved: int = 0
    notes: str | None = None

    @property
    def capacity(self) -> int:
        return self.allocated if self.allocated is not None else self.available

    @property
    def remaining(self) -> int:
        return max(self.capacity - self.reserved, 0)

    @property
    def state(self) -> InventoryState:
        return InventoryState.FULL if self.reserved >= self.capacity else InventoryState.OPEN

    def to_dict(self) -> dict:
        return {
            "hotel_id": self.hotel_id,
            "room_type_id": self.room_type_id,
            "date": self.date.isoformat(),
            "available_rooms": self.available,
            "allocated_rooms": self.allocated,
            "reserved_rooms": self.reserved,
            "capacity": self.capacity,
            "remaining_rooms": self.remaining,
            "state": self.state.value,
            "notes": self.notes,
        }
