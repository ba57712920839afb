"""Rate resolution errors. Each carries a stable code and structured details."""

from datetime import date


class RateError(Exception):
    code = "RATE_ERROR"
    status_code = 422

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class IncompleteRateCoverage(RateError):
    code = "INCOMPLETE_RATE_COVERAGE"

    def __init__(self, room_type_id: int, missing_dates: list[date]):
        self.missing_dates = missing_dates
        super().__init__(
            f"No rate for room type {room_type_id} on {len(missing_dates)} night(s)",
            {"room_type_id": room_type_id, "missing_dates": [d.isoformat() for d in missing_dates]},
        )


class MinNightsNotMet(RateError):
    code = "MIN_NIGHTS_NOT_MET"

    def __init__(self, required: int, actual: int, promo_code: str | None = None):
        self.required = required
        self.actual = actual
        super().__init__(
            f"Stay of {actual} night(s) is below the {required}-night minimum",
            {"required": required, "actual": actual, "promo_code": promo_code},
        )


class MaxNightsExceeded(RateError):
    code = "MAX_NIGHTS_EXCEEDED"

    def __init__(self, allowed: int, actual: int, promo_code: str | None = None):
        self.allowed = allowed
        self.actual = actual
        super().__init__(
            f"Stay of {actual} night(s) exceeds the {allowed}-night maximum",
            {"allowed": allowed, "actual": actual, "promo_code": promo_code},
        )


class PromoNotApplicable(RateError):
    code = "PROMO_NOT_APPLICABLE"

    def __init__(self, promo_code: str, reason: str, details: dict | None = None):
        self.promo_code = promo_code
        self.reason = reason
        super().__init__(
            f"Promotion {promo_code} cannot be applied: {reason}",
            {"promo_code": promo_code, "reason": reason, **(details or {})},
        )


class InsufficientInventory(RateError):
    code = "INSUFFICIENT_INVENTORY"
    status_code = 409

    def __init__(self, room_type_id: int, requested: int, short: dict[date, int]):
        self.short_dates = sorted(short)
        super().__init__(
            f"Not enough rooms of type {room_type_id} for {len(short)} night(s)",
            {
                "room_type_id": room_type_id,
                "requested": requested,
                "short_dates": [{"date": d.isoformat(), "remaining": short[d]} for d in self.short_dates],
            },
        )


class SeasonOverlapError(RateError):
    code = "SEASON_OVERLAP"
    status_code = 409

    def __init__(self, conflicts: list):
        self.conflicts = conflicts
        super().__init__(
            "Season dates overlap an existing season",
            {
                "conflicts": [
                    {
                        "id": s.id,
                        "name": s.name,
                        "start_date": s.start_date.isoformat(),
                        "end_date": s.end_date.isoformat(),
                    }
                    for s in conflicts
                ]
            },
        )


class InventoryConfigError(RateError):
    code = "INVALID_INVENTORY"


class InvalidStayError(RateError):
    code = "INVALID_STAY"


class RoomTypeNotFound(RateError):
    code = "ROOM_TYPE_NOT_FOUND"
    status_code = 404

    def __init__(self, room_type_id: int):
        super().__init__(f"Room type {room_type_id} not found", {"room_type_id": room_type_id})
