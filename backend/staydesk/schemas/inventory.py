from datetime import date

from pydantic import BaseModel, Field, model_validator


class InventoryBulkRequest(BaseModel):
    hotel_id: int
    room_type_id: int
    start_date: date
    end_date: date
    available_rooms: int = Field(ge=0)
    allocated_rooms: int | None = Field(default=None, ge=0)
    days_of_week: list[int] | None = None  # 0=Monday .. 6=Sunday
    notes: str | None = None

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.days_of_week and any(d < 0 or d > 6 for d in self.days_of_week):
            raise ValueError("days_of_week values must be between 0 and 6")
        return self


class InventoryHoldRequest(BaseModel):
    hotel_id: int
    room_type_id: int
    check_in: date
    check_out: date
    count: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self
