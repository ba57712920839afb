from datetime import date

from pydantic import BaseModel, Field, model_validator


class StayFields(BaseModel):
    check_in: date
    check_out: date

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class QuoteRequest(StayFields):
    room_type_id: int
    adult_count: int = Field(default=2, ge=0)
    child_count: int = Field(default=0, ge=0)
    infant_count: int = Field(default=0, ge=0)
    breakfast: bool = False
    extra_bed: bool = False
    baby_cot: bool = False
    promo_code: str | None = None
    booking_date: date | None = None  # defaults to today in the business timezone
