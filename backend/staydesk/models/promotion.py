"""Promotion models: promotions, their per-night rates, and benefits."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staydesk.database import Base


class Promotion(Base):
    __tablename__ = "promotions"
    __table_args__ = (
        UniqueConstraint("hotel_id", "promo_code", name="uq_promotions_hotel_code"),
        CheckConstraint("booking_end_date >= booking_start_date", name="ck_promotions_booking_dates"),
        CheckConstraint("stay_end_date >= stay_start_date", name="ck_promotions_stay_dates"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    hotel_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    promo_code: Mapped[str] = mapped_column(String(50), nullable=False)
    promo_name: Mapped[str] = mapped_column(String(200), nullable=False)
    booking_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    booking_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    stay_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    stay_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    terms_and_conditions: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    daily_rates: Mapped[list["PromotionDailyRate"]] = relationship(
        back_populates="promotion", cascade="all, delete-orphan", passive_deletes=True
    )
    benefits: Mapped[list["PromotionBenefit"]] = relationship(
        back_populates="promotion", cascade="all, delete-orphan", passive_deletes=True
    )


class PromotionDailyRate(Base):
    __tablename__ = "promotion_daily_rates"
    __table_args__ = (
        UniqueConstraint("promotion_id", "room_type_id", "stay_date", name="uq_promo_daily_rate"),
        CheckConstraint("rate_per_night >= 0", name="ck_promo_daily_rate_positive"),
        CheckConstraint("min_nights >= 1", name="ck_promo_daily_rate_min_nights"),
        CheckConstraint("max_nights IS NULL OR max_nights >= min_nights", name="ck_promo_daily_rate_nights_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    promotion_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("promotions.id", ondelete="CASCADE"), nullable=False
    )
    room_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("room_types.id", ondelete="CASCADE"), nullable=False
    )
    stay_date: Mapped[date] = mapped_column(Date, nullable=False)
    rate_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    min_nights: Mapped[int] = mapped_column(Integer, default=1)
    max_nights: Mapped[int | None] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    promotion: Mapped["Promotion"] = relationship(back_populates="daily_rates")


class PromotionBenefit(Base):
    __tablename__ = "promotion_benefits"
    __table_args__ = (
        CheckConstraint(
            "kind IN ('free_night', 'discount_percent', 'fixed_discount')", name="ck_promo_benefit_kind"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    promotion_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("promotions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind: Mapped[str] = mapped_column(String(30), nullable=False)
    # free_night
    nights_required: Mapped[int | None] = mapped_column(Integer)
    free_nights: Mapped[int | None] = mapped_column(Integer)
    # discount_percent
    percent: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    # fixed_discount
    amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    promotion: Mapped["Promotion"] = relationship(back_populates="benefits")
