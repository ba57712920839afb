"""Reservation models: confirmed bookings and their per-room line snapshots."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staydesk.database import Base


class Reservation(Base):
    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    reservation_number: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    hotel_id: Mapped[int] = mapped_column(Integer, ForeignKey("hotels.id"), nullable=False, index=True)
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    check_out_date: Mapped[date] = mapped_column(Date, nullable=False)
    nights: Mapped[int] = mapped_column(Integer, nullable=False)
    adult_count: Mapped[int] = mapped_column(Integer, default=2)
    child_count: Mapped[int] = mapped_column(Integer, default=0)
    infant_count: Mapped[int] = mapped_column(Integer, default=0)
    room_count: Mapped[int] = mapped_column(Integer, default=1)
    promo_code: Mapped[str | None] = mapped_column(String(50))
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="confirmed", index=True)  # confirmed | cancelled
    guest_name: Mapped[str | None] = mapped_column(String(200))
    special_requests: Mapped[str | None] = mapped_column(Text)
    # Settlement
    settlement_currency: Mapped[str | None] = mapped_column(String(3))
    exchange_rate: Mapped[Decimal | None] = mapped_column(Numeric(14, 6))
    settlement_total: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    lines: Mapped[list["ReservationRoomLine"]] = relationship(
        back_populates="reservation", cascade="all, delete-orphan", order_by="ReservationRoomLine.room_number"
    )


class ReservationRoomLine(Base):
    __tablename__ = "reservation_room_lines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    reservation_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    room_type_id: Mapped[int] = mapped_column(Integer, ForeignKey("room_types.id"), nullable=False)
    room_number: Mapped[int] = mapped_column(Integer, nullable=False)
    nightly_snapshot: Mapped[list] = mapped_column(JSONB, nullable=False)
    promo_code: Mapped[str | None] = mapped_column(String(50))
    room_subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    extras_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    line_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    inventory_status: Mapped[str] = mapped_column(String(20), default="held")  # held | released
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    reservation: Mapped["Reservation"] = relationship(back_populates="lines")
