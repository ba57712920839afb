"""Hotel catalog models: hotels and their room types."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staydesk.database import Base


class Hotel(Base):
    __tablename__ = "hotels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    hotel_code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    hotel_name: Mapped[str] = mapped_column(String(100), nullable=False)
    hotel_name_en: Mapped[str | None] = mapped_column(String(100))
    country: Mapped[str | None] = mapped_column(String(50))
    region: Mapped[str | None] = mapped_column(String(50))
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    room_types: Mapped[list["RoomType"]] = relationship(
        back_populates="hotel", cascade="all, delete-orphan", order_by="RoomType.display_order"
    )


class RoomType(Base):
    __tablename__ = "room_types"
    __table_args__ = (UniqueConstraint("hotel_id", "room_type_code", name="uq_room_types_hotel_code"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    hotel_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    room_type_code: Mapped[str] = mapped_column(String(50), nullable=False)
    room_type_name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    max_adults: Mapped[int] = mapped_column(Integer, default=2)
    max_children: Mapped[int] = mapped_column(Integer, default=1)
    max_infants: Mapped[int] = mapped_column(Integer, default=1)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    # Per-person breakfast rates, charged per night
    breakfast_rate_adult: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    breakfast_rate_child: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    breakfast_rate_infant: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    # Flat one-time charges per stay
    extra_bed_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    baby_cot_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    hotel: Mapped["Hotel"] = relationship(back_populates="room_types")
