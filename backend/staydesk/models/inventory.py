"""Room inventory model: per hotel, room type and date counters."""

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from staydesk.database import Base


class RoomInventory(Base):
    __tablename__ = "room_inventory"
    __table_args__ = (
        UniqueConstraint("hotel_id", "room_type_id", "inventory_date", name="uq_room_inventory_day"),
        CheckConstraint("available_rooms >= 0", name="ck_room_inventory_available"),
        CheckConstraint("reserved_rooms >= 0", name="ck_room_inventory_reserved"),
        CheckConstraint(
            "allocated_rooms IS NULL OR (allocated_rooms >= 0 AND allocated_rooms <= available_rooms)",
            name="ck_room_inventory_allocated",
        ),
        Index("idx_inventory_room_type_date", "room_type_id", "inventory_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    hotel_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False
    )
    room_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("room_types.id", ondelete="CASCADE"), nullable=False
    )
    inventory_date: Mapped[date] = mapped_column(Date, nullable=False)
    available_rooms: Mapped[int] = mapped_column(Integer, default=0)
    allocated_rooms: Mapped[int | None] = mapped_column(Integer)  # channel ceiling, unset = none
    reserved_rooms: Mapped[int] = mapped_column(Integer, default=0)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
