"""Room inventory ledger: all-or-nothing reserve and release across a stay."""

import logging
from datetime import date, timedelta

from staydesk.services.rates.errors import InsufficientInventory, InventoryConfigError, InvalidStayError
from staydesk.services.rates.ports import InventoryStore
from staydesk.services.rates.types import InventoryRecord

logger = logging.getLogger(__name__)


def _normalize(dates: list[date], count: int) -> list[date]:
    if count < 1:
        raise InvalidStayError("Room count must be at least 1", {"count": count})
    if not dates:
        raise InvalidStayError("No dates given")
    return sorted(set(dates))


class InventoryLedger:
    def __init__(self, store: InventoryStore):
        self.store = store

    async def check_and_reserve(self, hotel_id: int, room_type_id: int, dates: list[date], count: int) -> None:
        """Reserve `count` rooms on every date, or none at all."""
        dates = _normalize(dates, count)
        async with self.store.locked(hotel_id, room_type_id, dates) as rows:
            short: dict[date, int] = {}
            for d in dates:
                record = rows.get(d)
                remaining = record.capacity - record.reserved if record else 0
                if remaining < count:
                    short[d] = max(remaining, 0)
            if short:
                logger.warning(
                    f"Insufficient inventory hotel={hotel_id} room_type={room_type_id} "
                    f"count={count} short={[d.isoformat() for d in sorted(short)]}"
                )
                raise InsufficientInventory(room_type_id, count, short)

            for d in dates:
                rows[d].reserved += count
        logger.info(
            f"Reserved {count} room(s) hotel={hotel_id} room_type={room_type_id} "
            f"{dates[0]}..{dates[-1]}"
        )

    async def release(self, hotel_id: int, room_type_id: int, dates: list[date], count: int) -> None:
        """Inverse of check_and_reserve. Never drives a reserved counter below zero."""
        dates = _normalize(dates, count)
        async with self.store.locked(hotel_id, room_type_id, dates) as rows:
            for d in dates:
                record = rows.get(d)
                if record is None:
                    logger.warning(f"Release on missing inventory row hotel={hotel_id} room_type={room_type_id} {d}")
                    continue
                if record.reserved < count:
                    logger.warning(
                        f"Release of {count} exceeds reserved {record.reserved} on {d} "
                        f"(hotel={hotel_id} room_type={room_type_id}), clamping to zero"
                    )
                record.reserved = max(record.reserved - count, 0)
        logger.info(
            f"Released {count} room(s) hotel={hotel_id} room_type={room_type_id} "
            f"{dates[0]}..{dates[-1]}"
        )

    async def set_inventory(
        self,
        hotel_id: int,
        room_type_id: int,
        start: date,
        end: date,
        available: int,
        allocated: int | None = None,
        days_of_week: list[int] | None = None,
        notes: str | None = None,
    ) -> list[InventoryRecord]:
        """Operator upsert over [start, end]. days_of_week uses 0=Monday .. 6=Sunday."""
        if end < start:
            raise InventoryConfigError("end must not be before start", {"start": start.isoformat(), "end": end.isoformat()})
        if available < 0:
            raise InventoryConfigError("available_rooms must be >= 0", {"available_rooms": available})
        if allocated is not None and not 0 <= allocated <= available:
            raise InventoryConfigError(
                "allocated_rooms must be between 0 and available_rooms",
                {"available_rooms": available, "allocated_rooms": allocated},
            )

        dates = [start + timedelta(days=i) for i in range((end - start).days + 1)]
        if days_of_week:
            wanted = set(days_of_week)
            dates = [d for d in dates if d.weekday() in wanted]
        if not dates:
            return []

        capacity = allocated if allocated is not None else available
        async with self.store.locked(hotel_id, room_type_id, dates) as rows:
            conflicts = [
                {"date": d.isoformat(), "reserved_rooms": rows[d].reserved}
                for d in dates
                if d in rows and rows[d].reserved > capacity
            ]
            if conflicts:
                raise InventoryConfigError("Capacity would drop below reserved rooms", {"conflicts": conflicts})

            updated = []
            for d in dates:
                record = rows.get(d)
                if record is None:
                    record = InventoryRecord(hotel_id=hotel_id, room_type_id=room_type_id, date=d)
                    rows[d] = record
                record.available = available
                record.allocated = allocated
                if notes is not None:
                    record.notes = notes
                updated.append(record)
        logger.info(
            f"Inventory set hotel={hotel_id} room_type={room_type_id} {len(updated)} day(s) "
            f"available={available} allocated={allocated}"
        )
        return updated

    async def snapshot(self, hotel_id: int, room_type_id: int, start: date, end: date) -> list[InventoryRecord]:
        return await self.store.read_range(hotel_id, room_type_id, start, end)

    async def remaining_rooms(self, hotel_id: int, room_type_id: int, dates: list[date]) -> int | None:
        """Minimum remaining rooms over the dates; None when no inventory rows exist.

        A date without a row counts as zero once any row exists.
        """
        if not dates:
            return None
        records = await self.store.read_range(hotel_id, room_type_id, min(dates), max(dates))
        if not records:
            return None
        by_date = {r.date: r for r in records}
        return min(by_date[d].remaining if d in by_date else 0 for d in dates)
