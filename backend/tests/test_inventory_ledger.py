"""
Tests for the room inventory ledger: holds, releases, operator updates.
"""

import asyncio
from datetime import date

import pytest

from staydesk.services.rates.errors import InsufficientInventory, InvalidStayError, InventoryConfigError
from staydesk.services.rates.inventory_ledger import InventoryLedger
from staydesk.services.rates.memory import InMemoryStore
from staydesk.services.rates.types import InventoryState, stay_dates

from factories import CHECK_IN, CHECK_OUT, HOTEL_ID, ROOM_TYPE_ID, inventory

NIGHTS = stay_dates(CHECK_IN, CHECK_OUT)


def stored(store: InMemoryStore, d: date):
    return store.inventory[(HOTEL_ID, ROOM_TYPE_ID, d)]


class TestReserve:
    """All-or-nothing holds."""

    async def test_reserve_increments_every_night(self, store):
        await InventoryLedger(store).check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, NIGHTS, 2)
        assert [stored(store, d).reserved for d in NIGHTS] == [2, 2]

    async def test_last_room_fills_the_night(self, empty_store):
        empty_store.put_inventory(inventory(CHECK_IN, available=5, reserved=4))
        await InventoryLedger(empty_store).check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, [CHECK_IN], 1)
        record = stored(empty_store, CHECK_IN)
        assert record.reserved == 5
        assert record.state == InventoryState.FULL

    async def test_full_night_rejected(self, empty_store):
        empty_store.put_inventory(inventory(CHECK_IN, available=5, reserved=5))
        with pytest.raises(InsufficientInventory) as exc_info:
            await InventoryLedger(empty_store).check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, [CHECK_IN], 1)
        assert exc_info.value.code == "INSUFFICIENT_INVENTORY"
        assert exc_info.value.details["short_dates"] == [{"date": "2026-01-05", "remaining": 0}]
        assert stored(empty_store, CHECK_IN).reserved == 5

    async def test_one_short_night_rejects_whole_stay(self, empty_store):
        empty_store.put_inventory(inventory(NIGHTS[0], available=5))
        empty_store.put_inventory(inventory(NIGHTS[1], available=5, reserved=4))
        with pytest.raises(InsufficientInventory) as exc_info:
            await InventoryLedger(empty_store).check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, NIGHTS, 2)
        assert exc_info.value.short_dates == [NIGHTS[1]]
        assert stored(empty_store, NIGHTS[0]).reserved == 0
        assert stored(empty_store, NIGHTS[1]).reserved == 4

    async def test_missing_row_means_no_rooms(self, empty_store):
        empty_store.put_inventory(inventory(NIGHTS[0]))
        with pytest.raises(InsufficientInventory) as exc_info:
            await InventoryLedger(empty_store).check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, NIGHTS, 1)
        assert exc_info.value.details["short_dates"] == [{"date": "2026-01-06", "remaining": 0}]
        assert stored(empty_store, NIGHTS[0]).reserved == 0

    async def test_allocation_is_the_ceiling(self, empty_store):
        empty_store.put_inventory(inventory(CHECK_IN, available=10, allocated=2))
        ledger = InventoryLedger(empty_store)
        await ledger.check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, [CHECK_IN], 2)
        with pytest.raises(InsufficientInventory):
            await ledger.check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, [CHECK_IN], 1)

    async def test_invalid_count(self, store):
        with pytest.raises(InvalidStayError):
            await InventoryLedger(store).check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, NIGHTS, 0)

    async def test_no_dates(self, store):
        with pytest.raises(InvalidStayError):
            await InventoryLedger(store).check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, [], 1)

    async def test_concurrent_holds_on_last_room(self, empty_store):
        empty_store.put_inventory(inventory(CHECK_IN, available=1))
        ledger = InventoryLedger(empty_store)
        results = await asyncio.gather(
            ledger.check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, [CHECK_IN], 1),
            ledger.check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, [CHECK_IN], 1),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, InsufficientInventory)]
        assert len(failures) == 1
        assert results.count(None) == 1
        assert stored(empty_store, CHECK_IN).reserved == 1


class TestRelease:
    """Releases undo holds and never go negative."""

    async def test_reserve_then_release_restores_counts(self, store):
        ledger = InventoryLedger(store)
        await ledger.check_and_reserve(HOTEL_ID, ROOM_TYPE_ID, NIGHTS, 3)
        await ledger.release(HOTEL_ID, ROOM_TYPE_ID, NIGHTS, 3)
        assert [stored(store, d).reserved for d in NIGHTS] == [0, 0]

    async def test_over_release_clamps_at_zero(self, empty_store):
        empty_store.put_inventory(inventory(CHECK_IN, reserved=1))
        await InventoryLedger(empty_store).release(HOTEL_ID, ROOM_TYPE_ID, [CHECK_IN], 3)
        assert stored(empty_store, CHECK_IN).reserved == 0

    async def test_release_skips_missing_rows(self, empty_store):
        empty_store.put_inventory(inventory(NIGHTS[0], reserved=2))
        await InventoryLedger(empty_store).release(HOTEL_ID, ROOM_TYPE_ID, NIGHTS, 1)
        assert stored(empty_store, NIGHTS[0]).reserved == 1
        assert (HOTEL_ID, ROOM_TYPE_ID, NIGHTS[1]) not in empty_store.inventory


class TestSetInventory:
    """Operator upserts."""

    async def test_creates_rows_for_range(self, empty_store):
        updated = await InventoryLedger(empty_store).set_inventory(
            HOTEL_ID, ROOM_TYPE_ID, date(2026, 1, 1), date(2026, 1, 3), available=8
        )
        assert [r.date for r in updated] == [date(2026, 1, 1), date(2026, 1, 2), date(2026, 1, 3)]
        assert stored(empty_store, date(2026, 1, 3)).available == 8

    async def test_days_of_week_filter(self, empty_store):
        # 2026-01-05 is a Monday
        updated = await InventoryLedger(empty_store).set_inventory(
            HOTEL_ID, ROOM_TYPE_ID, date(2026, 1, 5), date(2026, 1, 18), available=3, days_of_week=[5, 6]
        )
        assert [r.date for r in updated] == [
            date(2026, 1, 10), date(2026, 1, 11), date(2026, 1, 17), date(2026, 1, 18),
        ]

    async def test_keeps_reserved_counts(self, empty_store):
        empty_store.put_inventory(inventory(CHECK_IN, available=5, reserved=3))
        await InventoryLedger(empty_store).set_inventory(HOTEL_ID, ROOM_TYPE_ID, CHECK_IN, CHECK_IN, available=7)
        record = stored(empty_store, CHECK_IN)
        assert record.available == 7
        assert record.reserved == 3

    async def test_capacity_below_reserved_rejected(self, empty_store):
        empty_store.put_inventory(inventory(CHECK_IN, available=5, reserved=3))
        with pytest.raises(InventoryConfigError) as exc_info:
            await InventoryLedger(empty_store).set_inventory(
                HOTEL_ID, ROOM_TYPE_ID, CHECK_IN, CHECK_IN, available=5, allocated=2
            )
        assert exc_info.value.details["conflicts"] == [{"date": "2026-01-05", "reserved_rooms": 3}]
        assert stored(empty_store, CHECK_IN).allocated is None

    async def test_allocated_above_available_rejected(self, empty_store):
        with pytest.raises(InventoryConfigError):
            await InventoryLedger(empty_store).set_inventory(
                HOTEL_ID, ROOM_TYPE_ID, CHECK_IN, CHECK_IN, available=2, allocated=3
            )

    async def test_end_before_start_rejected(self, empty_store):
        with pytest.raises(InventoryConfigError):
            await InventoryLedger(empty_store).set_inventory(
                HOTEL_ID, ROOM_TYPE_ID, CHECK_OUT, CHECK_IN, available=2
            )


class TestRemainingRooms:
    """Minimum remaining rooms across a stay."""

    async def test_minimum_over_nights(self, empty_store):
        empty_store.put_inventory(inventory(NIGHTS[0], available=5, reserved=1))
        empty_store.put_inventory(inventory(NIGHTS[1], available=5, reserved=3))
        assert await InventoryLedger(empty_store).remaining_rooms(HOTEL_ID, ROOM_TYPE_ID, NIGHTS) == 2

    async def test_no_rows_is_unknown(self, empty_store):
        assert await InventoryLedger(empty_store).remaining_rooms(HOTEL_ID, ROOM_TYPE_ID, NIGHTS) is None

    async def test_missing_night_counts_as_zero(self, empty_store):
        empty_store.put_inventory(inventory(NIGHTS[0]))
        assert await InventoryLedger(empty_store).remaining_rooms(HOTEL_ID, ROOM_TYPE_ID, NIGHTS) == 0

    async def test_snapshot_is_ordered(self, store):
        rows = await InventoryLedger(store).snapshot(HOTEL_ID, ROOM_TYPE_ID, date(2026, 1, 1), date(2026, 1, 31))
        assert [r.date for r in rows] == NIGHTS
