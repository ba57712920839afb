"""Storage ports the rate pipeline reads from and writes through."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import date
from decimal import Decimal

from staydesk.services.rates.types import (
    DailyRateRecord,
    InventoryRecord,
    PromotionRecord,
    RoomTypeRecord,
    SeasonRecord,
)


class RateStore(ABC):
    @abstractmethod
    async def get_room_type(self, room_type_id: int) -> RoomTypeRecord | None:
        ...

    @abstractmethod
    async def list_seasons(self, hotel_id: int) -> list[SeasonRecord]:
        """Active seasons of one hotel."""
        ...

    @abstractmethod
    async def season_rates(self, room_type_id: int) -> dict[int, Decimal]:
        """Base nightly rate per season id for a room type."""
        ...

    @abstractmethod
    async def list_promotions(self, hotel_id: int) -> list[PromotionRecord]:
        """All promotions of a hotel, active or not, with their benefits."""
        ...

    @abstractmethod
    async def daily_rates(
        self, promotion_ids: list[int], room_type_id: int, start: date, end: date
    ) -> list[DailyRateRecord]:
        """Promotion daily rates for a room type with stay_date in [start, end)."""
        ...


class InventoryStore(ABC):
    @abstractmethod
    def locked(
        self, hotel_id: int, room_type_id: int, dates: list[date]
    ) -> AbstractAsyncContextManager[dict[date, InventoryRecord]]:
        """Lock the rows for the given dates and yield them keyed by date.

        Dates with no row are absent from the mapping. Records mutated or
        added to the mapping are persisted when the block exits normally;
        nothing is written if it raises.
        """
        ...

    @abstractmethod
    async def read_range(self, hotel_id: int, room_type_id: int, start: date, end: date) -> list[InventoryRecord]:
        """Unlocked read of rows with date in [start, end], ordered by date."""
        ...
