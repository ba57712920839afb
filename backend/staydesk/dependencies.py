from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.config import settings
from staydesk.database import get_db
from staydesk.services.rates.ports import InventoryStore, RateStore
from staydesk.services.rates.quote_service import QuoteService
from staydesk.services.rates.sql_store import SqlInventoryStore, SqlRateStore


def get_today() -> date:
    """Booking date: today in the business timezone."""
    return datetime.now(ZoneInfo(settings.business_timezone)).date()


async def get_rate_store(db: AsyncSession = Depends(get_db)) -> RateStore:
    return SqlRateStore(db)


async def get_inventory_store(db: AsyncSession = Depends(get_db)) -> InventoryStore:
    return SqlInventoryStore(db, autocommit=True)


async def get_quote_service(
    rates: RateStore = Depends(get_rate_store),
    inventory: InventoryStore = Depends(get_inventory_store),
) -> QuoteService:
    return QuoteService(rates, inventory)
