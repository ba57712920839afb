"""
Shared pytest fixtures: an in-memory store loaded with one demo hotel.

Hotel 1 has room type 4 (breakfast 15/adult) and room type 5. One peak season
covers Dec 2025 to Feb 2026. EARLYWINTER2025 prices room type 4 on
2026-01-05 ($100) and 2026-01-06 ($110).
"""

from datetime import date
from decimal import Decimal

import pytest

from staydesk.services.rates.memory import InMemoryStore
from staydesk.services.rates.quote_service import QuoteService

from factories import (
    OTHER_ROOM_TYPE_ID,
    ROOM_TYPE_ID,
    daily_rate,
    inventory,
    make_promotion,
    make_room_type,
    make_season,
)


@pytest.fixture
def empty_store():
    """Store with the room types only."""
    store = InMemoryStore()
    store.add_room_type(make_room_type(ROOM_TYPE_ID))
    store.add_room_type(make_room_type(OTHER_ROOM_TYPE_ID))
    return store


@pytest.fixture
def store(empty_store):
    """Demo hotel with a peak season, EARLYWINTER2025 and 5 rooms a night."""
    empty_store.add_season(
        make_season(10, date(2025, 12, 1), date(2026, 2, 28)),
        rates={ROOM_TYPE_ID: Decimal("150.00"), OTHER_ROOM_TYPE_ID: Decimal("120.00")},
    )
    empty_store.add_promotion(
        make_promotion(1, "EARLYWINTER2025"),
        rates=[
            daily_rate(1, date(2026, 1, 5), "100.00"),
            daily_rate(1, date(2026, 1, 6), "110.00"),
        ],
    )
    for d in (date(2026, 1, 5), date(2026, 1, 6)):
        empty_store.put_inventory(inventory(d))
    return empty_store


@pytest.fixture
def quote_service(store):
    return QuoteService(store, store)
