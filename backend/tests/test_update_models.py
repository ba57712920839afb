"""
Tests for PUT bodies: fields may be left out, but required columns cannot be nulled.
"""

import httpx
import pytest
from pydantic import ValidationError

from staydesk.database import get_db
from staydesk.main import app
from staydesk.routers.hotels import HotelUpdate, RoomTypeUpdate
from staydesk.routers.promotions import PromotionUpdate
from staydesk.routers.seasons import SeasonUpdate


async def no_db():
    yield None


@pytest.fixture
async def client():
    app.dependency_overrides[get_db] = no_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


class TestNullRejection:
    def test_promotion_window_cannot_be_null(self):
        with pytest.raises(ValidationError, match="booking_end_date cannot be null"):
            PromotionUpdate(booking_end_date=None)

    def test_promotion_optional_text_can_be_cleared(self):
        update = PromotionUpdate(description=None, terms_and_conditions=None)
        assert update.model_dump(exclude_unset=True) == {"description": None, "terms_and_conditions": None}

    def test_empty_body_is_a_no_op(self):
        assert PromotionUpdate().model_dump(exclude_unset=True) == {}
        assert SeasonUpdate().model_dump(exclude_unset=True) == {}

    def test_season_fields_cannot_be_null(self):
        with pytest.raises(ValidationError, match="label, season_name cannot be null"):
            SeasonUpdate(season_name=None, label=None)

    def test_hotel_currency_cannot_be_null(self):
        with pytest.raises(ValidationError):
            HotelUpdate(currency=None)

    def test_room_type_rate_cannot_be_null(self):
        with pytest.raises(ValidationError):
            RoomTypeUpdate(breakfast_rate_adult=None)


class TestNullRejectionOverHttp:
    async def test_promotion_put_with_null_date(self, client):
        resp = await client.put("/api/promotions/1", json={"booking_end_date": None})
        assert resp.status_code == 422

    async def test_season_put_with_null_end_date(self, client):
        resp = await client.put("/api/seasons/10", json={"end_date": None})
        assert resp.status_code == 422
