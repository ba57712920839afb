"""Quote router: price a stay."""

from datetime import date

from fastapi import APIRouter, Depends

from staydesk.dependencies import get_quote_service, get_today
from staydesk.schemas.quote import QuoteRequest
from staydesk.services.rates.quote_service import QuoteService
from staydesk.services.rates.types import StayQuoteRequest

router = APIRouter()


def to_stay_request(req: QuoteRequest, today: date) -> StayQuoteRequest:
    return StayQuoteRequest(
        room_type_id=req.room_type_id,
        check_in=req.check_in,
        check_out=req.check_out,
        today=req.booking_date or today,
        adult_count=req.adult_count,
        child_count=req.child_count,
        infant_count=req.infant_count,
        breakfast=req.breakfast,
        extra_bed=req.extra_bed,
        baby_cot=req.baby_cot,
        promo_code=req.promo_code or None,
    )


@router.post("")
async def create_quote(
    req: QuoteRequest,
    service: QuoteService = Depends(get_quote_service),
    today: date = Depends(get_today),
):
    quote = await service.get_quote(to_stay_request(req, today))
    return quote.to_dict()
