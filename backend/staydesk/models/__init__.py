from staydesk.models.hotel import Hotel, RoomType
from staydesk.models.season import Season, SeasonRate
from staydesk.models.promotion import Promotion, PromotionBenefit, PromotionDailyRate
from staydesk.models.inventory import RoomInventory
from staydesk.models.reservation import Reservation, ReservationRoomLine

__all__ = [
    "Hotel",
    "Promotion",
    "PromotionBenefit",
    "PromotionDailyRate",
    "Reservation",
    "ReservationRoomLine",
    "RoomInventory",
    "RoomType",
    "Season",
    "SeasonRate",
]
