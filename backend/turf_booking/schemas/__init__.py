from turf_booking.schemas.user import UserCreate, UserResponse, UserLogin, Token
from turf_booking.schemas.turf import TurfCreate, TurfResponse, TurfListItem
from turf_booking.schemas.interval import (
    IntervalRequest, IntervalResponse, OccupiedSlot, BookingView, TurfSummary,
)

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token",
    "TurfCreate", "TurfResponse", "TurfListItem",
    "IntervalRequest", "IntervalResponse", "OccupiedSlot", "BookingView", "TurfSummary",
]
