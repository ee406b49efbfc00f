from turf_booking.models.user import User, Role
from turf_booking.models.turf import Turf
from turf_booking.models.interval import Interval, IntervalKind, TurfDay

__all__ = ["User", "Role", "Turf", "Interval", "IntervalKind", "TurfDay"]
