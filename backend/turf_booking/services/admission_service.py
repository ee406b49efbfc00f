"""
Admission service: decides whether a requested hour window may be granted.

Request lifecycle:
  Received -> Validated -> Conflict-Checked -> Committed | Rejected

The pre-check (find_conflicts) gives a fast rejection that names the
overlapping intervals. The interval store's commit repeats the check under
the slot lock and version guard; that second check is the real correctness
boundary and runs on every admission even when the pre-check passed.
"""

import time
from datetime import date, datetime
from typing import Any, Optional

from turf_booking.core.errors import AdmissionError, Forbidden, IntervalConflict, InvalidRequest, SlotOccupied
from turf_booking.core.logging import get_logger
from turf_booking.core.metrics import admission_latency, record_admission
from turf_booking.core.security import Principal
from turf_booking.models.interval import Interval, IntervalKind
from turf_booking.schemas.interval import BookingView, OccupiedSlot
from turf_booking.services.interval_store import IntervalStore
from turf_booking.services.turf_service import TurfDirectory

logger = get_logger(__name__)

FIRST_HOUR = 0
LAST_HOUR = 24


def _parse_hour(value: Any, field: str) -> int:
    if value is None:
        raise InvalidRequest(f"{field} is required")
    if isinstance(value, bool):
        raise InvalidRequest(f"{field} must be an integer hour")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidRequest(f"{field} must be an integer hour")


def _parse_date(value: Any) -> date:
    if value is None:
        raise InvalidRequest("date is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise InvalidRequest("date must be a calendar date in YYYY-MM-DD format")


def validate_window(day: Any, start_hour: Any, end_hour: Any) -> tuple[date, int, int]:
    """
    Normalize and check a requested window.

    Accepts a date or ISO date string and integer (or integral) hours.
    Hours are whole-hour slots inside one day: 0 <= start < end <= 24.
    """
    parsed_day = _parse_date(day)
    start = _parse_hour(start_hour, "start_hour")
    end = _parse_hour(end_hour, "end_hour")

    if not FIRST_HOUR <= start < LAST_HOUR:
        raise InvalidRequest(f"start_hour must be between {FIRST_HOUR} and {LAST_HOUR - 1}")
    if not FIRST_HOUR < end <= LAST_HOUR:
        raise InvalidRequest(f"end_hour must be between {FIRST_HOUR + 1} and {LAST_HOUR}")
    if start >= end:
        raise InvalidRequest("start_hour must be before end_hour")

    return parsed_day, start, end


class AdmissionService:
    """Validates, role-checks and commits booking and block requests."""

    def __init__(self, store: IntervalStore, directory: TurfDirectory):
        self.store = store
        self.directory = directory

    async def request_booking(
        self,
        turf_id: int,
        day: Any,
        start_hour: Any,
        end_hour: Any,
        principal: Principal,
    ) -> BookingView:
        """Reserve a window for the calling user. Any authenticated role may book."""
        interval = await self._admit(
            IntervalKind.BOOKING, turf_id, day, start_hour, end_hour, principal
        )
        summaries = await self.directory.describe({interval.turf_id})
        return _booking_view(interval, summaries)

    async def request_block(
        self,
        turf_id: int,
        day: Any,
        start_hour: Any,
        end_hour: Any,
        principal: Principal,
    ) -> Interval:
        """Withhold a window for offline use. Only the turf's owner may block."""
        return await self._admit(
            IntervalKind.BLOCK, turf_id, day, start_hour, end_hour, principal
        )

    async def list_occupied(self, turf_id: int, day: Any) -> list[OccupiedSlot]:
        """Public availability view; no identity required."""
        parsed_day = _parse_date(day)
        intervals = await self.store.list_for_turf(turf_id, parsed_day)
        return [OccupiedSlot.model_validate(i) for i in intervals]

    async def list_bookings(
        self, principal: Principal, user_id: Optional[int] = None
    ) -> list[BookingView]:
        """The caller's bookings joined with turf name and location."""
        if user_id is not None and user_id != principal.user_id:
            raise Forbidden("You can only view your own bookings")

        bookings = await self.store.list_for_user(principal.user_id)
        summaries = await self.directory.describe({b.turf_id for b in bookings})
        return [_booking_view(b, summaries) for b in bookings]

    async def _admit(
        self,
        kind: IntervalKind,
        turf_id: int,
        day: Any,
        start_hour: Any,
        end_hour: Any,
        principal: Principal,
    ) -> Interval:
        started = time.perf_counter()
        try:
            interval = await self._decide(kind, turf_id, day, start_hour, end_hour, principal)
        except AdmissionError as e:
            record_admission(kind.value, e.code)
            logger.info(
                "admission_rejected",
                kind=kind.value,
                turf_id=turf_id,
                user_id=principal.user_id,
                reason=e.code,
                detail=e.detail,
            )
            raise
        finally:
            admission_latency.labels(kind=kind.value).observe(time.perf_counter() - started)

        record_admission(kind.value, "committed")
        return interval

    async def _decide(
        self,
        kind: IntervalKind,
        turf_id: int,
        day: Any,
        start_hour: Any,
        end_hour: Any,
        principal: Principal,
    ) -> Interval:
        # Step 1: Shape
        parsed_day, start, end = validate_window(day, start_hour, end_hour)

        # Step 2: Resource and role gate, before any conflict check
        turf = await self.directory.get_turf(turf_id)
        if kind is IntervalKind.BLOCK and turf.owner_id != principal.user_id:
            raise Forbidden("You can only block slots for your own turfs")

        # Step 3: Pre-check
        conflicts = await self.store.find_conflicts(turf_id, parsed_day, start, end)
        if conflicts:
            raise SlotOccupied("Time slot is already occupied", conflicts)

        # Step 4: Guarded commit; a concurrent winner surfaces here
        try:
            return await self.store.commit(
                turf_id, parsed_day, start, end, kind, principal.user_id
            )
        except IntervalConflict as e:
            raise SlotOccupied("Time slot is already occupied", e.conflicts) from e


def _booking_view(interval: Interval, summaries: dict) -> BookingView:
    view = BookingView.model_validate(interval)
    view.turf = summaries.get(interval.turf_id)
    return view
