"""
Pydantic schemas for booking, block and occupancy payloads.

Request fields are deliberately loose (`date` as text, hours as whatever the
client sent) so the admission service owns the validation rules and reports
them as `invalid_request` rather than a generic body error.
"""

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel

from turf_booking.models.interval import IntervalKind


class IntervalRequest(BaseModel):
    turf_id: int
    date: Any = None
    start_hour: Any = None
    end_hour: Any = None


class OccupiedSlot(BaseModel):
    start_hour: int
    end_hour: int
    kind: IntervalKind

    model_config = {"from_attributes": True}


class IntervalResponse(BaseModel):
    id: int
    turf_id: int
    date: dt.date
    start_hour: int
    end_hour: int
    kind: IntervalKind
    holder_id: int
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class TurfSummary(BaseModel):
    id: int
    name: str
    location: str


class BookingView(IntervalResponse):
    turf: Optional[TurfSummary] = None
