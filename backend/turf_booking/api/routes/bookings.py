"""
Booking endpoints backed by conflict-checked slot admission.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from turf_booking.api.deps import get_admission_service
from turf_booking.core.security import Principal, get_current_principal
from turf_booking.schemas.interval import IntervalRequest, BookingView
from turf_booking.services.admission_service import AdmissionService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingView, status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: IntervalRequest,
    principal: Principal = Depends(get_current_principal),
    admission: AdmissionService = Depends(get_admission_service),
):
    """
    Book an hour window on a turf.

    Rejected with 409 slot_occupied when the window overlaps an existing
    booking or block, including one committed by a concurrent request.
    """
    return await admission.request_booking(
        request.turf_id, request.date, request.start_hour, request.end_hour, principal
    )


@router.get("/", response_model=list[BookingView])
async def list_user_bookings(
    user_id: Optional[int] = Query(None),
    principal: Principal = Depends(get_current_principal),
    admission: AdmissionService = Depends(get_admission_service),
):
    """Bookings of the authenticated user with turf name and location."""
    return await admission.list_bookings(principal, user_id)
