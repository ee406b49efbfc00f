"""
Owner endpoint for withholding hour windows from booking.
"""

from fastapi import APIRouter, Depends, status

from turf_booking.api.deps import get_admission_service
from turf_booking.core.security import Principal, get_current_principal
from turf_booking.schemas.interval import IntervalRequest, IntervalResponse
from turf_booking.services.admission_service import AdmissionService

router = APIRouter(prefix="/blocks", tags=["Blocks"])


@router.post("/", response_model=IntervalResponse, status_code=status.HTTP_201_CREATED)
async def create_block(
    request: IntervalRequest,
    principal: Principal = Depends(get_current_principal),
    admission: AdmissionService = Depends(get_admission_service),
):
    """Block a window on one of the caller's own turfs (403 otherwise)."""
    return await admission.request_block(
        request.turf_id, request.date, request.start_hour, request.end_hour, principal
    )
