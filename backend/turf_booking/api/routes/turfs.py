"""
Turf endpoints: public listing with Redis caching, owner publishing, and
the public occupied-slot view.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from turf_booking.api.deps import get_admission_service
from turf_booking.core.logging import get_logger
from turf_booking.core.security import Principal, get_current_principal
from turf_booking.db.session import get_db
from turf_booking.schemas.interval import OccupiedSlot
from turf_booking.schemas.turf import TurfCreate, TurfResponse, TurfListItem
from turf_booking.services.admission_service import AdmissionService
from turf_booking.services.cache_service import get_cached_turfs, set_cached_turfs, invalidate_turf_cache
from turf_booking.services.turf_service import create_turf, list_turfs, list_owner_turfs

logger = get_logger(__name__)
router = APIRouter(prefix="/turfs", tags=["Turfs"])


@router.get("/", response_model=list[TurfListItem])
async def list_turfs_endpoint(db: AsyncSession = Depends(get_db)):
    """
    List every turf with its owner's name and email.
    Results are cached in Redis and invalidated when a turf is published.
    """
    cached = await get_cached_turfs()
    if cached is not None:
        logger.info("turfs_list_cache_hit")
        return cached

    turfs = await list_turfs(db)
    response_data = [TurfListItem.model_validate(t).model_dump() for t in turfs]
    await set_cached_turfs(response_data)
    return response_data


@router.post("/", response_model=TurfResponse, status_code=status.HTTP_201_CREATED)
async def create_turf_endpoint(
    turf_data: TurfCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Publish a new turf. Owners only."""
    turf = await create_turf(db, turf_data, principal)
    # The cached list must not be dropped before the new turf is visible
    await db.commit()
    await invalidate_turf_cache()
    return turf


@router.get("/mine", response_model=list[TurfResponse])
async def list_my_turfs(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Turfs owned by the caller. Owners only."""
    return await list_owner_turfs(db, principal)


@router.get("/{turf_id}/occupied", response_model=list[OccupiedSlot])
async def list_occupied(
    turf_id: int,
    date: str = Query(..., description="Calendar date, YYYY-MM-DD"),
    admission: AdmissionService = Depends(get_admission_service),
):
    """
    Occupied hour windows (bookings and blocks) for a turf on one date.
    Public and never cached; clients render availability from it.
    """
    return await admission.list_occupied(turf_id, date)
